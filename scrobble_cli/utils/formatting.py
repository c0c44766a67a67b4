"""
Helper functions for formatting data into human-readable strings.
"""


def format_duration(seconds: float) -> str:
    """
    Formats a duration in seconds into a human-readable string (e.g., '2h 34m 12s').
    """
    s = int(seconds)
    hours, remainder = divmod(s, 3600)
    minutes, secs = divmod(remainder, 60)
    parts = []
    if hours > 0:
        parts.append(f"{hours}h")
    if minutes > 0:
        parts.append(f"{minutes}m")
    if secs > 0 or not parts:
        parts.append(f"{secs}s")
    return " ".join(parts)


def parse_exclusion(value: str) -> tuple[int, int]:
    """
    Parses an 'ALBUM:TRACK' pair of zero-based indexes (e.g. '0:3').

    Raises:
        ValueError: If the value is not two non-negative integers.
    """
    album, sep, track = value.partition(":")
    if not sep or not album.strip().isdecimal() or not track.strip().isdecimal():
        raise ValueError(f"Expected ALBUM:TRACK indexes, got '{value}'")
    return int(album), int(track)


def build_inclusion_mask(exclusions: list[str]) -> dict[int, dict[int, bool]]:
    """Turns a list of 'ALBUM:TRACK' exclusions into an inclusion mask."""
    mask: dict[int, dict[int, bool]] = {}
    for value in exclusions:
        album, track = parse_exclusion(value)
        mask.setdefault(album, {})[track] = False
    return mask
