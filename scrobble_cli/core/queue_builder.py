"""
Turns an ordered selection of albums into time-stamped, size-bounded scrobble batches.

Albums and tracks are walked backwards from the most recently played one while a
single timestamp cursor moves back in time by each track's duration. The track
played first therefore ends up with the earliest timestamp.
"""

import logging
import time
from collections.abc import Sequence
from typing import Optional

from scrobble_cli.exceptions import DurationFormatError
from scrobble_cli.models.album import (
    AlbumDetails,
    AlbumTrack,
    ScrobbleEntry,
    ScrobbleOptions,
)

log = logging.getLogger(__name__)

# Last.fm accepts at most 50 scrobbles per track.scrobble call
MAX_BATCH_SIZE = 50

DEFAULT_TRACK_DURATION = 60
UNKNOWN_ARTIST = "(unknown)"


def parse_duration(duration: Optional[str]) -> int:
    """
    Converts a "MM:SS" (or "H:MM:SS") duration into seconds.

    A missing or blank duration falls back to one minute. A duration that is
    present but not made of non-negative integers raises `DurationFormatError`.
    """
    if duration is None or not duration.strip():
        return DEFAULT_TRACK_DURATION

    seconds = 0
    for part in duration.strip().split(":"):
        part = part.strip()
        if not part.isdecimal():
            raise DurationFormatError(f"Invalid track duration: '{duration}'")
        seconds = seconds * 60 + int(part)
    return seconds


class ScrobbleQueue:
    """
    Accumulates scrobble entries while a timestamp cursor walks back in time.

    Entries must be added from the most recently played track to the first
    played one. `batches` returns them in playback order.
    """

    def __init__(self, start_timestamp: int, batch_size: int = MAX_BATCH_SIZE):
        self.timestamp = start_timestamp
        self.batch_size = batch_size
        self._entries: list[ScrobbleEntry] = []

    def __len__(self) -> int:
        return len(self._entries)

    @property
    def size(self) -> int:
        return len(self._entries)

    def add(self, track: AlbumTrack, album: AlbumDetails) -> ScrobbleEntry:
        """Moves the cursor back by the track's duration and records the track there."""
        # never zero, timestamps must strictly decrease
        self.timestamp -= max(1, parse_duration(track.duration))

        entry = ScrobbleEntry(
            artist=track.artist or album.artist or UNKNOWN_ARTIST,
            track=track.title,
            album=album.title,
            timestamp=self.timestamp,
        )
        self._entries.append(entry)
        return entry

    @property
    def entries(self) -> list[ScrobbleEntry]:
        """All entries in playback order (ascending timestamps)."""
        return self._entries[::-1]

    @property
    def batches(self) -> list[list[ScrobbleEntry]]:
        """The entries split into submission batches, earliest played first."""
        entries = self.entries
        return [
            entries[i : i + self.batch_size]
            for i in range(0, len(entries), self.batch_size)
        ]


def build_scrobble_queue(
    albums: Sequence[AlbumDetails],
    options: Optional[ScrobbleOptions] = None,
    now: Optional[float] = None,
) -> ScrobbleQueue:
    """
    Builds the scrobble queue for a listening session.

    Args:
        albums: The albums in the order they were listened to.
        options: Inclusion mask and time offset; defaults include everything
            and assume listening just finished.
        now: The current time in epoch seconds, defaults to the system clock.

    Returns:
        The populated `ScrobbleQueue`.

    Raises:
        DurationFormatError: If an included track has a malformed duration.
    """
    options = options or ScrobbleOptions()
    if now is None:
        now = time.time()

    queue = ScrobbleQueue(int(now) - options.offset_in_seconds)

    for album_index in range(len(albums) - 1, -1, -1):
        album = albums[album_index]

        for track_index in range(len(album.tracks) - 1, -1, -1):
            track = album.tracks[track_index]

            if not options.is_included(album_index, track_index):
                continue

            if track.has_sub_tracks:
                for sub_track in reversed(track.sub_tracks):
                    queue.add(sub_track, album)
            else:
                queue.add(track, album)

    log.debug(
        f"Built scrobble queue: {queue.size} tracks in {len(queue.batches)} batches."
    )
    return queue
