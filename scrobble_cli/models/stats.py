"""
Dataclass for tracking scrobble session statistics.
"""

import time
from dataclasses import dataclass, field


@dataclass
class ScrobbleStats:
    """Tracks the outcome of a scrobble session, batch by batch."""

    batches_submitted: int = 0
    tracks_submitted: int = 0
    tracks_accepted: int = 0
    dry_run: bool = False
    _start_time: float = field(default_factory=time.monotonic, repr=False)

    def record_batch(self, submitted: int, accepted: int) -> None:
        self.batches_submitted += 1
        self.tracks_submitted += submitted
        self.tracks_accepted += accepted

    @property
    def tracks_ignored(self) -> int:
        """Tracks Last.fm received but did not accept (filtered, duplicates, ...)."""
        return max(0, self.tracks_submitted - self.tracks_accepted)

    @property
    def elapsed(self) -> float:
        return time.monotonic() - self._start_time
