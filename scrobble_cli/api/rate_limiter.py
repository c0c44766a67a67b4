"""
Keeps outgoing Last.fm calls under the per-account request limit.
"""

import asyncio
import logging
import time

log = logging.getLogger(__name__)

# Last.fm allows an average of five requests per second per API account
LASTFM_CALLS_PER_SECOND = 5.0

# Time without a rate-limit response before the rate starts to recover
RECOVERY_DELAY = 300


class AdaptiveRateLimiter:
    """
    Spaces out calls and backs off when Last.fm answers with HTTP 429 or error 29.

    Nothing is retried here; the limiter only slows down the calls that follow.
    """

    def __init__(
        self,
        initial_calls_per_second: float = LASTFM_CALLS_PER_SECOND,
        max_calls_per_second: float = LASTFM_CALLS_PER_SECOND,
        min_calls_per_second: float = 0.2,
    ):
        self._rate = initial_calls_per_second
        self._max_rate = max_calls_per_second
        self._min_rate = min_calls_per_second
        self._next_call_at = 0.0
        self._limited_at: float | None = None
        self._lock = asyncio.Lock()

    @property
    def rate(self) -> float:
        """The current number of allowed calls per second."""
        return self._rate

    async def on_rate_limited(self) -> None:
        """Halves the call rate after Last.fm reported the limit was exceeded."""
        async with self._lock:
            self._rate = max(self._min_rate, self._rate / 2)
            self._limited_at = time.monotonic()
            log.warning(
                f"[yellow]Last.fm rate limit exceeded, slowing down to "
                f"{self._rate:.1f} calls/s[/yellow]"
            )

    def _recover(self) -> None:
        if self._limited_at is None or self._rate >= self._max_rate:
            return
        if time.monotonic() - self._limited_at > RECOVERY_DELAY:
            self._rate = min(self._max_rate, self._rate * 1.05)

    async def acquire(self) -> None:
        """Waits until the next call is allowed under the current rate."""
        async with self._lock:
            self._recover()

            loop = asyncio.get_running_loop()
            delay = self._next_call_at - loop.time()
            if delay > 0:
                await asyncio.sleep(delay)

            self._next_call_at = loop.time() + 1.0 / self._rate
