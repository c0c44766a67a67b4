"""
The orchestrator that turns a playlist into a stream of submitted scrobble batches.
"""

import logging
import time
from collections.abc import AsyncGenerator, Callable, Sequence
from contextlib import aclosing
from typing import Optional

from scrobble_cli.api.auth import SessionManager
from scrobble_cli.api.client import ScrobblerAPIClient
from scrobble_cli.exceptions import EmptyPlaylistError, NotAuthenticatedError
from scrobble_cli.models.album import AlbumDetails, ScrobbleOptions

from .queue_builder import ScrobbleQueue, build_scrobble_queue

log = logging.getLogger(__name__)


class Scrobbler:
    """Orchestrates the scrobbling of a list of albums, one batch at a time."""

    def __init__(
        self,
        api_client: ScrobblerAPIClient,
        session: SessionManager,
        clock: Callable[[], float] = time.time,
    ):
        self.api_client = api_client
        self.session = session
        self._clock = clock

    def plan(
        self, albums: Sequence[AlbumDetails], options: Optional[ScrobbleOptions] = None
    ) -> ScrobbleQueue:
        """Builds the scrobble queue without submitting anything."""
        if not albums:
            raise EmptyPlaylistError()
        return build_scrobble_queue(albums, options, now=self._clock())

    async def scrobble_albums(
        self, albums: Sequence[AlbumDetails], options: Optional[ScrobbleOptions] = None
    ) -> AsyncGenerator[int, None]:
        """
        Submits the albums to Last.fm, yielding the accepted count of each batch.

        Batches are sent strictly one after the other. If a batch fails its error
        propagates and ends the stream; batches already sent stay scrobbled.
        Stopping iteration early leaves the remaining batches unsent.

        Raises:
            NotAuthenticatedError: If there is no session key.
            EmptyPlaylistError: If `albums` is empty.
        """
        if not self.session.is_authenticated:
            raise NotAuthenticatedError()
        if not albums:
            raise EmptyPlaylistError()

        queue = self.plan(albums, options)
        async with aclosing(self.submit_queue(queue)) as stream:
            async for accepted in stream:
                yield accepted

    async def submit_queue(self, queue: ScrobbleQueue) -> AsyncGenerator[int, None]:
        """
        Submits an already built queue, yielding the accepted count of each batch.

        Raises:
            NotAuthenticatedError: If there is no session key.
        """
        if not self.session.is_authenticated:
            raise NotAuthenticatedError()

        batches = queue.batches
        log.info(f"Scrobbling {queue.size} tracks in {len(batches)} batches...")

        for number, batch in enumerate(batches, 1):
            accepted = await self.api_client.submit_batch(
                batch, self.session.session_key
            )
            log.debug(f"Batch {number}/{len(batches)}: {accepted}/{len(batch)} accepted")
            yield accepted
