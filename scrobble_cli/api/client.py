"""
Async client for the Last.fm scrobbling API (2.0) with request signing and rate limiting.
"""

import asyncio
import json
import logging
from collections.abc import Sequence
from typing import Any, Dict, Optional, Tuple

import aiohttp

from scrobble_cli.exceptions import (
    AuthenticationError,
    CommunicationError,
    LoginError,
    ScrobbleSubmissionError,
    SessionExpiredError,
)
from scrobble_cli.models.album import ScrobbleEntry

from .rate_limiter import AdaptiveRateLimiter
from .signer import sign

log = logging.getLogger(__name__)

# Last.fm error codes
AUTHENTICATION_FAILED = 4
INVALID_SESSION_KEY = 9
INVALID_API_KEY = 10
INVALID_METHOD_SIGNATURE = 13
UNAUTHORIZED_TOKEN = 14
RATE_LIMIT_EXCEEDED = 29

# Codes that mean the stored session can no longer be used
SESSION_ERROR_CODES = frozenset(
    {
        AUTHENTICATION_FAILED,
        INVALID_SESSION_KEY,
        INVALID_API_KEY,
        INVALID_METHOD_SIGNATURE,
        UNAUTHORIZED_TOKEN,
    }
)


class ScrobblerAPIClient:
    """
    Async client for the signed, write side of the Last.fm API.

    Every call is a form-encoded POST carrying an `api_sig` computed over the
    request parameters, `format=json` and the configured User-Agent header.
    """

    BASE_URL = "https://ws.audioscrobbler.com/2.0/"

    def __init__(
        self,
        api_key: str,
        shared_secret: str,
        user_agent: str,
        base_url: Optional[str] = None,
        rate_limiter: Optional[AdaptiveRateLimiter] = None,
    ):
        """
        Initializes the API client.

        Args:
            api_key: The Last.fm API account key.
            shared_secret: The secret paired with `api_key`, used for signing.
            user_agent: Identifier sent with every request.
            base_url: The API root, defaults to `BASE_URL`.
            rate_limiter: Pacing for outgoing requests.
        """
        self.api_key = api_key
        self.user_agent = user_agent
        self.base_url = base_url or self.BASE_URL
        self._shared_secret = shared_secret
        self._session: Optional[aiohttp.ClientSession] = None
        self._rate_limiter = rate_limiter or AdaptiveRateLimiter()

    async def __aenter__(self) -> "ScrobblerAPIClient":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()

    async def _initialize_session(self) -> None:
        """Ensures an active aiohttp session is available."""
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(
                headers={"User-Agent": self.user_agent},
                timeout=aiohttp.ClientTimeout(total=30, connect=10),
            )

    async def close(self) -> None:
        """Gracefully closes the aiohttp session."""
        if self._session and not self._session.closed:
            await self._session.close()

    async def _post_request(self, params: Dict[str, str]) -> Tuple[int, str]:
        """
        Signs and posts `params`, returning the HTTP status and the raw body.

        Raises:
            CommunicationError: If Last.fm cannot be reached.
        """
        await self._initialize_session()
        await self._rate_limiter.acquire()

        body = {
            **params,
            "api_sig": sign(params, self._shared_secret),
            "format": "json",
        }

        try:
            async with self._session.post(self.base_url, data=body) as r:
                return r.status, await r.text()
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            log.debug(f"Request '{params.get('method')}' failed: {e}")
            raise CommunicationError(e) from e

    async def _read_error_code(self, status: int, text: str) -> Any:
        """Extracts the Last.fm `error` code from a failed response."""
        log.info(f"Error response from Last.fm ({status}): {text}")
        if status == 429:
            await self._rate_limiter.on_rate_limited()

        try:
            error_code = json.loads(text)["error"]
        except (ValueError, KeyError, TypeError) as e:
            raise CommunicationError(e) from e

        if error_code == RATE_LIMIT_EXCEEDED and status != 429:
            await self._rate_limiter.on_rate_limited()
        return error_code

    async def login(self, username: str, password: str) -> str:
        """
        Exchanges a username and password for a session key (auth.getMobileSession).

        Returns:
            The new session key.

        Raises:
            AuthenticationError: If Last.fm rejects the credentials.
            LoginError: If Last.fm reports any other error.
            CommunicationError: On network failures or unreadable responses.
        """
        log.info(f"Initializing Last.fm session for {username}...")
        status, text = await self._post_request(
            {
                "method": "auth.getMobileSession",
                "username": username,
                "password": password,
                "api_key": self.api_key,
            }
        )

        if status != 200:
            error_code = await self._read_error_code(status, text)
            if error_code == AUTHENTICATION_FAILED:
                raise AuthenticationError(
                    "Last.fm authentication failed, please try again."
                )
            raise LoginError(
                f"Failed to authenticate to Last.fm ({error_code})!", code=error_code
            )

        try:
            session_key = json.loads(text)["session"]["key"]
            if not isinstance(session_key, str) or not session_key:
                raise ValueError(f"Invalid session key: {session_key!r}")
        except (ValueError, KeyError, TypeError) as e:
            log.error(f"Failed to parse the Last.fm session response: {text}")
            raise CommunicationError(e) from e

        log.info(f"Received new Last.fm session key: {session_key[:8]}...")
        return session_key

    async def submit_batch(
        self, entries: Sequence[ScrobbleEntry], session_key: str
    ) -> int:
        """
        Submits up to 50 scrobbles in a single track.scrobble call.

        An empty batch is a no-op. A 200 response whose body cannot be read is
        counted as a full success rather than failing the whole session.

        Args:
            entries: The scrobbles to submit, in submission order.
            session_key: The authenticated user's session key.

        Returns:
            The number of scrobbles Last.fm accepted.

        Raises:
            SessionExpiredError: If Last.fm rejects the session or signature.
            ScrobbleSubmissionError: If Last.fm reports any other error.
            CommunicationError: On network failures or unreadable error responses.
        """
        if not entries:
            return 0

        log.info(f"Posting {len(entries)} tracks to Last.fm...")
        params = {
            "method": "track.scrobble",
            "api_key": self.api_key,
            "sk": session_key,
        }
        for index, entry in enumerate(entries):
            params.update(entry.to_params(index))

        status, text = await self._post_request(params)

        if status != 200:
            error_code = await self._read_error_code(status, text)
            if error_code in SESSION_ERROR_CODES:
                raise SessionExpiredError(
                    "Last.fm authentication failed, please try re-entering your password."
                )
            raise ScrobbleSubmissionError(
                f"Failed to scrobble to Last.fm ({error_code})!", code=error_code
            )

        try:
            attr = json.loads(text)["scrobbles"]["@attr"]
            accepted = int(attr["accepted"])
            ignored = attr.get("ignored")
        except (ValueError, KeyError, TypeError, AttributeError) as e:
            log.error(f"Failed to parse the Last.fm response: {text} ({e})")
            # assume full success in case accepted can't be parsed
            return len(entries)

        log.debug(
            f"Scrobbled {len(entries)} tracks: {accepted} accepted, {ignored} ignored."
        )
        return accepted
