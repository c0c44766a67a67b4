"""
Handles authentication with the Last.fm API: obtaining, restoring and
dropping the session key used to sign scrobble submissions.
"""

import logging
from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from .client import ScrobblerAPIClient

log = logging.getLogger(__name__)


class SessionManager:
    """
    Owns the Last.fm session key for one API client.

    The key is written here only (by `login`, `update_session_key` and `clear`);
    the submission path receives it read-only.
    """

    def __init__(
        self, api_client: "ScrobblerAPIClient", session_key: Optional[str] = None
    ):
        """
        Initializes the session manager.

        Args:
            api_client: The client used to perform the login exchange.
            session_key: A previously persisted session key, if any.
        """
        self._api_client = api_client
        self._session_key = session_key or None

    @property
    def session_key(self) -> Optional[str]:
        return self._session_key

    @property
    def is_authenticated(self) -> bool:
        return self._session_key is not None

    async def login(self, username: str, password: str) -> str:
        """
        Logs in with a username and password and stores the resulting session key.

        Args:
            username: The Last.fm username.
            password: The Last.fm password, sent as-is over HTTPS.

        Returns:
            The new session key.
        """
        session_key = await self._api_client.login(username, password)
        self.update_session_key(session_key)
        return session_key

    def update_session_key(self, session_key: Optional[str]) -> None:
        """Replaces the session key without contacting Last.fm."""
        self._session_key = session_key or None
        if self._session_key:
            log.info(f"Updated session key to: {self._session_key[:8]}...")
        else:
            log.info("Session key cleared.")

    def clear(self) -> None:
        self.update_session_key(None)
