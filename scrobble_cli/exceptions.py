"""
Defines custom exceptions for the application to allow for more specific error handling.

Every error meant for the user derives from `ScrobbleCliError`, which carries a
human-readable message and, optionally, the lower-level exception that caused it.
"""


class ScrobbleCliError(Exception):
    """Base exception for all application-specific errors."""

    def __init__(self, message: str, cause: Exception | None = None):
        super().__init__(message)
        self.message = message
        self.cause = cause


class NotAuthenticatedError(ScrobbleCliError):
    """Raised when scrobbling is attempted without a session key."""

    def __init__(self, cause: Exception | None = None):
        super().__init__(
            "Oops! You need to login to Last.fm first with your username and password.",
            cause,
        )


class EmptyPlaylistError(ScrobbleCliError):
    """Raised when there is nothing to scrobble."""

    def __init__(self, cause: Exception | None = None):
        super().__init__(
            "Your playlist is empty! Try to add some albums to it first.", cause
        )


class AuthenticationError(ScrobbleCliError):
    """Raised when login fails due to invalid credentials."""


class SessionExpiredError(AuthenticationError):
    """Raised when Last.fm rejects the session key while scrobbling."""


class CommunicationError(ScrobbleCliError):
    """Raised when Last.fm is unreachable or returns an unreadable response."""

    def __init__(self, cause: Exception | None = None):
        super().__init__(
            "Failed to communicate to Last.fm. Please try again later.", cause
        )


class RemoteAPIError(ScrobbleCliError):
    """Raised when Last.fm answers with an error code we have no special handling for."""

    def __init__(
        self, message: str, code: int | None = None, cause: Exception | None = None
    ):
        super().__init__(message, cause)
        self.code = code


class LoginError(RemoteAPIError):
    """Raised when the session request fails for a reason other than bad credentials."""


class ScrobbleSubmissionError(RemoteAPIError):
    """Raised when a batch of scrobbles is rejected."""


class DurationFormatError(ScrobbleCliError, ValueError):
    """Raised when a track duration is present but not in 'MM:SS' form."""


class PlaylistFormatError(ScrobbleCliError):
    """Raised when a playlist file cannot be read or validated."""


class ConfigurationError(ScrobbleCliError):
    """Raised for issues related to configuration loading or validation."""
