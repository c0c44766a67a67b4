"""
Pydantic model for application configuration.
Provides robust validation for all settings.
"""

import re

from pydantic import BaseModel, ConfigDict, Field, field_validator

from scrobble_cli import __version__

DEFAULT_USER_AGENT = f"scrobble-cli/{__version__}"

_HEX32 = re.compile(r"^[0-9a-f]{32}$")


class ScrobblerConfig(BaseModel):
    """A validated configuration model for the application."""

    model_config = ConfigDict(validate_assignment=True, str_strip_whitespace=True)

    # Last.fm API application credentials
    api_key: str
    shared_secret: str

    # User session
    username: str = ""
    session_key: str = ""

    # Request & scrobble settings
    user_agent: str = DEFAULT_USER_AGENT
    offset_in_seconds: int = 0

    # Internal fields not loaded from INI file
    config_path: str = Field(..., repr=False)

    @field_validator("api_key", "shared_secret")
    @classmethod
    def validate_credential(cls, v: str) -> str:
        """Last.fm API keys and secrets are 32 lowercase hex characters."""
        v = v.lower()
        if not _HEX32.match(v):
            raise ValueError("Must be a 32 character hexadecimal string.")
        return v

    @field_validator("user_agent")
    @classmethod
    def validate_user_agent(cls, v: str) -> str:
        if not v:
            raise ValueError("User agent cannot be empty.")
        return v

    @field_validator("offset_in_seconds")
    @classmethod
    def validate_offset(cls, v: int) -> int:
        if v < 0:
            raise ValueError("Offset must be zero or a positive number of seconds.")
        return v

    @property
    def is_logged_in(self) -> bool:
        return bool(self.session_key)

    @classmethod
    def get_ini_keys(cls) -> set[str]:
        """Returns a set of all keys that are expected in the INI file."""
        internal_fields = {"config_path"}
        return {key for key in cls.model_fields if key not in internal_fields}
