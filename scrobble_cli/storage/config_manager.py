"""
Manages loading, validation, and migration of the INI configuration file.
"""

import configparser
import logging
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from scrobble_cli.exceptions import ConfigurationError
from scrobble_cli.models.config import DEFAULT_USER_AGENT, ScrobblerConfig

log = logging.getLogger(__name__)

DEFAULTS: dict[str, str] = {
    "api_key": "",
    "shared_secret": "",
    "username": "",
    "session_key": "",
    "user_agent": DEFAULT_USER_AGENT,
    "offset_in_seconds": "0",
}


class ConfigManager:
    """Handles all operations related to the application's INI config file."""

    def __init__(self, config_file_path: Path):
        self.config_file_path = config_file_path
        self._parser = configparser.ConfigParser(interpolation=None)

    def load_config(self, cli_options: dict[str, Any] | None = None) -> ScrobblerConfig:
        """
        Loads configuration from the INI file, applies CLI overrides, and validates it.

        Args:
            cli_options: A dictionary of options provided via the command line.

        Returns:
            A validated ScrobblerConfig object.

        Raises:
            ConfigurationError: If the config file is missing, invalid, or validation
            fails.
        """
        if not self.config_file_path.is_file():
            raise ConfigurationError(
                f"Configuration file not found at '{self.config_file_path}'. "
                "Please run 'scrobble-cli init' first."
            )

        self._read()

        if self._migrate_if_needed():
            log.info(
                "[yellow]Configuration file was updated with new default values."
                "[/yellow]"
            )

        config_from_file = self.get_config_as_dict()

        if cli_options:
            config_from_file.update(cli_options)

        try:
            config_dir = self.config_file_path.parent
            return ScrobblerConfig(**config_from_file, config_path=str(config_dir))
        except ValidationError as e:
            raise ConfigurationError(f"Configuration validation failed:\n{e}") from e

    def save_new_config(self, settings: dict[str, Any]) -> None:
        """
        Creates and saves a new configuration file.

        Args:
            settings: A dictionary of settings to save; missing keys get defaults.
        """
        config = configparser.ConfigParser(interpolation=None)
        config["DEFAULT"] = {
            key: str(settings.get(key, default)) for key, default in DEFAULTS.items()
        }
        self._write(config)

    def update_session(self, username: str, session_key: str) -> None:
        """
        Stores the result of a login (or clears it when both values are empty).
        """
        if not self.config_file_path.is_file():
            raise ConfigurationError(
                f"Configuration file not found at '{self.config_file_path}'. "
                "Please run 'scrobble-cli init' first."
            )
        self._read()
        self._parser["DEFAULT"]["username"] = username
        self._parser["DEFAULT"]["session_key"] = session_key
        self._write(self._parser)

    def get_config_as_dict(self) -> dict[str, Any]:
        """Reads the 'DEFAULT' section of the INI file into a dictionary."""
        section = self._parser["DEFAULT"]
        try:
            offset = section.getint("offset_in_seconds", 0)
        except ValueError as e:
            raise ConfigurationError(f"Invalid 'offset_in_seconds' value: {e}") from e
        return {
            "api_key": section.get("api_key", ""),
            "shared_secret": section.get("shared_secret", ""),
            "username": section.get("username", ""),
            "session_key": section.get("session_key", ""),
            "user_agent": section.get("user_agent", DEFAULT_USER_AGENT),
            "offset_in_seconds": offset,
        }

    def _read(self) -> None:
        try:
            self._parser.read(self.config_file_path, encoding="utf-8")
        except configparser.Error as e:
            raise ConfigurationError(f"Error parsing configuration file: {e}") from e

    def _write(self, parser: configparser.ConfigParser) -> None:
        try:
            self.config_file_path.parent.mkdir(parents=True, exist_ok=True)
            with open(self.config_file_path, "w", encoding="utf-8") as configfile:
                parser.write(configfile)
        except OSError as e:
            raise ConfigurationError(f"Failed to save configuration file: {e}") from e

    def _migrate_if_needed(self) -> bool:
        """Adds missing default values to an existing config file."""
        config_section = self._parser["DEFAULT"]
        needs_saving = False

        for key in ScrobblerConfig.get_ini_keys():
            if key not in config_section:
                config_section[key] = DEFAULTS[key]
                needs_saving = True
                log.debug(
                    f"Migrating config: added missing key '{key}' with "
                    f"value '{config_section[key]}'."
                )

        if needs_saving:
            try:
                with open(self.config_file_path, "w", encoding="utf-8") as f:
                    self._parser.write(f)
            except OSError as e:
                log.error(f"Could not save migrated configuration file: {e}")
                return False

        return needs_saving
