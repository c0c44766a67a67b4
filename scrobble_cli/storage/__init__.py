"""
Storage Layer.

This package handles the configuration file, which doubles as the store for
the API credentials and the persisted session key.
"""

from .config_manager import ConfigManager

__all__ = ["ConfigManager"]
