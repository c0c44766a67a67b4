"""
Data Models Layer.

This package contains the Pydantic models and dataclasses that define the core
data structures used throughout the application: albums and tracks, scrobble
entries, configuration and session statistics.
"""

from .album import AlbumDetails, AlbumTrack, InclusionMask, ScrobbleEntry, ScrobbleOptions
from .config import ScrobblerConfig
from .stats import ScrobbleStats

__all__ = [
    "AlbumDetails",
    "AlbumTrack",
    "InclusionMask",
    "ScrobbleEntry",
    "ScrobbleOptions",
    "ScrobbleStats",
    "ScrobblerConfig",
]
