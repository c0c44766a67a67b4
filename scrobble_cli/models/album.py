"""
Pydantic models for the albums and tracks that make up a listening session.
"""

from dataclasses import dataclass
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

# album index -> (track index -> included)
InclusionMask = dict[int, dict[int, bool]]


class AlbumTrack(BaseModel):
    """A single track of an album, optionally split into sub-tracks (medleys)."""

    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)

    title: str
    artist: Optional[str] = None
    duration: Optional[str] = None  # "MM:SS"
    sub_tracks: Optional[list["AlbumTrack"]] = None

    @property
    def has_sub_tracks(self) -> bool:
        return bool(self.sub_tracks)


class AlbumDetails(BaseModel):
    """An album with its ordered track list."""

    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)

    title: str
    artist: Optional[str] = None
    tracks: list[AlbumTrack] = Field(default_factory=list)


class ScrobbleOptions(BaseModel):
    """User choices applied when turning albums into scrobbles."""

    model_config = ConfigDict(frozen=True)

    inclusion_mask: InclusionMask = Field(default_factory=dict)
    offset_in_seconds: int = Field(default=0, ge=0)

    def is_included(self, album_index: int, track_index: int) -> bool:
        """Tracks are included unless explicitly masked out."""
        return self.inclusion_mask.get(album_index, {}).get(track_index, True)


@dataclass(frozen=True, slots=True)
class ScrobbleEntry:
    """A single Last.fm scrobble entry."""

    artist: str
    track: str
    album: str
    timestamp: int

    def to_params(self, index: int) -> dict[str, str]:
        """Renders the entry as the indexed parameters of a track.scrobble call."""
        return {
            f"artist[{index}]": self.artist,
            f"track[{index}]": self.track,
            f"album[{index}]": self.album,
            f"timestamp[{index}]": str(self.timestamp),
        }
