"""
Utility for reading playlist files into album models.
"""

import json
import logging
from pathlib import Path

from pydantic import TypeAdapter, ValidationError

from scrobble_cli.exceptions import PlaylistFormatError
from scrobble_cli.models.album import AlbumDetails

log = logging.getLogger(__name__)

_ALBUM_LIST = TypeAdapter(list[AlbumDetails])


def load_playlist(path: Path) -> list[AlbumDetails]:
    """
    Loads the albums of a JSON playlist file.

    The file holds either a list of albums or an object with an "albums" list.
    Each album is `{"title", "artist", "tracks": [...]}` and each track
    `{"title", "artist"?, "duration"?, "sub_tracks"?}`.
    """
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, UnicodeDecodeError) as e:
        raise PlaylistFormatError(f"Could not read playlist '{path}': {e}", e) from e
    except ValueError as e:
        raise PlaylistFormatError(f"Playlist '{path}' is not valid JSON: {e}", e) from e

    if isinstance(data, dict):
        data = data.get("albums", [])

    try:
        albums = _ALBUM_LIST.validate_python(data)
    except ValidationError as e:
        raise PlaylistFormatError(f"Invalid playlist '{path}':\n{e}", e) from e

    log.debug(f"Loaded {len(albums)} albums from '{path}'")
    return albums
