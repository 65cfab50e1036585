"""
Read-only listings of the songs storage area.

Expected directory layout::

    <songs_root>/
        default/
            UnknownSong - UnknownSinger.mp3
        Live/
            Encore - Band.mp3
            Encore - Band-1.mp3

Each direct sub-directory of *songs_root* is an album. Entries are returned
in the order the filesystem reports them; callers that need a stable order
sort on their side.
"""

import os
from pathlib import Path
from typing import List, Union

from songshelf.exceptions import DirectoryUnavailable
from songshelf.logging_config import get_logger

AUDIO_EXTENSION = ".mp3"
DEFAULT_ALBUM = "default"

logger = get_logger(__name__)


def album_path(songs_root: Union[str, Path], album: str) -> Path:
    return Path(songs_root) / album


def list_audio_files(songs_root: Union[str, Path], album: str) -> List[str]:
    """Return the names of audio files directly inside *album*.

    A missing album is an error, not an empty album.
    """
    directory = album_path(songs_root, album)
    if album in (".", "..") or any(sep in album for sep in ("/", "\\")):
        logger.warning(f"Refusing to list folder outside the songs root: {album!r}")
        raise DirectoryUnavailable(str(directory), "not an album name")

    try:
        entries = os.listdir(directory)
    except OSError as e:
        logger.error(f"Error reading directory {directory}: {e}")
        raise DirectoryUnavailable(str(directory), e.strerror or str(e)) from e

    return [name for name in entries if name.endswith(AUDIO_EXTENSION)]


def list_albums(songs_root: Union[str, Path]) -> List[str]:
    """Return album directory names, leaving out the fallback album."""
    root = Path(songs_root)
    try:
        with os.scandir(root) as it:
            return [
                entry.name
                for entry in it
                if entry.is_dir(follow_symlinks=False) and entry.name != DEFAULT_ALBUM
            ]
    except OSError as e:
        logger.error(f"Error reading albums directory {root}: {e}")
        raise DirectoryUnavailable(str(root), e.strerror or str(e)) from e
