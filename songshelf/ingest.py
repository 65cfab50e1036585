"""
Upload ingestion: stage the payload, then give it its final name.

The payload is written into the album directory under a provisional name
first. Once the song and singer names are known the file is renamed to
``"<song> - <singer><ext>"``, with ``-1``, ``-2``, ... appended to the base
name until the name is free. Existing files are never overwritten.
"""

import os
import threading
import time
import uuid
import weakref
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional, Union

from werkzeug.utils import secure_filename

from songshelf.exceptions import InvalidName, RenameFailed, StagingFailed
from songshelf.library import DEFAULT_ALBUM, album_path
from songshelf.logging_config import get_logger

DEFAULT_SONG_NAME = "UnknownSong"
DEFAULT_SINGER_NAME = "UnknownSinger"
SUCCESS_MESSAGE = "File uploaded and renamed successfully"

_FORBIDDEN_CHARS = ("/", "\\", "\x00")

logger = get_logger(__name__)

_locks_guard = threading.Lock()
_album_locks: "weakref.WeakValueDictionary[str, threading.Lock]" = weakref.WeakValueDictionary()


def album_lock(album_dir: Union[str, Path]) -> threading.Lock:
    """Return the lock serialising finalization inside *album_dir*."""
    key = os.path.abspath(album_dir)
    with _locks_guard:
        lock = _album_locks.get(key)
        if lock is None:
            lock = _album_locks[key] = threading.Lock()
        return lock


@dataclass(frozen=True)
class UploadFields:
    """Text fields submitted alongside an upload, trimmed and defaulted."""

    album: str = DEFAULT_ALBUM
    song_name: str = DEFAULT_SONG_NAME
    singer_name: str = DEFAULT_SINGER_NAME

    @classmethod
    def from_form(cls, form: Mapping[str, str]) -> "UploadFields":
        return cls(
            album=_field(form, "album", DEFAULT_ALBUM),
            song_name=_field(form, "songName", DEFAULT_SONG_NAME),
            singer_name=_field(form, "singerName", DEFAULT_SINGER_NAME),
        )

    @property
    def base_name(self) -> str:
        return f"{self.song_name} - {self.singer_name}"

    def validate(self) -> None:
        """Reject values that would place a file outside its album directory."""
        if self.album in (".", ".."):
            raise InvalidName("album", self.album)
        for name, value in (
            ("album", self.album),
            ("songName", self.song_name),
            ("singerName", self.singer_name),
        ):
            if any(ch in value for ch in _FORBIDDEN_CHARS):
                raise InvalidName(name, value)


@dataclass(frozen=True)
class UploadResult:
    file: str
    album: str
    message: str = SUCCESS_MESSAGE

    def to_dict(self) -> dict:
        return {"message": self.message, "file": self.file, "album": self.album}


def _field(form: Mapping[str, str], key: str, default: str) -> str:
    value = form.get(key)
    if value is None:
        return default
    return str(value).strip() or default


def extension_of(filename: str) -> str:
    """Return the last-dot extension of *filename*, case preserved.

    ``"track.WAV"`` gives ``".WAV"``, ``"a.tar.gz"`` gives ``".gz"`` and
    names without a dot (or with only a leading one) give ``""``.
    """
    return os.path.splitext(filename or "")[1]


def provisional_name(original_filename: str, now_ms: Optional[int] = None) -> str:
    """Build the staging name for an upload.

    The result never contains ``" - "``, which every final name does, so a
    staged file cannot be mistaken for (or collide with) a finished one.
    """
    if now_ms is None:
        now_ms = int(time.time() * 1000)
    safe = secure_filename(original_filename or "") or "upload"
    return f"{now_ms}-{uuid.uuid4().hex[:8]}-{safe}"


def stage(songs_root: Union[str, Path], album: str, payload, original_filename: str) -> Path:
    """Write *payload* into the album directory under a provisional name.

    *payload* is anything with a ``save(path)`` method, such as a
    ``werkzeug.datastructures.FileStorage``.
    """
    album_dir = album_path(songs_root, album)
    try:
        album_dir.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        logger.error(f"Error creating album folder {album_dir}: {e}")
        raise StagingFailed(str(album_dir), e.strerror or str(e)) from e

    staged_path = album_dir / provisional_name(original_filename)
    try:
        payload.save(str(staged_path))
    except OSError as e:
        logger.error(f"Error writing upload to {staged_path}: {e}")
        _discard(staged_path)
        raise StagingFailed(str(staged_path), e.strerror or str(e)) from e

    logger.debug(f"Staged upload '{original_filename}' at {staged_path}")
    return staged_path


def _discard(path: Path) -> None:
    try:
        path.unlink()
    except FileNotFoundError:
        pass
    except OSError as e:
        logger.warning(f"Could not remove partial upload {path}: {e}")


def resolve_final_name(album_dir: Union[str, Path], base_name: str, extension: str) -> str:
    """Return the first of ``base+ext``, ``base-1+ext``, ... not present in *album_dir*."""
    album_dir = Path(album_dir)
    candidate = f"{base_name}{extension}"
    count = 1
    while (album_dir / candidate).exists():
        candidate = f"{base_name}-{count}{extension}"
        count += 1
    return candidate


def finalize(staged_path: Union[str, Path], fields: UploadFields, original_filename: str) -> UploadResult:
    """Move a staged upload to its collision-free final name.

    On failure the staged file is left where it is.
    """
    staged_path = Path(staged_path)
    album_dir = staged_path.parent
    extension = extension_of(original_filename)

    with album_lock(album_dir):
        final_path = album_dir / f"{fields.base_name}{extension}"
        try:
            final_name = resolve_final_name(album_dir, fields.base_name, extension)
            final_path = album_dir / final_name
            os.rename(staged_path, final_path)
        except OSError as e:
            logger.error(f"Error renaming file {staged_path} to {final_path}: {e}")
            raise RenameFailed(str(staged_path), str(final_path), e.strerror or str(e)) from e

    logger.info(f"Stored '{final_name}' in album '{fields.album}'")
    return UploadResult(file=final_name, album=fields.album)


def ingest(songs_root: Union[str, Path], payload, original_filename: str,
           form: Mapping[str, str]) -> UploadResult:
    """Stage then finalize one upload."""
    fields = UploadFields.from_form(form)
    fields.validate()
    staged_path = stage(songs_root, fields.album, payload, original_filename)
    return finalize(staged_path, fields, original_filename)
