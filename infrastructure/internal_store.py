"""App-private photo storage.

Photos are plain JPEG files named `<name>.jpg` inside a single private
directory. There is no index or sidecar file: the directory listing is the
source of truth.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

from loguru import logger

from core.errors import PhotoStorageError
from core.models import Photo, StoredFile
from core.services.interfaces import JPEG_SUFFIX, IPrivatePhotoStore
from infrastructure.bitmap_codec import DEFAULT_JPEG_QUALITY, decode_jpeg, encode_jpeg
from infrastructure.utils import is_plain_file_name


class InternalPhotoStore(IPrivatePhotoStore):
    """Save, list, and delete JPEG files in a private directory."""

    def __init__(self, directory: str | Path, quality: int = DEFAULT_JPEG_QUALITY) -> None:
        self._dir = Path(directory)
        self._quality = quality

    @property
    def directory(self) -> Path:
        """The private directory."""
        return self._dir

    def save(self, name: str, image: Any) -> None:
        """Encode `image` and write it to `<dir>/<name>.jpg`, replacing any existing file.

        The file is written in place, so an interrupted write can leave a
        truncated file behind.

        Raises:
            PhotoStorageError: If `name` has a directory part, or encoding or
                writing fails.
        """
        if not is_plain_file_name(name):
            raise PhotoStorageError(f"Invalid photo name: {name!r}")
        path = self._dir / f"{name}{JPEG_SUFFIX}"
        try:
            self._dir.mkdir(parents=True, exist_ok=True)
            with path.open("wb") as stream:
                encode_jpeg(image, stream, self._quality)
        except PhotoStorageError:
            raise
        except OSError as ex:
            raise PhotoStorageError(f"Couldn't write {path}: {ex}") from ex

    def read_files(self) -> list[StoredFile]:
        """Read every readable `.jpg` regular file, in directory order."""
        if not self._dir.is_dir():
            return []
        files: list[StoredFile] = []
        with os.scandir(self._dir) as entries:
            for entry in entries:
                if not entry.name.endswith(JPEG_SUFFIX):
                    continue
                try:
                    if not entry.is_file() or not os.access(entry.path, os.R_OK):
                        continue
                    with open(entry.path, "rb") as f:
                        data = f.read()
                except OSError as ex:
                    logger.debug("Skip unreadable {}: {}", entry.path, ex)
                    continue
                files.append(StoredFile(filename=entry.name, data=data))
        return files

    def list_photos(self) -> list[Photo]:
        """Return all private photos decoded to pixel buffers."""
        return [Photo(name=f.filename, pixels=decode_jpeg(f.data)) for f in self.read_files()]

    def delete(self, filename: str) -> bool:
        """Remove `<dir>/<filename>`.

        Returns:
            True if the file existed and was removed, False if it was missing.

        Raises:
            PhotoStorageError: If `filename` has a directory part, or on any
                other OS error.
        """
        if not is_plain_file_name(filename):
            raise PhotoStorageError(f"Invalid photo file name: {filename!r}")
        path = self._dir / filename
        try:
            path.unlink()
        except FileNotFoundError:
            return False
        except OSError as ex:
            raise PhotoStorageError(f"Couldn't delete {path}: {ex}") from ex
        return True
