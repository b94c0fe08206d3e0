"""Shared media storage for non-private photos."""

from __future__ import annotations

from typing import Any

from loguru import logger

from core.errors import PhotoStorageError
from core.services.interfaces import (
    JPEG_MIME_TYPE,
    JPEG_SUFFIX,
    IMediaCatalog,
    IPhotoStore,
    MediaColumns,
)
from infrastructure.bitmap_codec import DEFAULT_JPEG_QUALITY, encode_jpeg


class ExternalPhotoStore(IPhotoStore):
    """Insert a catalog record and stream the JPEG into it.

    Write permission is the caller's concern; this store does not check it.
    It has no read-back API.
    """

    def __init__(self, catalog: IMediaCatalog, quality: int = DEFAULT_JPEG_QUALITY) -> None:
        self._catalog = catalog
        self._quality = quality

    def save(self, name: str, image: Any) -> None:
        """Create a `<name>.jpg` record with the image size and write the bytes.

        Raises:
            PhotoStorageError: If the catalog refuses the insert or the write fails.
        """
        if image is None:
            raise PhotoStorageError("Couldn't save bitmap")
        values = {
            MediaColumns.DISPLAY_NAME: f"{name}{JPEG_SUFFIX}",
            MediaColumns.MIME_TYPE: JPEG_MIME_TYPE,
            MediaColumns.WIDTH: image.width,
            MediaColumns.HEIGHT: image.height,
        }
        handle = self._catalog.insert(values)
        if handle is None:
            raise PhotoStorageError("Couldn't create media store entry")
        try:
            with self._catalog.open_output_stream(handle) as stream:
                encode_jpeg(image, stream, self._quality)
        except PhotoStorageError:
            raise
        except OSError as ex:
            raise PhotoStorageError(f"Couldn't write media record {handle}: {ex}") from ex
        logger.debug("Media record {} written ({}x{})", handle, image.width, image.height)
