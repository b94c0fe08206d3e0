"""JPEG encode/decode helpers on top of Pillow."""

from __future__ import annotations

import io
from typing import Any, BinaryIO

from PIL import Image, UnidentifiedImageError
from loguru import logger

from core.errors import PhotoStorageError

DEFAULT_JPEG_QUALITY = 95


def _jpeg_ready(image: Any) -> Any:
    """Return `image` in a mode the JPEG encoder accepts."""
    if image.mode in ("RGB", "L", "CMYK"):
        return image
    return image.convert("RGB")


def encode_jpeg(image: Any, stream: BinaryIO, quality: int = DEFAULT_JPEG_QUALITY) -> None:
    """Write `image` to `stream` as JPEG.

    Raises:
        PhotoStorageError: If Pillow cannot encode the buffer or the stream
            rejects the bytes.
    """
    if image is None:
        raise PhotoStorageError("Couldn't save bitmap")
    try:
        _jpeg_ready(image).save(stream, format="JPEG", quality=int(quality))
    except (ValueError, TypeError, AttributeError, OSError) as ex:
        raise PhotoStorageError(f"Couldn't save bitmap: {ex}") from ex


def encode_jpeg_bytes(image: Any, quality: int = DEFAULT_JPEG_QUALITY) -> bytes:
    """Return JPEG bytes for `image`."""
    buf = io.BytesIO()
    encode_jpeg(image, buf, quality)
    return buf.getvalue()


def decode_jpeg(data: bytes) -> Any | None:
    """Decode `data` into a fully loaded Pillow image.

    Returns None when the bytes are not a decodable image.
    """
    try:
        with Image.open(io.BytesIO(data)) as im:
            im.load()
            return im.copy()
    except (UnidentifiedImageError, OSError, ValueError) as ex:
        logger.debug("Decode failed ({} bytes): {}", len(data), ex)
        return None
