"""Conversions between Pillow pixel buffers and Qt images."""

from __future__ import annotations

from typing import Any

from PIL import Image, ImageQt
from PySide6.QtGui import QColor, QImage
from loguru import logger


def pil_to_qimage(pil_img: Any) -> QImage | None:
    """Convert a Pillow image to `QImage` and detach from the source buffer."""
    if pil_img is None:
        return None
    try:
        mode = pil_img.mode
        if mode not in ("RGBA", "RGB"):
            pil_img = pil_img.convert("RGBA")
            mode = pil_img.mode
        if mode == "RGB":
            data = pil_img.tobytes("raw", "RGB")
            qimg = QImage(
                data, pil_img.width, pil_img.height, pil_img.width * 3, QImage.Format_RGB888
            )
        else:
            data = pil_img.tobytes("raw", "RGBA")
            qimg = QImage(
                data, pil_img.width, pil_img.height, pil_img.width * 4, QImage.Format_RGBA8888
            )
        if qimg.isNull():
            return None
        return qimg.copy()
    except (ValueError, TypeError) as ex:
        logger.debug("PIL->QImage convert failed: {}", ex)
        return None


def qimage_to_pil(qimg: QImage) -> Image.Image | None:
    """Convert a captured `QImage` to an RGB Pillow image."""
    if qimg is None or qimg.isNull():
        return None
    try:
        return ImageQt.fromqimage(qimg).convert("RGB")
    except (ValueError, TypeError, OSError) as ex:
        logger.error("QImage->PIL convert failed: {}", ex)
        return None


def placeholder_image(side: int) -> QImage:
    """Grey tile shown for photos that could not be decoded."""
    img = QImage(side, side, QImage.Format_ARGB32)
    img.fill(QColor(220, 220, 220))
    return img
