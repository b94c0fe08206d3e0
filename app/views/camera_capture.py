"""Single-shot camera capture using QtMultimedia."""

from __future__ import annotations

from concurrent.futures import Future
from typing import Any

from PySide6.QtCore import QObject
from PySide6.QtGui import QImage
from PySide6.QtMultimedia import QCamera, QImageCapture, QMediaCaptureSession, QMediaDevices
from loguru import logger

from app.views.media_utils import qimage_to_pil
from core.services.interfaces import ICaptureSource


class QtCameraCapture(QObject, ICaptureSource):
    """Start the default camera, grab one preview frame, stop the camera.

    The future resolves with a Pillow image, or None when no camera is
    available or capture fails. Only one capture runs at a time; a second
    request while busy resolves to None immediately.
    """

    def __init__(self, parent: QObject | None = None) -> None:
        super().__init__(parent)
        self._session = QMediaCaptureSession(self)
        self._image_capture = QImageCapture(self)
        self._session.setImageCapture(self._image_capture)
        self._image_capture.readyForCaptureChanged.connect(self._on_ready_changed)
        self._image_capture.imageCaptured.connect(self._on_image_captured)
        self._image_capture.errorOccurred.connect(self._on_capture_error)
        self._camera: QCamera | None = None
        self._pending: Future[Any | None] | None = None
        self._requested = False

    def capture(self) -> Future[Any | None]:
        """Capture one frame from the default video input."""
        fut: Future[Any | None] = Future()
        if self._pending is not None:
            logger.warning("Capture already in progress")
            fut.set_result(None)
            return fut

        device = QMediaDevices.defaultVideoInput()
        if device.isNull():
            logger.warning("No camera available")
            fut.set_result(None)
            return fut

        self._pending = fut
        self._camera = QCamera(device, self)
        self._camera.errorOccurred.connect(self._on_camera_error)
        self._session.setCamera(self._camera)
        self._camera.start()
        if self._image_capture.isReadyForCapture():
            self._request_frame()
        return fut

    def _on_ready_changed(self, ready: bool) -> None:
        if ready and self._pending is not None:
            self._request_frame()

    def _request_frame(self) -> None:
        if not self._requested:
            self._requested = True
            self._image_capture.capture()

    def _on_image_captured(self, _request_id: int, image: QImage) -> None:
        self._finish(qimage_to_pil(image))

    def _on_capture_error(self, _request_id: int, _error: Any, message: str) -> None:
        logger.error("Image capture error: {}", message)
        self._finish(None)

    def _on_camera_error(self, _error: Any, message: str) -> None:
        logger.error("Camera error: {}", message)
        self._finish(None)

    def _finish(self, image: Any | None) -> None:
        if self._camera is not None:
            self._camera.stop()
            self._camera.deleteLater()
            self._camera = None
        fut, self._pending = self._pending, None
        self._requested = False
        if fut is not None and not fut.done():
            fut.set_result(image)
