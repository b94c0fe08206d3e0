from __future__ import annotations

from pathlib import Path
import sys

from PySide6.QtWidgets import QApplication
from loguru import logger

from app.viewmodels.main_vm import MainVM
from app.views.camera_capture import QtCameraCapture
from app.views.main_window import MainWindow
from core.services.capture_coordinator import PhotoCaptureCoordinator
from infrastructure.external_store import ExternalPhotoStore
from infrastructure.internal_store import InternalPhotoStore
from infrastructure.logging import init_logging
from infrastructure.media_catalog import FolderMediaCatalog
from infrastructure.permissions import FolderPermissionProvider
from infrastructure.settings import JsonSettings
from infrastructure.utils import (
    default_log_dir,
    default_pictures_dir,
    default_private_dir,
    resolve_dir,
)

BASE_DIR = Path(__file__).parent


def build_coordinator(settings: JsonSettings) -> tuple[PhotoCaptureCoordinator, Path, Path]:
    """Create stores and coordinator from `settings`.

    Returns the coordinator, the private directory, and the shared media folder.
    """
    private_dir = resolve_dir(settings.get("storage.private_dir"), default_private_dir())
    external_dir = resolve_dir(settings.get("storage.external_dir"), default_pictures_dir())
    quality = settings.get_int("storage.jpeg_quality", 95)

    internal = InternalPhotoStore(private_dir, quality=quality)
    external = ExternalPhotoStore(FolderMediaCatalog(external_dir), quality=quality)
    coordinator = PhotoCaptureCoordinator(
        internal,
        external,
        max_workers=settings.get_int("workers.max_workers", 2),
        refresh_on_failed_private_save=settings.get_bool(
            "capture.refresh_on_failed_private_save", True
        ),
    )
    return coordinator, private_dir, external_dir


def main() -> int:
    settings = JsonSettings(BASE_DIR / "settings.json")
    log_dir = init_logging(
        resolve_dir(settings.get("logging.dir"), default_log_dir()),
        level=str(settings.get("logging.level", "INFO")),
    )

    app = QApplication(sys.argv)

    coordinator, private_dir, external_dir = build_coordinator(settings)
    logger.info("Private photos: {} | shared photos: {}", private_dir, external_dir)

    vm = MainVM(
        coordinator,
        QtCameraCapture(),
        FolderPermissionProvider(external_dir),
        scoped_storage=settings.get_bool("storage.scoped_storage", True),
    )
    win = MainWindow(
        vm=vm,
        coordinator=coordinator,
        settings=settings,
        photos_dir=external_dir,
        log_dir=log_dir,
    )
    vm.init_permissions()
    vm.refresh()
    win.statusBar().showMessage("Ready", 2000)
    win.show()

    try:
        return app.exec()
    finally:
        coordinator.shutdown(wait=True)


if __name__ == "__main__":
    raise SystemExit(main())
