"""Main window: capture controls and the private photo grid."""

from __future__ import annotations

from pathlib import Path
from typing import Any

from PySide6.QtCore import QPoint, QSize, Qt
from PySide6.QtGui import QAction, QIcon, QPixmap
from PySide6.QtWidgets import (
    QCheckBox,
    QHBoxLayout,
    QListView,
    QListWidget,
    QListWidgetItem,
    QMainWindow,
    QMenu,
    QPushButton,
    QVBoxLayout,
    QWidget,
)
from loguru import logger

from app.viewmodels.main_vm import MainVM
from app.views.constants import (
    DEFAULT_GRID_ROWS,
    DEFAULT_THUMB_SIZE,
    DELETE_TEXT,
    GRID_SPACING_PX,
    PHOTO_NAME_ROLE,
    SAVE_PRIVATELY_TEXT,
    TAKE_PHOTO_TEXT,
    TOAST_MS,
    WINDOW_TITLE,
)
from app.views.image_tasks import FutureRelay
from app.views.media_utils import pil_to_qimage, placeholder_image
from core.models import Notification, Photo
from core.services.capture_coordinator import PhotoCaptureCoordinator
from infrastructure.logging import open_directory_in_explorer


class MainWindow(QMainWindow):
    """Take photos, toggle private saving, and browse/delete private photos."""

    def __init__(
        self,
        vm: MainVM,
        coordinator: PhotoCaptureCoordinator,
        settings: Any | None = None,
        photos_dir: Path | None = None,
        log_dir: Path | None = None,
    ) -> None:
        """Initialize the window.

        Args:
            vm: ViewModel holding toggle, permissions, and listing
            coordinator: Coordinator whose listeners feed the grid and status bar
            settings: Settings instance for grid sizing
            photos_dir: Shared photos folder opened from the File menu
            log_dir: Log folder opened from the Help menu
        """
        super().__init__()
        self._vm = vm
        self._photos_dir = photos_dir
        self._log_dir = log_dir

        self._thumb_size = DEFAULT_THUMB_SIZE
        self._grid_rows = DEFAULT_GRID_ROWS
        if settings is not None:
            self._thumb_size = settings.get_int("ui.thumbnail_size", DEFAULT_THUMB_SIZE)
            self._grid_rows = max(1, settings.get_int("ui.grid_rows", DEFAULT_GRID_ROWS))

        self._relay = FutureRelay(self)
        coordinator.add_photos_listener(self._relay.wrap(self.show_photos))
        coordinator.add_notification_listener(self._relay.wrap(self.show_notification))

        self._setup_ui()
        self._setup_menus()

    def _setup_ui(self) -> None:
        """Build buttons and the horizontally scrolling photo grid."""
        self.setWindowTitle(WINDOW_TITLE)

        self.btn_take_photo = QPushButton(TAKE_PHOTO_TEXT)
        self.btn_take_photo.clicked.connect(self._on_take_photo)

        self.switch_private = QCheckBox(SAVE_PRIVATELY_TEXT)
        self.switch_private.setChecked(self._vm.is_private)
        self.switch_private.toggled.connect(self._on_private_toggled)

        self.rv_private_photos = QListWidget()
        self.rv_private_photos.setViewMode(QListView.IconMode)
        self.rv_private_photos.setFlow(QListView.TopToBottom)
        self.rv_private_photos.setWrapping(True)
        self.rv_private_photos.setResizeMode(QListView.Adjust)
        self.rv_private_photos.setMovement(QListView.Static)
        self.rv_private_photos.setSpacing(GRID_SPACING_PX)
        self.rv_private_photos.setIconSize(QSize(self._thumb_size, self._thumb_size))
        cell = self._thumb_size + 2 * GRID_SPACING_PX
        self.rv_private_photos.setFixedHeight(cell * self._grid_rows + 4 * GRID_SPACING_PX)
        self.rv_private_photos.setContextMenuPolicy(Qt.CustomContextMenu)
        self.rv_private_photos.customContextMenuRequested.connect(self._on_context_menu)
        self.rv_private_photos.itemDoubleClicked.connect(self._on_item_double_clicked)

        controls = QHBoxLayout()
        controls.addWidget(self.btn_take_photo)
        controls.addWidget(self.switch_private)
        controls.addStretch(1)

        root = QVBoxLayout()
        root.addLayout(controls)
        root.addWidget(self.rv_private_photos)
        root.addStretch(1)

        central = QWidget()
        central.setLayout(root)
        self.setCentralWidget(central)
        self.resize(900, cell * self._grid_rows + 160)

    def _setup_menus(self) -> None:
        """File and Help menus."""
        file_menu = self.menuBar().addMenu("&File")
        act_refresh = QAction("Refresh", self)
        act_refresh.triggered.connect(lambda: self._vm.refresh())
        file_menu.addAction(act_refresh)
        if self._photos_dir is not None:
            act_open_photos = QAction("Open shared photos folder", self)
            act_open_photos.triggered.connect(lambda: self._open_dir(self._photos_dir))
            file_menu.addAction(act_open_photos)
        file_menu.addSeparator()
        act_exit = QAction("Exit", self)
        act_exit.triggered.connect(self.close)
        file_menu.addAction(act_exit)

        if self._log_dir is not None:
            help_menu = self.menuBar().addMenu("&Help")
            act_open_logs = QAction("Open log folder", self)
            act_open_logs.triggered.connect(lambda: self._open_dir(self._log_dir))
            help_menu.addAction(act_open_logs)

    # Listener targets (GUI thread)
    def show_photos(self, photos: list[Photo]) -> None:
        """Replace the grid contents with `photos`."""
        self.rv_private_photos.clear()
        for photo in photos:
            qimg = pil_to_qimage(photo.pixels) or placeholder_image(self._thumb_size)
            item = QListWidgetItem(QIcon(QPixmap.fromImage(qimg)), "")
            item.setToolTip(photo.name)
            item.setData(PHOTO_NAME_ROLE, photo.name)
            self.rv_private_photos.addItem(item)

    def show_notification(self, notification: Notification) -> None:
        """Show the pass/fail message in the status bar."""
        self.statusBar().showMessage(notification.message, TOAST_MS)

    # UI events
    def _on_take_photo(self) -> None:
        self.btn_take_photo.setEnabled(False)
        fut = self._vm.take_photo()
        self._relay.deliver(fut, lambda _ok: self.btn_take_photo.setEnabled(True))

    def _on_private_toggled(self, checked: bool) -> None:
        self._vm.is_private = bool(checked)

    def _on_item_double_clicked(self, item: QListWidgetItem) -> None:
        self._delete_item(item)

    def _on_context_menu(self, pos: QPoint) -> None:
        item = self.rv_private_photos.itemAt(pos)
        if item is None:
            return
        menu = QMenu(self)
        act_delete = menu.addAction(DELETE_TEXT)
        chosen = menu.exec(self.rv_private_photos.viewport().mapToGlobal(pos))
        if chosen == act_delete:
            self._delete_item(item)

    def _delete_item(self, item: QListWidgetItem) -> None:
        name = item.data(PHOTO_NAME_ROLE)
        if not name:
            return
        logger.info("Delete requested: {}", name)
        self._vm.delete_photo(str(name))

    def _open_dir(self, path: Path | None) -> None:
        if path is None:
            return
        path.mkdir(parents=True, exist_ok=True)
        if not open_directory_in_explorer(path):
            self.statusBar().showMessage(f"Cannot open {path}", TOAST_MS)
