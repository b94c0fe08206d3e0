"""
UI/view constants centralized for reuse across view modules.
"""

from __future__ import annotations

from PySide6.QtCore import Qt

WINDOW_TITLE: str = "Photo Storage"
TAKE_PHOTO_TEXT: str = "Take photo"
SAVE_PRIVATELY_TEXT: str = "Save privately"
DELETE_TEXT: str = "Delete"

# Data roles
PHOTO_NAME_ROLE: int = Qt.UserRole  # file name of the private photo

# Grid defaults
DEFAULT_THUMB_SIZE: int = 160  # overridable by settings.json
DEFAULT_GRID_ROWS: int = 3
GRID_SPACING_PX: int = 4

# Status bar message duration, matching a long toast
TOAST_MS: int = 3500
