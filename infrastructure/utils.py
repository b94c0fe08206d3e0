"""Per-platform locations for application data and shared pictures.

Windows uses `%LOCALAPPDATA%`; other systems follow the XDG base directory
variables with their usual fallbacks.
"""

from __future__ import annotations

import os
from pathlib import Path

APP_NAME = "PhotoStorage"


def app_data_dir() -> Path:
    """Directory for data only this application uses."""
    if os.name == "nt":
        base = os.environ.get("LOCALAPPDATA") or str(Path.home() / "AppData" / "Local")
        return Path(base) / APP_NAME
    base = os.environ.get("XDG_DATA_HOME") or str(Path.home() / ".local" / "share")
    return Path(base) / APP_NAME


def default_private_dir() -> Path:
    """Private photo directory."""
    return app_data_dir() / "files"


def default_log_dir() -> Path:
    """Rotating log directory."""
    return app_data_dir() / "logs"


def default_pictures_dir() -> Path:
    """Shared media folder inside the user's pictures directory."""
    pictures = os.environ.get("XDG_PICTURES_DIR") or str(Path.home() / "Pictures")
    return Path(pictures) / APP_NAME


def resolve_dir(raw: str | None, fallback: Path) -> Path:
    """Expand env vars and `~` in `raw`, or return `fallback` when unset."""
    if not raw:
        return fallback
    return Path(os.path.expanduser(os.path.expandvars(raw)))


def is_plain_file_name(name: str) -> bool:
    """True when `name` is a single path component other than `.` or `..`."""
    return bool(name) and name not in (".", "..") and Path(name).name == name
