"""Filesystem-backed permission provider for the shared media folder.

On the desktop "permission" to the shared catalog means the folder exists
and the process may read or write it. Requesting write tries to create the
folder.
"""

from __future__ import annotations

from collections.abc import Iterable
from concurrent.futures import Future
import os
from pathlib import Path

from loguru import logger

from core.services.interfaces import IPermissionProvider, Permission


class FolderPermissionProvider(IPermissionProvider):
    """Answer permission checks with `os.access` on the media folder."""

    def __init__(self, media_root: str | Path) -> None:
        self._root = Path(media_root)

    def check(self, permission: Permission) -> bool:
        """Return True if the folder exists and allows the requested access."""
        if not self._root.is_dir():
            return False
        mode = os.W_OK if permission == Permission.WRITE_EXTERNAL_STORAGE else os.R_OK
        return os.access(self._root, mode)

    def request(self, permissions: Iterable[Permission]) -> Future[dict[Permission, bool]]:
        """Create the folder if needed and report the resulting grants."""
        fut: Future[dict[Permission, bool]] = Future()
        try:
            self._root.mkdir(parents=True, exist_ok=True)
        except OSError as ex:
            logger.warning("Cannot create media folder {}: {}", self._root, ex)
        fut.set_result({p: self.check(p) for p in permissions})
        return fut
