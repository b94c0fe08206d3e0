"""Core service interfaces and shared constants.

The storage layer only talks to the outside world (shared media catalog,
permission system, camera) through the small interfaces declared here, so
infrastructure and UI implementations can be swapped in tests.
"""

from __future__ import annotations

from collections.abc import Iterable
from concurrent.futures import Future
from enum import Enum
from typing import Any, BinaryIO

from core.models import MediaRecord, Photo


class Permission(str, Enum):
    """Capabilities checked against the shared media catalog."""

    READ_EXTERNAL_STORAGE = "read_external_storage"
    WRITE_EXTERNAL_STORAGE = "write_external_storage"


class MediaColumns:
    """Column names accepted by `IMediaCatalog.insert`."""

    DISPLAY_NAME = "display_name"
    MIME_TYPE = "mime_type"
    WIDTH = "width"
    HEIGHT = "height"


JPEG_MIME_TYPE = "image/jpeg"
JPEG_SUFFIX = ".jpg"


class IMediaCatalog:
    """Shared, platform-managed index of user media.

    Attributes are opaque to callers: a record is created with `insert`, its
    bytes are written through `open_output_stream`, and it can be looked up
    again with `query`.
    """

    def insert(self, values: dict[str, Any]) -> str | None:
        """Create a record and return its handle, or None when refused."""
        raise NotImplementedError

    def open_output_stream(self, handle: str) -> BinaryIO:
        """Open a writable binary stream for the record behind `handle`."""
        raise NotImplementedError

    def query(self, **filters: Any) -> list[MediaRecord]:
        """Return records whose columns equal every given filter."""
        raise NotImplementedError


class IPermissionProvider:
    """Platform permission surface."""

    def check(self, permission: Permission) -> bool:
        """Return True if `permission` is currently granted."""
        raise NotImplementedError

    def request(self, permissions: Iterable[Permission]) -> Future[dict[Permission, bool]]:
        """Ask for `permissions`; the future resolves with per-permission grants."""
        raise NotImplementedError


class ICaptureSource:
    """Produces a single captured image per call."""

    def capture(self) -> Future[Any | None]:
        """Resolve with a pixel buffer, or None when the user cancelled."""
        raise NotImplementedError


class IPhotoStore:
    """Write-side contract shared by the internal and external stores."""

    def save(self, name: str, image: Any) -> None:
        """Encode `image` and persist it under `name`."""
        raise NotImplementedError


class IPrivatePhotoStore(IPhotoStore):
    """Private store that can also enumerate and delete its photos."""

    def list_photos(self) -> list[Photo]:
        """Return every decodable private photo."""
        raise NotImplementedError

    def delete(self, filename: str) -> bool:
        """Remove `filename`; False when it did not exist."""
        raise NotImplementedError
