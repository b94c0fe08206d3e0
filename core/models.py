"""Core domain models for captured photos and storage state."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any


@dataclass
class Photo:
    """A decoded private photo ready for display.

    `pixels` is None when the file could not be decoded.
    """

    name: str
    pixels: Any | None


@dataclass
class StoredFile:
    """Raw bytes of one JPEG file inside the private directory."""

    filename: str
    data: bytes


@dataclass
class MediaRecord:
    """A row of the shared media catalog."""

    handle: str
    display_name: str
    mime_type: str
    width: int | None
    height: int | None
    relative_path: str
    date_added: datetime | None = None


@dataclass(frozen=True)
class PermissionState:
    """Snapshot of external media capabilities."""

    read_granted: bool = False
    write_granted: bool = False


@dataclass(frozen=True)
class Notification:
    """Pass/fail message for the presentation layer."""

    success: bool
    message: str


class CoordinatorState(Enum):
    """Lifecycle of a single capture/save round."""

    IDLE = "idle"
    CAPTURING = "capturing"
    SAVING = "saving"
    REFRESHING = "refreshing"
