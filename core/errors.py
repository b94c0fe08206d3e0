"""Error types shared by the storage layer."""

from __future__ import annotations


class PhotoStorageError(OSError):
    """Encoding, writing, or catalog insert failed for a photo."""
