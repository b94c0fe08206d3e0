"""Shared fixtures and stub collaborators."""

from __future__ import annotations

from collections.abc import Iterable
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Any

from PIL import Image
import pytest

from core.errors import PhotoStorageError
from core.models import Photo
from core.services.interfaces import (
    ICaptureSource,
    IMediaCatalog,
    IPermissionProvider,
    IPhotoStore,
    IPrivatePhotoStore,
    Permission,
)


@pytest.fixture
def red_image():
    return Image.new("RGB", (10, 10), (255, 0, 0))


@pytest.fixture
def executor():
    pool = ThreadPoolExecutor(max_workers=1)
    yield pool
    pool.shutdown(wait=True)


class FakePrivateStore(IPrivatePhotoStore):
    """In-memory private store that records calls."""

    def __init__(self, fail_save: bool = False, fail_delete: bool = False) -> None:
        self.fail_save = fail_save
        self.fail_delete = fail_delete
        self.files: dict[str, Any] = {}
        self.saved: list[str] = []
        self.list_calls = 0

    def save(self, name: str, image: Any) -> None:
        if self.fail_save:
            raise PhotoStorageError("Couldn't save bitmap")
        self.saved.append(name)
        self.files[f"{name}.jpg"] = image

    def list_photos(self) -> list[Photo]:
        self.list_calls += 1
        return [Photo(name=k, pixels=v) for k, v in self.files.items()]

    def delete(self, filename: str) -> bool:
        if self.fail_delete:
            raise PhotoStorageError("disk error")
        return self.files.pop(filename, None) is not None


class FakeExternalStore(IPhotoStore):
    def __init__(self, fail: bool = False) -> None:
        self.fail = fail
        self.saved: list[str] = []

    def save(self, name: str, image: Any) -> None:
        if self.fail:
            raise PhotoStorageError("Couldn't create media store entry")
        self.saved.append(name)


class FakeCatalog(IMediaCatalog):
    """Catalog that records inserts; its streams always fail."""

    def __init__(self, refuse: bool = False) -> None:
        self.refuse = refuse
        self.inserts: list[dict[str, Any]] = []

    def insert(self, values: dict[str, Any]) -> str | None:
        self.inserts.append(dict(values))
        return None if self.refuse else f"h{len(self.inserts)}"

    def open_output_stream(self, handle: str):
        raise OSError("stream unavailable")

    def query(self, **filters: Any):
        return []


class FakePermissionProvider(IPermissionProvider):
    def __init__(
        self,
        granted: dict[Permission, bool] | None = None,
        grant_on_request: dict[Permission, bool] | None = None,
        request_error: Exception | None = None,
    ) -> None:
        self.granted = granted or {}
        self.grant_on_request = grant_on_request or {}
        self.request_error = request_error
        self.requested: list[list[Permission]] = []

    def check(self, permission: Permission) -> bool:
        return self.granted.get(permission, False)

    def request(self, permissions: Iterable[Permission]) -> Future:
        perms = list(permissions)
        self.requested.append(perms)
        fut: Future = Future()
        if self.request_error is not None:
            fut.set_exception(self.request_error)
        else:
            fut.set_result({p: self.grant_on_request[p] for p in perms if p in self.grant_on_request})
        return fut


class FakeCaptureSource(ICaptureSource):
    def __init__(self, image: Any | None) -> None:
        self.image = image
        self.calls = 0

    def capture(self) -> Future:
        self.calls += 1
        fut: Future = Future()
        fut.set_result(self.image)
        return fut
