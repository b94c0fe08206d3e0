"""ViewModel binding the capture coordinator to the main window."""

from __future__ import annotations

from concurrent.futures import Future

from loguru import logger

from core.models import PermissionState, Photo
from core.services.capture_coordinator import PhotoCaptureCoordinator
from core.services.interfaces import ICaptureSource, IPermissionProvider
from core.services.permission_service import query_permission_state, resolve_permissions


class MainVM:
    """Main application view-model.

    Holds the "save privately" toggle, the last known permission state, and
    the last private listing. Permission state is replaced, never mutated, and
    is handed to the coordinator with every capture.
    """

    def __init__(
        self,
        coordinator: PhotoCaptureCoordinator,
        capture_source: ICaptureSource,
        permission_provider: IPermissionProvider,
        scoped_storage: bool = True,
    ) -> None:
        """Create a MainVM.

        Args:
            coordinator: Coordinator that performs saves, deletes, and listing.
            capture_source: Camera (or stand-in) used by `take_photo`.
            permission_provider: Platform permission surface.
            scoped_storage: Whether writing self-created shared media is always allowed.
        """
        self._coordinator = coordinator
        self._capture_source = capture_source
        self._permission_provider = permission_provider
        self._scoped_storage = scoped_storage
        self.is_private = False
        self.permissions = PermissionState()
        self.photos: list[Photo] = []
        coordinator.add_photos_listener(self._on_photos_changed)

    def init_permissions(self) -> Future[PermissionState]:
        """Query permissions now and request write when it is missing.

        `permissions` is updated immediately with the queried state and again
        when the request completes. Captures started in between use the
        queried state.
        """
        state = query_permission_state(self._permission_provider, self._scoped_storage)
        self.permissions = state
        fut = resolve_permissions(self._permission_provider, self._scoped_storage, initial=state)
        fut.add_done_callback(lambda f: self.apply_permissions(f.result()))
        return fut

    def apply_permissions(self, state: PermissionState) -> None:
        """Replace the current permission state."""
        self.permissions = state
        logger.info("Permissions: read={} write={}", state.read_granted, state.write_granted)

    def take_photo(self) -> Future[bool]:
        """Capture and save one photo according to the current toggle."""
        return self._coordinator.capture(self._capture_source, self.is_private, self.permissions)

    def delete_photo(self, name: str) -> Future[bool]:
        """Delete the private photo `name`."""
        return self._coordinator.delete_photo(name)

    def refresh(self) -> Future[list[Photo]]:
        """Reload the private listing."""
        return self._coordinator.refresh()

    def _on_photos_changed(self, photos: list[Photo]) -> None:
        self.photos = photos

    @property
    def photo_count(self) -> int:
        """Number of private photos in the last listing."""
        return len(self.photos)
