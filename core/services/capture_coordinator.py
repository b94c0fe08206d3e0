"""Capture/save/delete orchestration for the photo stores.

The coordinator routes a captured image to the private or the shared store,
keeps the private listing fresh, and reports one pass/fail result per action.
All blocking work runs on an I/O executor and results come back as futures;
listeners are invoked from the worker thread, so UI code must marshal them
onto its own thread.
"""

from __future__ import annotations

from collections import Counter
from collections.abc import Callable, Iterator
from concurrent.futures import Executor, Future, ThreadPoolExecutor
from contextlib import contextmanager
import threading
from typing import Any
import uuid

from loguru import logger

from core.models import CoordinatorState, Notification, PermissionState, Photo
from core.services.interfaces import ICaptureSource, IPhotoStore, IPrivatePhotoStore

MSG_SAVE_OK = "Photo saved successfully"
MSG_SAVE_FAILED = "Fail to save photo"
MSG_DELETE_OK = "Photo delete successfully"
MSG_DELETE_FAILED = "Fail to delete photo"

PhotosListener = Callable[[list[Photo]], None]
NotificationListener = Callable[[Notification], None]

# Reported when rounds overlap; the later step of a round wins.
_STATE_PRIORITY = (
    CoordinatorState.REFRESHING,
    CoordinatorState.SAVING,
    CoordinatorState.CAPTURING,
)


def _new_photo_name() -> str:
    return str(uuid.uuid4())


class PhotoCaptureCoordinator:
    """Routes captures to the internal or external store.

    Args:
        internal_store: Private store, also used for listing and deletion.
        external_store: Shared media store; write-only.
        executor: Executor for blocking I/O. A private thread pool is created
            (and owned) when omitted.
        max_workers: Size of the owned thread pool.
        refresh_on_failed_private_save: Refresh the private listing after a
            private save even when the save failed.
        name_factory: Produces base names for new photos.
    """

    def __init__(
        self,
        internal_store: IPrivatePhotoStore,
        external_store: IPhotoStore,
        executor: Executor | None = None,
        *,
        max_workers: int = 2,
        refresh_on_failed_private_save: bool = True,
        name_factory: Callable[[], str] | None = None,
    ) -> None:
        self._internal = internal_store
        self._external = external_store
        self._owns_executor = executor is None
        self._executor = executor or ThreadPoolExecutor(
            max_workers=max(1, int(max_workers)), thread_name_prefix="photo-io"
        )
        self._refresh_on_failed_private_save = refresh_on_failed_private_save
        self._name_factory = name_factory or _new_photo_name
        self._state_lock = threading.Lock()
        self._active_steps: Counter[CoordinatorState] = Counter()
        self._photos_listeners: list[PhotosListener] = []
        self._notification_listeners: list[NotificationListener] = []

    @property
    def state(self) -> CoordinatorState:
        """Current step of the capture round.

        Every round counts its own steps, so overlapping rounds never leave a
        finished step behind. With several rounds in flight the latest step
        in `IDLE -> CAPTURING -> SAVING -> REFRESHING` is reported.
        """
        with self._state_lock:
            for state in _STATE_PRIORITY:
                if self._active_steps[state] > 0:
                    return state
        return CoordinatorState.IDLE

    def add_photos_listener(self, listener: PhotosListener) -> None:
        """Call `listener` with the new private listing after every refresh."""
        self._photos_listeners.append(listener)

    def add_notification_listener(self, listener: NotificationListener) -> None:
        """Call `listener` with the pass/fail message of each save or delete."""
        self._notification_listeners.append(listener)

    # Public API
    def capture(
        self, source: ICaptureSource, is_private: bool, permissions: PermissionState
    ) -> Future[bool]:
        """Capture one image from `source` and save it.

        A cancelled capture (None image) resolves to False without writing.
        """
        result: Future[bool] = Future()
        self._enter(CoordinatorState.CAPTURING)
        try:
            captured = source.capture()
        except Exception as ex:  # pylint: disable=broad-exception-caught
            logger.error("Capture could not start: {}", ex)
            self._leave(CoordinatorState.CAPTURING)
            result.set_result(False)
            return result

        def _on_captured(fut: Future[Any | None]) -> None:
            self._leave(CoordinatorState.CAPTURING)
            try:
                image = fut.result()
            except Exception as ex:  # pylint: disable=broad-exception-caught
                logger.error("Capture failed: {}", ex)
                image = None
            if image is None:
                logger.info("Capture cancelled")
                result.set_result(False)
                return
            try:
                saved = self.handle_captured_image(image, is_private, permissions)
            except Exception as ex:  # pylint: disable=broad-exception-caught
                # e.g. RuntimeError once the executor is shut down
                logger.error("Captured image could not be scheduled for saving: {}", ex)
                result.set_result(False)
                return
            saved.add_done_callback(lambda f: _chain(f, result))

        captured.add_done_callback(_on_captured)
        return result

    def handle_captured_image(
        self,
        image: Any,
        is_private: bool,
        permissions: PermissionState,
        name: str | None = None,
    ) -> Future[bool]:
        """Save `image` to the store selected by `is_private` and `permissions`."""
        photo_name = name or self._name_factory()
        return self._executor.submit(
            self._save_round, photo_name, image, is_private, permissions
        )

    def delete_photo(self, filename: str) -> Future[bool]:
        """Delete a private photo by file name; refresh the listing on success."""
        return self._executor.submit(self._delete_round, filename)

    def refresh(self) -> Future[list[Photo]]:
        """Reload the private listing off the caller's thread."""
        return self._executor.submit(self._refresh_now)

    def shutdown(self, wait: bool = True) -> None:
        """Stop the owned executor."""
        if self._owns_executor:
            self._executor.shutdown(wait=wait)

    # Worker-side steps
    def _save_round(
        self, name: str, image: Any, is_private: bool, permissions: PermissionState
    ) -> bool:
        with self._step(CoordinatorState.SAVING):
            if is_private:
                success = self._try_save(self._internal, name, image, "internal")
            elif permissions.write_granted:
                success = self._try_save(self._external, name, image, "external")
            else:
                logger.warning("External save of {} skipped: write permission missing", name)
                success = False

            refreshed = False
            if is_private and (success or self._refresh_on_failed_private_save):
                self._refresh_now()
                refreshed = True
            if success and not refreshed:
                self._refresh_now()

            self._notify(Notification(success, MSG_SAVE_OK if success else MSG_SAVE_FAILED))
            return success

    def _try_save(self, store: IPhotoStore, name: str, image: Any, label: str) -> bool:
        try:
            store.save(name, image)
        except OSError as ex:
            logger.error("Save to {} storage failed for {}: {}", label, name, ex)
            return False
        logger.info("Saved {} to {} storage", name, label)
        return True

    def _delete_round(self, filename: str) -> bool:
        try:
            deleted = self._internal.delete(filename)
        except OSError as ex:
            logger.error("Delete failed for {}: {}", filename, ex)
            deleted = False
        if deleted:
            self._refresh_now()
        self._notify(Notification(deleted, MSG_DELETE_OK if deleted else MSG_DELETE_FAILED))
        return deleted

    def _refresh_now(self) -> list[Photo]:
        try:
            with self._step(CoordinatorState.REFRESHING):
                photos = self._internal.list_photos()
        except OSError as ex:
            logger.error("Listing private photos failed: {}", ex)
            return []
        logger.debug("Private listing refreshed: {} photos", len(photos))
        for listener in list(self._photos_listeners):
            try:
                listener(photos)
            except Exception as ex:  # pylint: disable=broad-exception-caught
                logger.exception("Photos listener failed: {}", ex)
        return photos

    def _enter(self, state: CoordinatorState) -> None:
        with self._state_lock:
            self._active_steps[state] += 1

    def _leave(self, state: CoordinatorState) -> None:
        with self._state_lock:
            self._active_steps[state] -= 1

    @contextmanager
    def _step(self, state: CoordinatorState) -> Iterator[None]:
        self._enter(state)
        try:
            yield
        finally:
            self._leave(state)

    def _notify(self, notification: Notification) -> None:
        for listener in list(self._notification_listeners):
            try:
                listener(notification)
            except Exception as ex:  # pylint: disable=broad-exception-caught
                logger.exception("Notification listener failed: {}", ex)


def _chain(source: Future[bool], target: Future[bool]) -> None:
    """Copy the outcome of `source` into `target`."""
    exc = source.exception()
    if exc is not None:
        target.set_exception(exc)
    else:
        target.set_result(source.result())
