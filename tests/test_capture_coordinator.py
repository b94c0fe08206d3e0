"""PhotoCaptureCoordinator routing, refresh, and notification tests."""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
import threading

from conftest import (
    FakeCaptureSource,
    FakeCatalog,
    FakeExternalStore,
    FakePrivateStore,
)
import pytest

from core.errors import PhotoStorageError
from core.models import CoordinatorState, PermissionState
from core.services.capture_coordinator import (
    MSG_DELETE_FAILED,
    MSG_DELETE_OK,
    MSG_SAVE_FAILED,
    MSG_SAVE_OK,
    PhotoCaptureCoordinator,
)
from infrastructure.external_store import ExternalPhotoStore
from infrastructure.internal_store import InternalPhotoStore

GRANTED = PermissionState(read_granted=True, write_granted=True)
DENIED = PermissionState(read_granted=False, write_granted=False)


class Recorder:
    def __init__(self) -> None:
        self.listings: list[list] = []
        self.notifications: list = []


@pytest.fixture
def recorder():
    return Recorder()


def _coordinator(internal, external, executor, recorder, **kwargs):
    coord = PhotoCaptureCoordinator(
        internal, external, executor, name_factory=lambda: "fixed", **kwargs
    )
    coord.add_photos_listener(recorder.listings.append)
    coord.add_notification_listener(recorder.notifications.append)
    return coord


def test_private_save_goes_to_internal_store(executor, recorder, red_image):
    internal, external = FakePrivateStore(), FakeExternalStore()
    coord = _coordinator(internal, external, executor, recorder)

    assert coord.handle_captured_image(red_image, True, DENIED).result(timeout=5) is True

    assert internal.saved == ["fixed"]
    assert external.saved == []
    assert internal.list_calls == 1
    assert [p.name for p in recorder.listings[-1]] == ["fixed.jpg"]
    assert recorder.notifications[-1].success is True
    assert recorder.notifications[-1].message == MSG_SAVE_OK


def test_failed_private_save_still_refreshes(executor, recorder, red_image):
    internal = FakePrivateStore(fail_save=True)
    coord = _coordinator(internal, FakeExternalStore(), executor, recorder)

    assert coord.handle_captured_image(red_image, True, GRANTED).result(timeout=5) is False

    assert internal.list_calls == 1
    assert recorder.listings == [[]]
    assert recorder.notifications[-1].message == MSG_SAVE_FAILED


def test_failed_private_save_refresh_can_be_disabled(executor, recorder, red_image):
    internal = FakePrivateStore(fail_save=True)
    coord = _coordinator(
        internal,
        FakeExternalStore(),
        executor,
        recorder,
        refresh_on_failed_private_save=False,
    )

    assert coord.handle_captured_image(red_image, True, GRANTED).result(timeout=5) is False

    assert internal.list_calls == 0
    assert recorder.listings == []


def test_external_save_with_permission(executor, recorder, red_image):
    internal, external = FakePrivateStore(), FakeExternalStore()
    coord = _coordinator(internal, external, executor, recorder)

    assert coord.handle_captured_image(red_image, False, GRANTED, name="ext").result(timeout=5)

    assert external.saved == ["ext"]
    assert internal.saved == []
    assert internal.list_calls == 1


def test_external_save_without_permission_never_touches_catalog(executor, recorder, red_image):
    catalog = FakeCatalog()
    internal = FakePrivateStore()
    coord = _coordinator(internal, ExternalPhotoStore(catalog), executor, recorder)

    assert coord.handle_captured_image(red_image, False, DENIED).result(timeout=5) is False

    assert catalog.inserts == []
    assert internal.list_calls == 0
    assert recorder.notifications[-1].message == MSG_SAVE_FAILED


def test_external_failure_reports_false(executor, recorder, red_image):
    internal = FakePrivateStore()
    coord = _coordinator(internal, FakeExternalStore(fail=True), executor, recorder)

    assert coord.handle_captured_image(red_image, False, GRANTED).result(timeout=5) is False
    assert internal.list_calls == 0


def test_delete_success_refreshes(executor, recorder, red_image):
    internal = FakePrivateStore()
    internal.files["a.jpg"] = red_image
    coord = _coordinator(internal, FakeExternalStore(), executor, recorder)

    assert coord.delete_photo("a.jpg").result(timeout=5) is True

    assert recorder.listings == [[]]
    assert recorder.notifications[-1].message == MSG_DELETE_OK


def test_delete_missing_leaves_listing_untouched(executor, recorder):
    internal = FakePrivateStore()
    coord = _coordinator(internal, FakeExternalStore(), executor, recorder)

    assert coord.delete_photo("ghost.jpg").result(timeout=5) is False

    assert internal.list_calls == 0
    assert recorder.notifications[-1].message == MSG_DELETE_FAILED


def test_delete_io_error_reports_false(executor, recorder):
    coord = _coordinator(FakePrivateStore(fail_delete=True), FakeExternalStore(), executor, recorder)

    assert coord.delete_photo("a.jpg").result(timeout=5) is False
    assert recorder.notifications[-1].success is False


def test_cancelled_capture_writes_nothing(executor, recorder):
    internal, external = FakePrivateStore(), FakeExternalStore()
    coord = _coordinator(internal, external, executor, recorder)

    assert coord.capture(FakeCaptureSource(None), True, GRANTED).result(timeout=5) is False

    assert internal.saved == [] and external.saved == []
    assert recorder.notifications == []
    assert coord.state is CoordinatorState.IDLE


def test_capture_saves_captured_image(executor, recorder, red_image):
    internal = FakePrivateStore()
    source = FakeCaptureSource(red_image)
    coord = _coordinator(internal, FakeExternalStore(), executor, recorder)

    assert coord.capture(source, True, DENIED).result(timeout=5) is True

    assert source.calls == 1
    assert internal.saved == ["fixed"]
    assert coord.state is CoordinatorState.IDLE


def test_default_names_are_unique(executor, red_image):
    internal = FakePrivateStore()
    coord = PhotoCaptureCoordinator(internal, FakeExternalStore(), executor)

    coord.handle_captured_image(red_image, True, GRANTED).result(timeout=5)
    coord.handle_captured_image(red_image, True, GRANTED).result(timeout=5)

    assert len(set(internal.saved)) == 2


def test_refresh_publishes_listing(executor, recorder, red_image):
    internal = FakePrivateStore()
    internal.files["x.jpg"] = red_image
    coord = _coordinator(internal, FakeExternalStore(), executor, recorder)

    photos = coord.refresh().result(timeout=5)

    assert [p.name for p in photos] == ["x.jpg"]
    assert recorder.listings == [photos]


def test_listener_errors_do_not_break_the_round(executor, red_image):
    internal = FakePrivateStore()
    coord = PhotoCaptureCoordinator(internal, FakeExternalStore(), executor)

    def _boom(_value):
        raise RuntimeError("listener bug")

    coord.add_photos_listener(_boom)
    coord.add_notification_listener(_boom)

    assert coord.handle_captured_image(red_image, True, GRANTED).result(timeout=5) is True


def test_end_to_end_with_private_directory(tmp_path, executor, recorder, red_image):
    store = InternalPhotoStore(tmp_path / "files")
    coord = _coordinator(store, FakeExternalStore(), executor, recorder)

    assert coord.handle_captured_image(red_image, True, DENIED, name="abc123").result(timeout=5)
    (photo,) = coord.refresh().result(timeout=5)
    assert photo.name == "abc123.jpg"
    assert photo.pixels.size == (10, 10)

    assert coord.delete_photo("abc123.jpg").result(timeout=5) is True
    assert coord.refresh().result(timeout=5) == []


def test_owned_executor_shuts_down(red_image):
    coord = PhotoCaptureCoordinator(FakePrivateStore(), FakeExternalStore(), max_workers=1)

    assert coord.handle_captured_image(red_image, True, GRANTED).result(timeout=5) is True
    coord.shutdown(wait=True)

    with pytest.raises(RuntimeError):
        coord.refresh()


def test_capture_source_error_resolves_false(executor, recorder):
    class BrokenSource(FakeCaptureSource):
        def capture(self):
            raise RuntimeError("no camera")

    internal = FakePrivateStore()
    coord = _coordinator(internal, FakeExternalStore(), executor, recorder)

    assert coord.capture(BrokenSource(None), True, GRANTED).result(timeout=5) is False
    assert internal.saved == []
    assert coord.state is CoordinatorState.IDLE


def test_capture_after_shutdown_resolves_false(red_image):
    coord = PhotoCaptureCoordinator(FakePrivateStore(), FakeExternalStore(), max_workers=1)
    coord.shutdown(wait=True)

    assert coord.capture(FakeCaptureSource(red_image), True, GRANTED).result(timeout=5) is False
    assert coord.state is CoordinatorState.IDLE


def test_overlapping_rounds_end_idle(red_image):
    save_started, release_save = threading.Event(), threading.Event()
    list_started, release_list = threading.Event(), threading.Event()

    class SlowFailingExternal(FakeExternalStore):
        def save(self, name, image):
            save_started.set()
            release_save.wait(timeout=5)
            raise PhotoStorageError("Couldn't create media store entry")

    class SlowListing(FakePrivateStore):
        def list_photos(self):
            list_started.set()
            release_list.wait(timeout=5)
            return super().list_photos()

    pool = ThreadPoolExecutor(max_workers=2)
    try:
        coord = PhotoCaptureCoordinator(SlowListing(), SlowFailingExternal(), pool)

        saved = coord.handle_captured_image(red_image, False, GRANTED)
        assert save_started.wait(timeout=5)
        assert coord.state is CoordinatorState.SAVING

        listed = coord.refresh()
        assert list_started.wait(timeout=5)
        assert coord.state is CoordinatorState.REFRESHING

        release_save.set()
        assert saved.result(timeout=5) is False
        assert coord.state is CoordinatorState.REFRESHING

        release_list.set()
        assert listed.result(timeout=5) == []
        assert coord.state is CoordinatorState.IDLE
    finally:
        release_save.set()
        release_list.set()
        pool.shutdown(wait=True)
