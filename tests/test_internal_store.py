"""InternalPhotoStore tests against a temporary private directory."""

from __future__ import annotations

from PIL import Image
import pytest

from core.errors import PhotoStorageError
from infrastructure.internal_store import InternalPhotoStore


@pytest.fixture
def store(tmp_path):
    return InternalPhotoStore(tmp_path / "files")


def test_save_list_delete_scenario(store, red_image):
    store.save("abc123", red_image)

    photos = store.list_photos()
    assert [p.name for p in photos] == ["abc123.jpg"]
    assert photos[0].pixels.size == (10, 10)

    assert store.delete("abc123.jpg") is True
    assert store.list_photos() == []


def test_saved_pixels_are_close_to_source(store, red_image):
    store.save("red", red_image)

    r, g, b = store.list_photos()[0].pixels.getpixel((5, 5))
    assert r > 240 and g < 15 and b < 15


def test_save_twice_overwrites(store, red_image):
    store.save("same", red_image)
    store.save("same", Image.new("RGB", (20, 8), (0, 0, 255)))

    photos = store.list_photos()
    assert len(photos) == 1
    assert photos[0].name == "same.jpg"
    assert photos[0].pixels.size == (20, 8)


def test_delete_missing_returns_false(store, red_image):
    assert store.delete("nope.jpg") is False

    store.save("once", red_image)
    assert store.delete("once.jpg") is True
    assert store.delete("once.jpg") is False


def test_list_skips_non_jpg_entries(store, red_image):
    store.save("keep", red_image)
    (store.directory / "notes.txt").write_text("hello", encoding="utf-8")
    (store.directory / "photo.jpeg").write_bytes(b"x")
    (store.directory / "folder.jpg").mkdir()

    assert [p.name for p in store.list_photos()] == ["keep.jpg"]


def test_corrupt_jpg_lists_with_placeholder(store):
    store.directory.mkdir(parents=True)
    (store.directory / "broken.jpg").write_bytes(b"not an image")

    photos = store.list_photos()
    assert len(photos) == 1
    assert photos[0].name == "broken.jpg"
    assert photos[0].pixels is None


def test_list_missing_directory_is_empty(tmp_path):
    assert InternalPhotoStore(tmp_path / "absent").list_photos() == []


def test_save_into_unwritable_location_raises(tmp_path, red_image):
    blocker = tmp_path / "blocker"
    blocker.write_text("file, not a directory", encoding="utf-8")

    with pytest.raises(PhotoStorageError):
        InternalPhotoStore(blocker).save("x", red_image)


def test_save_none_image_raises(store):
    with pytest.raises(PhotoStorageError):
        store.save("empty", None)


def test_delete_rejects_directory_components(store, red_image, tmp_path):
    store.save("inner", red_image)
    outside = tmp_path / "inner.jpg"
    outside.write_bytes(b"keep me")

    with pytest.raises(PhotoStorageError):
        store.delete("../inner.jpg")
    assert outside.read_bytes() == b"keep me"
    assert [p.name for p in store.list_photos()] == ["inner.jpg"]


@pytest.mark.parametrize("name", ["../escaped", "sub/escaped", "..", ""])
def test_save_rejects_names_with_directory_parts(store, red_image, tmp_path, name):
    store.save("kept", red_image)

    with pytest.raises(PhotoStorageError):
        store.save(name, red_image)
    assert not (tmp_path / "escaped.jpg").exists()
    assert not (store.directory / "sub").exists()
    assert [p.name for p in store.list_photos()] == ["kept.jpg"]
