"""Tests for the local object store."""

import pytest

from tallybook.domain.errors import AttachmentError
from tallybook.storage.local import LocalObjectStore


def test_put_writes_file_under_owner(tmp_path):
    store = LocalObjectStore(tmp_path)
    handle = store.put("alice", b"data", "image/png", "photo.PNG")

    owner, name = handle.split("/")
    assert owner == "alice"
    assert name.endswith(".png")
    assert (tmp_path / handle).read_bytes() == b"data"


def test_put_uses_content_type_without_filename(tmp_path):
    store = LocalObjectStore(tmp_path)
    handle = store.put("alice", b"data", "image/jpeg")
    assert handle.rsplit(".", 1)[1] in ("jpg", "jpeg", "jpe")


def test_put_ignores_unsafe_filename_suffix(tmp_path):
    store = LocalObjectStore(tmp_path)
    handle = store.put("alice", b"data", "image/png", "scan.j/pg")

    assert len(handle.split("/")) == 2
    assert handle.endswith(".png")
    assert (tmp_path / handle).read_bytes() == b"data"


def test_handles_are_unique(tmp_path):
    store = LocalObjectStore(tmp_path)
    assert store.put("alice", b"1", "image/png") != store.put("alice", b"1", "image/png")


def test_owner_directory_is_sanitized(tmp_path):
    store = LocalObjectStore(tmp_path)
    handle = store.put("../evil", b"x", "image/png")
    assert handle.split("/")[0] == "..evil"
    assert (tmp_path / handle).exists()


def test_get_url_with_base_url(tmp_path):
    store = LocalObjectStore(tmp_path, base_url="https://files.example.com/receipts/")
    assert store.get_url("alice/abc.png") == "https://files.example.com/receipts/alice/abc.png"


def test_get_url_file_uri(tmp_path):
    store = LocalObjectStore(tmp_path)
    handle = store.put("alice", b"x", "image/png")
    assert store.get_url(handle).startswith("file://")


def test_delete_removes_file_and_tolerates_missing(tmp_path):
    store = LocalObjectStore(tmp_path)
    handle = store.put("alice", b"x", "image/png")
    store.delete(handle)
    assert not (tmp_path / handle).exists()
    store.delete(handle)


@pytest.mark.parametrize("handle", ["../etc/passwd", "/abs/path.png", "alice/../../x", "flat.png"])
def test_invalid_handles_rejected(tmp_path, handle):
    store = LocalObjectStore(tmp_path)
    with pytest.raises(AttachmentError):
        store.delete(handle)


def test_put_failure_raises_attachment_error(tmp_path):
    blocker = tmp_path / "blocked"
    blocker.write_text("not a directory")
    store = LocalObjectStore(blocker)
    with pytest.raises(AttachmentError):
        store.put("alice", b"x", "image/png")
