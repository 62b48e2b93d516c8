import os
import threading

import pytest

from photolibrary.domain.entities.artifact import ArtifactKey
from photolibrary.domain.errors import StorageWriteFailed
from photolibrary.services.store.artifact_store import ArtifactStore
from photolibrary.services.web.path_resolver import BaseUrlPathResolver


def test_miss_then_hit(store):
    key = ArtifactKey.thumbnail("A/L0/001", 512, 384, 0.5)
    assert store.resolve(key) is None

    written = store.put(key, b"jpegbytes", "image/jpeg")
    assert written.path == store.path_for(key)
    assert written.path.parent == store.thumbnails_dir
    assert written.size == len(b"jpegbytes")

    hit = store.resolve(key)
    assert hit is not None
    assert hit.path == written.path
    assert hit.mime_type == "image/jpeg"


def test_full_resolution_resolved_regardless_of_extension(store):
    key = ArtifactKey.full_resolution("A/L0/001")
    store.put(key, b"heic", "image/heic", "HEIC")
    hit = store.resolve(key)
    assert hit is not None
    assert hit.path.suffix == ".heic"
    assert hit.path.parent == store.files_dir
    assert hit.mime_type == "image/heic"


def test_full_resolution_miss_without_directory(tmp_path):
    s = ArtifactStore(tmp_path / "never-created")
    assert s.resolve(ArtifactKey.full_resolution("x")) is None


def test_rewrite_replaces_atomically_and_leaves_no_temp(store):
    key = ArtifactKey.thumbnail("a", 10, 10, 1.0)
    store.put(key, b"first", "image/jpeg")
    store.put(key, b"second", "image/jpeg")
    assert store.path_for(key).read_bytes() == b"second"
    assert [p.name for p in store.thumbnails_dir.iterdir()] == [store.path_for(key).name]


def test_concurrent_writers_leave_one_complete_file(store):
    key = ArtifactKey.thumbnail("race", 32, 32, 0.5)
    payloads = [bytes([i]) * 4096 for i in range(8)]
    barrier = threading.Barrier(len(payloads))

    def _write(data):
        barrier.wait()
        store.put(key, data, "image/jpeg")

    threads = [threading.Thread(target=_write, args=(p,)) for p in payloads]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    content = store.path_for(key).read_bytes()
    assert content in payloads
    assert len(list(store.thumbnails_dir.iterdir())) == 1


def test_put_file_copies_source(store, tmp_path):
    src = tmp_path / "clip.mov"
    src.write_bytes(b"\x00moov" * 100)
    f = store.put_file(ArtifactKey.full_resolution("picked-1"), src, "video/quicktime", "mov")
    assert f.path.read_bytes() == src.read_bytes()
    assert f.path.suffix == ".mov"


def test_failed_write_raises_and_cleans_up(store, monkeypatch):
    key = ArtifactKey.thumbnail("a", 10, 10, 1.0)

    def _boom(src, dst):
        raise OSError(28, "No space left on device")

    monkeypatch.setattr(os, "replace", _boom)
    with pytest.raises(StorageWriteFailed):
        store.put(key, b"data", "image/jpeg")

    assert store.resolve(key) is None
    assert list(store.thumbnails_dir.iterdir()) == []


def test_web_path_uses_base_url_when_configured(tmp_path):
    root = tmp_path / "cache"
    s = ArtifactStore(root, web_paths=BaseUrlPathResolver(root, "http://localhost:8000/cache/"))
    f = s.put(ArtifactKey.thumbnail("a", 10, 10, 1.0), b"x", "image/jpeg")
    assert f.web_path.startswith("http://localhost:8000/cache/thumbnails/")
    assert f.web_path.endswith(f.path.name)


def test_web_path_falls_back_to_local_path(store):
    f = store.put(ArtifactKey.thumbnail("a", 10, 10, 1.0), b"x", "image/jpeg")
    assert f.web_path == str(f.path)
