# tests/conftest.py
from __future__ import annotations

import threading
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Dict, List, Optional

import pytest
from PIL import Image

from photolibrary.common import settings as settings_mod
from photolibrary.domain.entities.asset import AlbumSummary, LibraryRecord
from photolibrary.domain.entities.probe import ProbeResult
from photolibrary.domain.enums.media_kind import MediaKind
from photolibrary.domain.ports.library import LibraryQuery
from photolibrary.services.fetch.orchestrator import FetchOrchestrator
from photolibrary.services.picked.registry import PickedItemRegistry
from photolibrary.services.store.artifact_store import ArtifactStore


# ---------------------------- fakes -------------------------------------------

class FakeLibrary:
    """In-memory LibraryPort. Records are served newest first, like the real repo."""

    def __init__(self, records: Optional[List[LibraryRecord]] = None, albums: Optional[Dict[str, List[str]]] = None):
        self.records: List[LibraryRecord] = list(records or [])
        self.albums: Dict[str, List[str]] = dict(albums or {})
        self.failing_album_lookups: set[str] = set()
        self.fetch_calls: List[tuple] = []

    def _matching(self, query: LibraryQuery) -> List[LibraryRecord]:
        out = [r for r in self.records if r.media_kind in query.media_kinds]
        if not query.include_cloud:
            out = [r for r in out if r.local_path is not None]
        epoch = datetime.min.replace(tzinfo=timezone.utc)
        return sorted(out, key=lambda r: (r.created_at or epoch, r.id), reverse=True)

    def list_albums(self) -> List[AlbumSummary]:
        return [AlbumSummary(id=a, title=a.title(), asset_count=len(ids)) for a, ids in self.albums.items()]

    def count_assets(self, query: LibraryQuery) -> int:
        return len(self._matching(query))

    def fetch_assets(self, query: LibraryQuery, offset: int, limit: int) -> List[LibraryRecord]:
        self.fetch_calls.append((offset, limit))
        return self._matching(query)[offset:offset + limit]

    def get_asset(self, asset_id: str) -> Optional[LibraryRecord]:
        return next((r for r in self.records if r.id == asset_id), None)

    def album_ids_for(self, asset_id: str) -> List[str]:
        if asset_id in self.failing_album_lookups:
            raise RuntimeError("album lookup failed")
        return sorted(a for a, ids in self.albums.items() if asset_id in ids)

    def locate_original(self, record: LibraryRecord, allow_network: bool) -> Optional[Path]:
        if record.local_path is not None and record.local_path.is_file():
            return record.local_path
        if allow_network and record.cloud_path is not None and record.cloud_path.is_file():
            return record.cloud_path
        return None


class CountingTransformer:
    """TransformPort that returns fixed bytes and counts how often it ran."""

    def __init__(self, delay: float = 0.0, fail: bool = False):
        self.delay = delay
        self.fail = fail
        self.resize_calls = 0
        self.export_calls = 0
        self.encode_calls = 0
        self._lock = threading.Lock()
        self._gate = threading.Event()

    def _work(self) -> None:
        if self.delay:
            self._gate.wait(self.delay)
        if self.fail:
            raise RuntimeError("decoder exploded")

    def resize(self, source, media_kind, target_width, target_height, quality) -> bytes:
        with self._lock:
            self.resize_calls += 1
        self._work()
        return f"thumb:{Path(source).name}:{target_width}x{target_height}:{quality}".encode()

    def export_original(self, source) -> bytes:
        with self._lock:
            self.export_calls += 1
        self._work()
        return Path(source).read_bytes()

    def encode_canonical(self, source) -> bytes:
        with self._lock:
            self.encode_calls += 1
        self._work()
        return b"\xff\xd8canonical:" + Path(source).read_bytes()[:16]


class FakeProber:
    def __init__(self, width: int = 640, height: int = 480, duration: Optional[float] = None):
        self.result = ProbeResult(width=width, height=height, duration_sec=duration)
        self.calls: List[tuple] = []

    def probe(self, path, media_kind) -> ProbeResult:
        self.calls.append((Path(path), media_kind))
        return self.result


# ---------------------------- helpers -----------------------------------------

def make_record(
    asset_id: str,
    *,
    kind: MediaKind = MediaKind.image,
    local: Optional[Path] = None,
    cloud: Optional[Path] = None,
    age_days: int = 0,
    file_name: Optional[str] = None,
    original_file_name: Optional[str] = None,
) -> LibraryRecord:
    base = datetime(2024, 5, 1, 10, 0, 0, tzinfo=timezone.utc)
    return LibraryRecord(
        id=asset_id,
        media_kind=kind,
        file_name=file_name or f"{asset_id}.{'mov' if kind == MediaKind.video else 'jpg'}",
        original_file_name=original_file_name,
        width=4032,
        height=3024,
        duration=12.5 if kind == MediaKind.video else None,
        created_at=base - timedelta(days=age_days),
        modified_at=base - timedelta(days=age_days),
        local_path=local,
        cloud_path=cloud,
    )


def write_image(path: Path, size=(64, 48), color=(200, 40, 40), fmt: Optional[str] = None) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    Image.new("RGB", size, color).save(path, format=fmt)
    return path


# ---------------------------- fixtures ----------------------------------------

@pytest.fixture(autouse=True)
def _isolated_settings(tmp_path, monkeypatch):
    """Point every test at its own cache root and reset the cached Settings."""
    monkeypatch.setenv("CACHE_ROOT", str(tmp_path / "cache"))
    monkeypatch.setenv("APP_ENV", "test")
    settings_mod.get_settings.cache_clear()
    yield
    settings_mod.get_settings.cache_clear()


@pytest.fixture()
def media_dir(tmp_path) -> Path:
    d = tmp_path / "media"
    d.mkdir()
    return d


@pytest.fixture()
def store(tmp_path) -> ArtifactStore:
    return ArtifactStore(tmp_path / "cache")


@pytest.fixture()
def registry() -> PickedItemRegistry:
    return PickedItemRegistry()


@pytest.fixture()
def transformer() -> CountingTransformer:
    return CountingTransformer()


@pytest.fixture()
def prober() -> FakeProber:
    return FakeProber()


@pytest.fixture()
def library(media_dir) -> FakeLibrary:
    recs = [
        make_record("IMG-1", local=write_image(media_dir / "IMG-1.jpg"), age_days=0),
        make_record("IMG-2", local=write_image(media_dir / "IMG-2.jpg"), age_days=1),
        make_record("VID-1", kind=MediaKind.video, local=media_dir / "VID-1.mov", age_days=2),
        make_record("IMG-3", cloud=write_image(media_dir / "cloud" / "IMG-3.jpg"), age_days=3),
    ]
    (media_dir / "VID-1.mov").write_bytes(b"\x00\x00\x00\x18ftypqt  ")
    return FakeLibrary(recs, albums={"holiday": ["IMG-1", "VID-1"], "family": ["IMG-1"]})


@pytest.fixture()
def orchestrator(store, library, registry, transformer, prober):
    orch = FetchOrchestrator(store, library, registry, transformer, prober)
    yield orch
    orch.close()


@pytest.fixture()
def record_factory():
    return make_record


@pytest.fixture()
def image_factory():
    return write_image


@pytest.fixture()
def fakes():
    """The fake port classes, for tests that need a differently configured instance."""
    return type("Fakes", (), {
        "Library": FakeLibrary,
        "Transformer": CountingTransformer,
        "Prober": FakeProber,
    })
