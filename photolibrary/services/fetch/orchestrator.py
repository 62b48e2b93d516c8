# photolibrary/services/fetch/orchestrator.py
from __future__ import annotations

import math
import threading
from concurrent.futures import Future
from pathlib import Path
from typing import Callable, Dict, List, Optional, Sequence
from uuid import uuid4

from photolibrary.common.concurrency.thread_manager import ThreadManager
from photolibrary.common.logging import get_logger
from photolibrary.domain.dataclasses.picker import RawPickResult
from photolibrary.domain.entities.artifact import ArtifactFile, ArtifactKey
from photolibrary.domain.entities.asset import AssetDescriptor
from photolibrary.domain.enums.media_kind import MediaKind
from photolibrary.domain.errors import AssetNotFound, InvalidOptions, PhotoLibraryError, TransformFailed
from photolibrary.domain.policies.artifact_paths import THUMBNAIL_MIME
from photolibrary.domain.policies.mime_types import (
    extension_for,
    media_kind_for,
    mime_for_name,
)
from photolibrary.domain.ports.library import LibraryPort
from photolibrary.domain.ports.probe import MediaProbePort
from photolibrary.domain.ports.transform import TransformPort
from photolibrary.services.picked.registry import PickedItemRegistry
from photolibrary.services.schemas.options import PickMediaOptions
from photolibrary.services.store.artifact_store import ArtifactStore

logger = get_logger(__name__)


class FetchOrchestrator:
    """
    Turns (identity, request) into a cached file.

    Resolution order is picked items first, then the library. Production goes
    through the transform port and is written via the ArtifactStore. While a
    key is being produced, other callers asking for the same key wait on the
    producer's future instead of transforming again.
    """

    def __init__(
        self,
        store: ArtifactStore,
        library: LibraryPort,
        registry: PickedItemRegistry,
        transformer: TransformPort,
        prober: MediaProbePort,
        *,
        pool: Optional[ThreadManager] = None,
    ) -> None:
        self.store = store
        self.library = library
        self.registry = registry
        self.transformer = transformer
        self.prober = prober
        self._own_pool = pool is None
        self.pool: ThreadManager = pool or ThreadManager(name="photolibrary-ingest")
        self._inflight: Dict[ArtifactKey, Future[ArtifactFile]] = {}
        self._inflight_lock = threading.Lock()

    def close(self) -> None:
        if self._own_pool:
            self.pool.shutdown(wait=True)

    # --- single-item fetches ------------------------------------------------

    def fetch_full_resolution(self, asset_id: str, allow_remote_access: bool = True) -> ArtifactFile:
        # a picked item already *is* its full-resolution file
        picked = self.registry.lookup(asset_id)
        if picked is not None:
            if not picked.path.is_file():
                raise AssetNotFound()
            return self.store.describe(picked.path, picked.mime_type)

        key = ArtifactKey.full_resolution(asset_id)
        hit = self.store.resolve(key)
        if hit is not None:
            logger.debug("Full-resolution cache hit for %s", asset_id)
            return hit
        return self._produce_once(key, lambda: self._export_library_original(key, allow_remote_access))

    def fetch_thumbnail(
        self,
        asset_id: str,
        width: int,
        height: int,
        quality: float,
        allow_remote_access: bool = True,
    ) -> ArtifactFile:
        if width <= 0 or height <= 0:
            raise InvalidOptions("width and height must be greater than 0")

        key = ArtifactKey.thumbnail(asset_id, width, height, quality)
        hit = self.store.resolve(key)
        if hit is not None:
            logger.debug("Thumbnail cache hit for %s (%dx%d q%d)", asset_id, width, height, key.quality_bucket)
            return hit
        return self._produce_once(key, lambda: self._produce_thumbnail(key, quality, allow_remote_access))

    # --- production ---------------------------------------------------------

    def _produce_once(self, key: ArtifactKey, producer: Callable[[], ArtifactFile]) -> ArtifactFile:
        with self._inflight_lock:
            fut = self._inflight.get(key)
            leader = fut is None
            if leader:
                fut = Future()
                self._inflight[key] = fut

        if not leader:
            return fut.result()

        try:
            # another leader may have finished between our miss and taking the slot
            result = self.store.resolve(key) or producer()
        except BaseException as e:
            fut.set_exception(e)
            raise
        else:
            fut.set_result(result)
            return result
        finally:
            with self._inflight_lock:
                self._inflight.pop(key, None)

    def _locate_source(self, asset_id: str, allow_remote_access: bool) -> tuple[Path, MediaKind]:
        picked = self.registry.lookup(asset_id)
        if picked is not None:
            if not picked.path.is_file():
                raise AssetNotFound()
            return picked.path, picked.media_type

        rec = self.library.get_asset(asset_id)
        if rec is None:
            raise AssetNotFound()
        src = self.library.locate_original(rec, allow_remote_access)
        if src is None:
            # cloud-only with network access off, or no copy at all
            raise AssetNotFound()
        return Path(src), rec.media_kind

    def _produce_thumbnail(self, key: ArtifactKey, quality: float, allow_remote_access: bool) -> ArtifactFile:
        src, kind = self._locate_source(key.asset_id, allow_remote_access)
        try:
            data = self.transformer.resize(src, kind, key.width, key.height, quality)
        except Exception as e:
            logger.warning("Thumbnail transform failed for %s: %s", key.asset_id, e)
            raise TransformFailed(f"Thumbnail could not be generated: {e}") from e
        logger.info("Generated %dx%d thumbnail for %s", key.width, key.height, key.asset_id)
        return self.store.put(key, data, THUMBNAIL_MIME)

    def _export_library_original(self, key: ArtifactKey, allow_remote_access: bool) -> ArtifactFile:
        rec = self.library.get_asset(key.asset_id)
        if rec is None:
            raise AssetNotFound()
        src = self.library.locate_original(rec, allow_remote_access)
        if src is None:
            raise AssetNotFound()

        name = rec.original_file_name or rec.file_name or Path(src).name
        try:
            data = self.transformer.export_original(Path(src))
        except Exception as e:
            logger.warning("Export failed for %s: %s", key.asset_id, e)
            raise TransformFailed(f"Asset could not be exported: {e}") from e
        logger.info("Exported original for %s", key.asset_id)
        return self.store.put(key, data, mime_for_name(name, rec.mime_type), extension_for(name, rec.mime_type))

    # --- picked results -----------------------------------------------------

    def ingest_picked_results(
        self,
        raw_results: Sequence[RawPickResult],
        options: PickMediaOptions,
    ) -> List[AssetDescriptor]:
        """
        Materialize picker results into the cache and register them.

        Runs one task per result on the pool and joins them all before
        returning. Results that cannot be read or decoded are dropped. Output
        follows input order.
        """
        if not raw_results:
            return []

        futures = [self.pool.submit(self._ingest_one, r, options) for r in raw_results]
        assets: List[AssetDescriptor] = []
        for raw, fut in zip(raw_results, futures):
            try:
                desc = fut.result()
            except Exception as e:
                logger.warning("Dropping picked item %s: %s", raw.suggested_name or raw.source, e)
                continue
            if desc is not None:
                assets.append(desc)
        return assets

    def _ingest_one(self, raw: RawPickResult, options: PickMediaOptions) -> Optional[AssetDescriptor]:
        kind = media_kind_for(raw.type_hint) or media_kind_for(mime_for_name(raw.suggested_name or raw.source.name))
        if kind == MediaKind.image and not options.include_images:
            return None
        if kind == MediaKind.video and not options.include_videos:
            return None
        if kind is None:
            raise TransformFailed(f"Unsupported picked item type for {raw.source.name}")
        if not Path(raw.source).is_file():
            raise AssetNotFound(f"Picked file is not readable: {raw.source}")

        asset_id = raw.asset_identifier or f"picked-{uuid4()}"
        key = ArtifactKey.full_resolution(asset_id)

        if kind == MediaKind.image:
            file_name = raw.suggested_name or f"{asset_id}.jpg"
            try:
                data = self.transformer.encode_canonical(Path(raw.source))
            except Exception as e:
                raise TransformFailed(f"Picked image could not be decoded: {e}") from e
            stored = self.store.put(key, data, "image/jpeg", "jpg")
        else:
            file_name = raw.suggested_name or Path(raw.source).name
            ext = extension_for(file_name, raw.type_hint, default="mov")
            stored = self.store.put_file(key, Path(raw.source), mime_for_name(f"video.{ext}"), ext)

        # a dropped item must not stay addressable through the cache
        try:
            probe = self.prober.probe(stored.path, kind)
        except Exception:
            stored.path.unlink(missing_ok=True)
            raise
        self.registry.register(asset_id, stored.path, stored.mime_type, kind)

        thumbnail: Optional[ArtifactFile] = None
        if options.wants_thumbnail:
            try:
                thumbnail = self.fetch_thumbnail(
                    asset_id,
                    options.thumbnail_width,
                    options.thumbnail_height,
                    options.thumbnail_quality,
                    allow_remote_access=False,
                )
            except PhotoLibraryError as e:
                logger.warning("No thumbnail for picked item %s: %s", asset_id, e.reason)

        duration = None
        if kind == MediaKind.video and probe.duration_sec is not None and math.isfinite(probe.duration_sec):
            duration = float(probe.duration_sec)

        return AssetDescriptor(
            id=asset_id,
            file_name=file_name,
            media_type=kind,
            width=probe.width or 0,
            height=probe.height or 0,
            mime_type=stored.mime_type,
            duration=duration,
            size=stored.size,
            thumbnail=thumbnail,
            file=stored,
        )
