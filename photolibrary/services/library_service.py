# photolibrary/services/library_service.py
from __future__ import annotations

from concurrent.futures import Future
from typing import Any, Callable, List, Mapping, Optional, TypeVar

from photolibrary.common.concurrency.thread_manager import ThreadManager
from photolibrary.common.logging import get_logger
from photolibrary.common.settings import Settings, get_settings
from photolibrary.domain.entities.artifact import ArtifactFile
from photolibrary.domain.entities.asset import AlbumSummary, AssetDescriptor, CatalogPage, LibraryRecord
from photolibrary.domain.enums.authorization_state import AuthorizationState
from photolibrary.domain.errors import InvalidOptions
from photolibrary.domain.ports.authorization import AuthorizationPort
from photolibrary.domain.ports.library import LibraryPort
from photolibrary.domain.ports.picker import PickerPort
from photolibrary.domain.ports.probe import MediaProbePort
from photolibrary.domain.ports.transform import TransformPort
from photolibrary.services.auth.static_authorization import StaticAuthorization, require_access
from photolibrary.services.catalog.asset_catalog import AssetCatalog, CatalogFilter
from photolibrary.services.fetch.orchestrator import FetchOrchestrator
from photolibrary.services.picked.registry import PickedItemRegistry
from photolibrary.services.picker.session_guard import PickSessionGuard
from photolibrary.services.schemas.options import GetLibraryOptions, PickMediaOptions, ThumbnailRequest
from photolibrary.services.store.artifact_store import ArtifactStore
from photolibrary.services.web.path_resolver import BaseUrlPathResolver

logger = get_logger(__name__)

R = TypeVar("R")


class PhotoLibraryService:
    """
    The context object a host talks to. Owns the session-scoped state (picked
    registry, pick guard, in-flight fetches) and the worker pools, and gates
    every catalog/fetch operation on authorization.

    All public methods block; hosts that must not block call them through
    ``submit()`` and get a Future back.
    """

    def __init__(
        self,
        *,
        store: ArtifactStore,
        library: LibraryPort,
        transformer: TransformPort,
        prober: MediaProbePort,
        authorization: Optional[AuthorizationPort] = None,
        settings: Optional[Settings] = None,
    ) -> None:
        self.cfg = settings or get_settings()
        self.store = store
        self.authorization: AuthorizationPort = authorization or StaticAuthorization(
            self.cfg.auth.state, self.cfg.auth.grant_on_request
        )
        self.registry = PickedItemRegistry()
        self.pick_guard = PickSessionGuard()
        self.catalog = AssetCatalog(library)

        workers = self.cfg.concurrency.max_workers
        queue = self.cfg.concurrency.max_queue
        # separate pools: request tasks fan out ingestion and must not wait on their own pool
        self.requests: ThreadManager = ThreadManager(name="photolibrary-requests", max_workers=workers, max_queue=queue)
        self.ingest: ThreadManager = ThreadManager(name="photolibrary-ingest", max_workers=workers, max_queue=queue)
        self.orchestrator = FetchOrchestrator(store, library, self.registry, transformer, prober, pool=self.ingest)

    @classmethod
    def from_settings(cls, settings: Optional[Settings] = None) -> "PhotoLibraryService":
        """Wire the default adapters: SQLAlchemy library, Pillow/ffmpeg transforms, ffprobe inspection."""
        from photolibrary.database.core.main import build_engine, build_sessionmaker
        from photolibrary.database.models import Base
        from photolibrary.database.repos.library_repo import SqlAlchemyLibraryRepo
        from photolibrary.services.probe.media_inspector import MediaInspector
        from photolibrary.services.thumbs.pillow_transform import PillowTransformer

        cfg = settings or get_settings()
        engine = build_engine(cfg.database_url)
        Base.metadata.create_all(bind=engine)
        store = ArtifactStore(
            cfg.cache_root,
            thumbnails_subdir=cfg.thumbnails_subdir,
            files_subdir=cfg.files_subdir,
            web_paths=BaseUrlPathResolver(cfg.cache_root, cfg.public_base_url),
        )
        return cls(
            store=store,
            library=SqlAlchemyLibraryRepo(build_sessionmaker(engine)),
            transformer=PillowTransformer(),
            prober=MediaInspector(),
            settings=cfg,
        )

    # --- lifecycle ----------------------------------------------------------

    def close(self) -> None:
        self.requests.shutdown(wait=True, cancel_futures=self.cfg.concurrency.cancel_on_exit)
        self.ingest.shutdown(wait=True, cancel_futures=self.cfg.concurrency.cancel_on_exit)

    def __enter__(self) -> "PhotoLibraryService":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def submit(self, fn: Callable[..., R], /, *args: Any, **kwargs: Any) -> Future[R]:
        """Run any service method on the request pool, e.g. ``svc.submit(svc.get_library, opts)``."""
        return self.requests.submit(fn, *args, **kwargs)

    # --- authorization ------------------------------------------------------

    def check_authorization(self) -> AuthorizationState:
        return self.authorization.current_state()

    def request_authorization(self) -> AuthorizationState:
        return self.authorization.request_access()

    # --- catalog ------------------------------------------------------------

    def get_albums(self) -> List[AlbumSummary]:
        require_access(self.authorization)
        return self.catalog.list_albums()

    def get_library(self, options: GetLibraryOptions | Mapping[str, Any] | None = None) -> CatalogPage:
        require_access(self.authorization)
        opts = options if isinstance(options, GetLibraryOptions) else GetLibraryOptions.parse(options)
        flt = CatalogFilter(
            include_images=opts.include_images,
            include_videos=opts.include_videos,
            include_cloud_data=opts.include_cloud_data,
            include_album_data=opts.include_album_data,
            use_original_file_names=opts.use_original_file_names,
        )

        def _enrich(desc: AssetDescriptor, _rec: LibraryRecord) -> AssetDescriptor:
            thumbnail = file = None
            if opts.wants_thumbnail:
                thumbnail = self.orchestrator.fetch_thumbnail(
                    desc.id,
                    opts.thumbnail_width,
                    opts.thumbnail_height,
                    opts.thumbnail_quality,
                    allow_remote_access=opts.include_cloud_data,
                )
            if opts.include_full_resolution_data:
                file = self.orchestrator.fetch_full_resolution(desc.id, allow_remote_access=opts.include_cloud_data)
            return desc.with_artifacts(thumbnail=thumbnail, file=file)

        needs_enrich = opts.wants_thumbnail or opts.include_full_resolution_data
        page = self.catalog.query(flt, opts.window, enrich=_enrich if needs_enrich else None)
        logger.debug(
            "get_library offset=%d limit=%s -> %d/%d assets",
            opts.offset, opts.limit, len(page.assets), page.total_count,
        )
        return page

    # --- single-asset fetches -------------------------------------------------

    def get_photo_url(self, asset_id: str) -> ArtifactFile:
        require_access(self.authorization)
        _require_id(asset_id)
        return self.orchestrator.fetch_full_resolution(asset_id, allow_remote_access=True)

    def get_thumbnail_url(
        self,
        asset_id: str,
        width: Optional[int] = None,
        height: Optional[int] = None,
        quality: Optional[float] = None,
    ) -> ArtifactFile:
        require_access(self.authorization)
        _require_id(asset_id)
        req = ThumbnailRequest.parse({
            "width": self.cfg.thumbnail_width if width is None else width,
            "height": self.cfg.thumbnail_height if height is None else height,
            "quality": self.cfg.thumbnail_quality if quality is None else quality,
        })
        return self.orchestrator.fetch_thumbnail(asset_id, req.width, req.height, req.quality, allow_remote_access=True)

    # --- picker -------------------------------------------------------------

    def pick_media(
        self,
        picker: PickerPort,
        options: PickMediaOptions | Mapping[str, Any] | None = None,
    ) -> List[AssetDescriptor]:
        """
        Present the picker and ingest what it returns. A second call while one
        is pending raises PickInProgress. Picking does not require library
        authorization, since the picker grants access to exactly what is chosen.
        """
        opts = options if isinstance(options, PickMediaOptions) else PickMediaOptions.parse(options)
        with self.pick_guard.session() as session_id:
            raw = picker.present(opts)
            logger.info("Pick session %s returned %d item(s)", session_id, len(raw))
            return self.orchestrator.ingest_picked_results(raw, opts)


def _require_id(asset_id: Optional[str]) -> None:
    if not asset_id or not str(asset_id).strip():
        raise InvalidOptions("Parameter 'id' is required")
