# photolibrary/services/catalog/asset_catalog.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, List, Optional

from photolibrary.common.logging import get_logger
from photolibrary.domain.dataclasses.paging import PageWindow
from photolibrary.domain.entities.asset import AlbumSummary, AssetDescriptor, CatalogPage, LibraryRecord
from photolibrary.domain.enums.media_kind import MediaKind
from photolibrary.domain.policies.mime_types import mime_for_name
from photolibrary.domain.ports.library import LibraryPort, LibraryQuery

logger = get_logger(__name__)

# (descriptor, source record) -> descriptor with thumbnail/file attached
Enricher = Callable[[AssetDescriptor, LibraryRecord], AssetDescriptor]


@dataclass(frozen=True)
class CatalogFilter:
    include_images: bool = True
    include_videos: bool = False
    include_cloud_data: bool = True
    include_album_data: bool = False
    use_original_file_names: bool = False

    def to_query(self) -> LibraryQuery:
        kinds = set()
        if self.include_images:
            kinds.add(MediaKind.image)
        if self.include_videos:
            kinds.add(MediaKind.video)
        if not kinds:
            # neither selected -> images
            kinds.add(MediaKind.image)
        return LibraryQuery(media_kinds=frozenset(kinds), include_cloud=self.include_cloud_data)


class AssetCatalog:
    """
    Stable, paginated view over the library, newest first.

    ``total_count`` is what matched the filter before paging. Assets whose
    per-item work fails (album lookup, the enrich hook) are dropped from the
    page and logged; the rest of the page is still returned.
    """

    def __init__(self, library: LibraryPort) -> None:
        self.library = library

    def list_albums(self) -> List[AlbumSummary]:
        return list(self.library.list_albums())

    def query(
        self,
        flt: CatalogFilter,
        window: PageWindow,
        *,
        enrich: Optional[Enricher] = None,
    ) -> CatalogPage:
        lq = flt.to_query()
        total = int(self.library.count_assets(lq))
        if total == 0:
            return CatalogPage(assets=[], total_count=0, has_more=False)

        sl = window.resolve(total)
        if sl.is_empty:
            return CatalogPage(assets=[], total_count=total, has_more=False)

        records = self.library.fetch_assets(lq, sl.start, len(sl))
        assets: List[AssetDescriptor] = []
        for rec in records:
            if rec.media_kind not in lq.media_kinds:
                continue
            try:
                desc = self.describe(rec, use_original_file_names=flt.use_original_file_names)
                if flt.include_album_data:
                    desc = desc.with_artifacts(album_ids=tuple(self.library.album_ids_for(rec.id)))
                if enrich is not None:
                    desc = enrich(desc, rec)
            except Exception as e:
                logger.warning("Skipping asset %s from page: %s", rec.id, e)
                continue
            assets.append(desc)

        return CatalogPage(assets=assets, total_count=total, has_more=sl.has_more)

    @staticmethod
    def describe(rec: LibraryRecord, *, use_original_file_names: bool = False) -> AssetDescriptor:
        if use_original_file_names and rec.original_file_name:
            file_name = rec.original_file_name
        else:
            file_name = rec.file_name or "asset"
        return AssetDescriptor(
            id=rec.id,
            file_name=file_name,
            media_type=rec.media_kind,
            width=rec.width or 0,
            height=rec.height or 0,
            mime_type=mime_for_name(rec.original_file_name or file_name, rec.mime_type),
            duration=rec.duration if rec.media_kind == MediaKind.video else None,
            creation_date=rec.created_at,
            modification_date=rec.modified_at,
            latitude=rec.latitude,
            longitude=rec.longitude,
            size=rec.size_bytes,
        )
