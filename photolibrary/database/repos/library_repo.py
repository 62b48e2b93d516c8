# photolibrary/database/repos/library_repo.py
from __future__ import annotations

from pathlib import Path
from typing import List, Optional, Sequence

from sqlalchemy import Select, case, func, select
from sqlalchemy.orm import Session, sessionmaker

from photolibrary.database.models import LibraryAlbum, LibraryAsset, library_album_asset
from photolibrary.domain.entities.asset import AlbumSummary, LibraryRecord
from photolibrary.domain.enums.media_kind import MediaKind
from photolibrary.domain.ports.library import LibraryQuery


def to_library_record(row: LibraryAsset) -> LibraryRecord:
    return LibraryRecord(
        id=row.id,
        media_kind=row.media_kind if isinstance(row.media_kind, MediaKind) else MediaKind(row.media_kind),
        file_name=row.file_name,
        original_file_name=row.original_file_name,
        mime_type=row.mime_type,
        width=row.width or 0,
        height=row.height or 0,
        duration=row.duration,
        created_at=row.created_at,
        modified_at=row.modified_at,
        latitude=row.latitude,
        longitude=row.longitude,
        size_bytes=row.size_bytes,
        local_path=Path(row.local_path) if row.local_path else None,
        cloud_path=Path(row.cloud_path) if row.cloud_path else None,
    )


class SqlAlchemyLibraryRepo:
    """
    Read-only library backed by the ``library_*`` tables. Satisfies
    LibraryPort via structural typing.

    Takes a session *factory*: calls arrive from worker threads, and each
    call opens and closes its own short-lived session.
    """

    def __init__(self, sessions: sessionmaker[Session]) -> None:
        self._sessions = sessions

    # --- albums -------------------------------------------------------------

    def list_albums(self) -> List[AlbumSummary]:
        n = func.count(library_album_asset.c.asset_id)
        user_first = case((LibraryAlbum.collection_type == "album", 0), else_=1)
        stmt = (
            select(LibraryAlbum.id, LibraryAlbum.title, n.label("n"))
            .outerjoin(library_album_asset, library_album_asset.c.album_id == LibraryAlbum.id)
            .group_by(LibraryAlbum.id, LibraryAlbum.title, LibraryAlbum.collection_type)
            .order_by(user_first, LibraryAlbum.title, LibraryAlbum.id)
        )
        with self._sessions() as s:
            return [AlbumSummary(id=i, title=t or "", asset_count=int(c)) for (i, t, c) in s.execute(stmt)]

    def album_ids_for(self, asset_id: str) -> List[str]:
        stmt = (
            select(library_album_asset.c.album_id)
            .where(library_album_asset.c.asset_id == asset_id)
            .order_by(library_album_asset.c.album_id)
        )
        with self._sessions() as s:
            return list(s.execute(stmt).scalars())

    # --- assets -------------------------------------------------------------

    @staticmethod
    def _filtered(stmt: Select, query: LibraryQuery) -> Select:
        stmt = stmt.where(LibraryAsset.media_kind.in_(sorted(query.media_kinds)))
        if not query.include_cloud:
            stmt = stmt.where(LibraryAsset.local_path.is_not(None))
        return stmt

    def count_assets(self, query: LibraryQuery) -> int:
        stmt = self._filtered(select(func.count()).select_from(LibraryAsset), query)
        with self._sessions() as s:
            return int(s.execute(stmt).scalar_one())

    def fetch_assets(self, query: LibraryQuery, offset: int, limit: int) -> Sequence[LibraryRecord]:
        """Newest first; undated assets last; id breaks ties."""
        stmt = (
            self._filtered(select(LibraryAsset), query)
            .order_by(LibraryAsset.created_at.desc().nulls_last(), LibraryAsset.id)
            .offset(max(0, offset))
            .limit(max(0, limit))
        )
        with self._sessions() as s:
            return [to_library_record(r) for r in s.execute(stmt).scalars()]

    def get_asset(self, asset_id: str) -> Optional[LibraryRecord]:
        with self._sessions() as s:
            row = s.get(LibraryAsset, asset_id)
            return to_library_record(row) if row else None

    def locate_original(self, record: LibraryRecord, allow_network: bool) -> Optional[Path]:
        if record.local_path is not None and record.local_path.is_file():
            return record.local_path
        if allow_network and record.cloud_path is not None and record.cloud_path.is_file():
            return record.cloud_path
        return None
