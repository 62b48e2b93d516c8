from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Protocol, Sequence

from photolibrary.domain.entities.asset import AlbumSummary, LibraryRecord
from photolibrary.domain.enums.media_kind import MediaKind


@dataclass(frozen=True)
class LibraryQuery:
    """Filter passed down to the library. Sort is always creation time, newest first."""
    media_kinds: frozenset[MediaKind]
    include_cloud: bool = True


class LibraryPort(Protocol):
    def list_albums(self) -> List[AlbumSummary]: ...

    def count_assets(self, query: LibraryQuery) -> int: ...

    def fetch_assets(self, query: LibraryQuery, offset: int, limit: int) -> Sequence[LibraryRecord]: ...

    def get_asset(self, asset_id: str) -> Optional[LibraryRecord]: ...

    def album_ids_for(self, asset_id: str) -> List[str]: ...

    # Path to readable original bytes; None when only a cloud copy exists and
    # network access is not allowed (or no copy exists at all).
    def locate_original(self, record: LibraryRecord, allow_network: bool) -> Optional[Path]: ...
