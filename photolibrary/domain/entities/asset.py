# photolibrary/domain/entities/asset.py
from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

from photolibrary.domain.entities.artifact import ArtifactFile
from photolibrary.domain.enums.media_kind import MediaKind


def iso8601(ts: Optional[datetime]) -> Optional[str]:
    """Internet date-time with millisecond fraction, UTC ("2024-05-01T10:00:00.000Z")."""
    if ts is None:
        return None
    if ts.tzinfo is None:
        ts = ts.replace(tzinfo=timezone.utc)
    ts = ts.astimezone(timezone.utc)
    return ts.strftime("%Y-%m-%dT%H:%M:%S.") + f"{ts.microsecond // 1000:03d}Z"


@dataclass(frozen=True)
class AlbumSummary:
    id: str
    title: str
    asset_count: int = 0

    def as_dict(self) -> Dict[str, Any]:
        return {"id": self.id, "title": self.title, "assetCount": self.asset_count}


@dataclass(frozen=True)
class LibraryRecord:
    """
    One asset as the library collaborator reports it. This is the raw row the
    catalog turns into an AssetDescriptor; it also carries where the original
    bytes live (a local copy, a cloud-backed location, or both).
    """
    id: str
    media_kind: MediaKind
    file_name: Optional[str] = None
    original_file_name: Optional[str] = None
    mime_type: Optional[str] = None
    width: int = 0
    height: int = 0
    duration: Optional[float] = None
    created_at: Optional[datetime] = None
    modified_at: Optional[datetime] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    size_bytes: Optional[int] = None
    local_path: Optional[Path] = None
    cloud_path: Optional[Path] = None

    @property
    def is_cloud_only(self) -> bool:
        return self.local_path is None and self.cloud_path is not None


@dataclass(frozen=True)
class AssetDescriptor:
    """
    Read-only view of an asset handed to clients. Built by the catalog (from a
    LibraryRecord) or by picked-result ingestion; never persisted.
    """
    id: str
    file_name: str
    media_type: MediaKind
    width: int
    height: int
    mime_type: str
    duration: Optional[float] = None
    creation_date: Optional[datetime] = None
    modification_date: Optional[datetime] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    size: Optional[int] = None
    album_ids: Optional[Tuple[str, ...]] = None
    thumbnail: Optional[ArtifactFile] = None
    file: Optional[ArtifactFile] = None

    def __post_init__(self):
        if self.width < 0 or self.height < 0:
            raise ValueError("width/height must be >= 0")
        if self.duration is not None and self.media_type != MediaKind.video:
            raise ValueError("duration is only meaningful for videos")

    def with_artifacts(
        self,
        *,
        thumbnail: Optional[ArtifactFile] = None,
        file: Optional[ArtifactFile] = None,
        album_ids: Optional[Tuple[str, ...]] = None,
    ) -> "AssetDescriptor":
        changes: Dict[str, Any] = {}
        if thumbnail is not None:
            changes["thumbnail"] = thumbnail
        if file is not None:
            changes["file"] = file
        if album_ids is not None:
            changes["album_ids"] = tuple(album_ids)
        return replace(self, **changes) if changes else self

    def as_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {
            "id": self.id,
            "fileName": self.file_name,
            "type": self.media_type.value,
            "width": self.width,
            "height": self.height,
            "mimeType": self.mime_type,
        }
        optional = {
            "duration": self.duration,
            "creationDate": iso8601(self.creation_date),
            "modificationDate": iso8601(self.modification_date),
            "latitude": self.latitude,
            "longitude": self.longitude,
            "size": self.size,
            "albumIds": list(self.album_ids) if self.album_ids is not None else None,
            "thumbnail": self.thumbnail.as_dict() if self.thumbnail else None,
            "file": self.file.as_dict() if self.file else None,
        }
        out.update({k: v for k, v in optional.items() if v is not None})
        return out


@dataclass
class CatalogPage:
    assets: list[AssetDescriptor] = field(default_factory=list)
    total_count: int = 0
    has_more: bool = False

    def as_dict(self) -> Dict[str, Any]:
        return {
            "assets": [a.as_dict() for a in self.assets],
            "totalCount": self.total_count,
            "hasMore": self.has_more,
        }
