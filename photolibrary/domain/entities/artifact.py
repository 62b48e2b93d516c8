# photolibrary/domain/entities/artifact.py
from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict

from photolibrary.domain.enums.artifact_kind import ArtifactKind

UNKNOWN_SIZE = -1


def quality_bucket(quality: float) -> int:
    """Clamp a 0..1 JPEG quality and bucket it to an integer percentage."""
    q = max(0.0, min(1.0, float(quality)))
    return int(round(q * 100))


@dataclass(frozen=True)
class ArtifactKey:
    """
    Logical cache key for a derived file.

    Thumbnails are keyed by (asset_id, width, height, quality bucket). A
    full-resolution export exists once per asset, so its dimensions are always
    zero regardless of what the caller passed.
    """
    asset_id: str
    kind: ArtifactKind
    width: int = 0
    height: int = 0
    quality_bucket: int = 0

    @classmethod
    def thumbnail(cls, asset_id: str, width: int, height: int, quality: float) -> "ArtifactKey":
        return cls(
            asset_id=asset_id,
            kind=ArtifactKind.thumbnail,
            width=int(width),
            height=int(height),
            quality_bucket=quality_bucket(quality),
        )

    @classmethod
    def full_resolution(cls, asset_id: str) -> "ArtifactKey":
        return cls(asset_id=asset_id, kind=ArtifactKind.full_resolution)

    @property
    def is_thumbnail(self) -> bool:
        return self.kind == ArtifactKind.thumbnail


@dataclass(frozen=True)
class ArtifactFile:
    path: Path
    web_path: str
    mime_type: str
    size: int = UNKNOWN_SIZE

    def as_dict(self) -> Dict[str, Any]:
        return {
            "path": str(self.path),
            "webPath": self.web_path,
            "mimeType": self.mime_type,
            "size": self.size,
        }

    @property
    def size_known(self) -> bool:
        return self.size != UNKNOWN_SIZE


def file_size(path: Path) -> int:
    try:
        return Path(path).stat().st_size
    except OSError:
        return UNKNOWN_SIZE
