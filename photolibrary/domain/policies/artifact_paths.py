from __future__ import annotations

from typing import Optional

from photolibrary.domain.entities.artifact import ArtifactKey

THUMBNAIL_EXT = "jpg"
THUMBNAIL_MIME = "image/jpeg"


def artifact_filename(key: ArtifactKey, digest: str, extension: Optional[str] = None) -> str:
    """
    Domain policy for the file name of a cached artifact, relative to its kind's
    directory. ``digest`` is the hex SHA-256 of the asset id.

        thumbnail        -> <digest>_<w>x<h>_q<bucket>.jpg
        full resolution  -> <digest>.<ext>
    """
    if key.is_thumbnail:
        return f"{digest}_{key.width}x{key.height}_q{key.quality_bucket}.{THUMBNAIL_EXT}"
    ext = (extension or "").lstrip(".").lower() or "dat"
    return f"{digest}.{ext}"


def full_resolution_glob(digest: str) -> str:
    return f"{digest}.*"
