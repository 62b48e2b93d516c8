from __future__ import annotations

from pathlib import PurePath
from typing import Dict, Optional

from photolibrary.domain.enums.media_kind import MediaKind

OCTET_STREAM = "application/octet-stream"

MIME_BY_EXT: Dict[str, str] = {
    "flv": "video/x-flv",
    "mp4": "video/mp4",
    "m4v": "video/x-m4v",
    "m3u8": "application/x-mpegURL",
    "ts": "video/MP2T",
    "3gp": "video/3gpp",
    "mov": "video/quicktime",
    "avi": "video/x-msvideo",
    "wmv": "video/x-ms-wmv",
    "gif": "image/gif",
    "jpg": "image/jpeg",
    "jpeg": "image/jpeg",
    "png": "image/png",
    "webp": "image/webp",
    "tiff": "image/tiff",
    "tif": "image/tiff",
    "heic": "image/heic",
    "heif": "image/heif",
}

# preferred extension when only a MIME type is known
EXT_BY_MIME: Dict[str, str] = {
    "image/jpeg": "jpg",
    "image/png": "png",
    "image/gif": "gif",
    "image/webp": "webp",
    "image/tiff": "tiff",
    "image/heic": "heic",
    "image/heif": "heif",
    "video/mp4": "mp4",
    "video/quicktime": "mov",
    "video/x-m4v": "m4v",
    "video/3gpp": "3gp",
    "video/x-msvideo": "avi",
}


def extension_of(name: Optional[str]) -> str:
    if not name:
        return ""
    return PurePath(name).suffix.lstrip(".").lower()


def mime_for_name(name: Optional[str], declared: Optional[str] = None) -> str:
    """Declared MIME wins; otherwise look the extension up; otherwise octet-stream."""
    if declared and "/" in declared:
        return declared
    return MIME_BY_EXT.get(extension_of(name), OCTET_STREAM)


def extension_for(name: Optional[str], mime_type: Optional[str], default: str = "dat") -> str:
    ext = extension_of(name)
    if ext:
        return ext
    return EXT_BY_MIME.get((mime_type or "").lower(), default)


def media_kind_for(mime_type: Optional[str]) -> Optional[MediaKind]:
    m = (mime_type or "").lower()
    if m.startswith("image/") or m == "image":
        return MediaKind.image
    if m.startswith("video/") or m == "video":
        return MediaKind.video
    return None
