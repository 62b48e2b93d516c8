from __future__ import annotations

from pathlib import Path
from typing import Optional
from urllib.parse import quote

from photolibrary.common.path.safe import relative_inside
from photolibrary.domain.ports.web_path import WebPathResolver


class BaseUrlPathResolver(WebPathResolver):
    """
    Maps files under ``root`` to ``<base_url>/<relative path>``; the API
    mounts the cache root at that URL. Paths outside the root (picked items
    registered from elsewhere) are not exposed.
    """

    def __init__(self, root: Path, base_url: str) -> None:
        self.root = Path(root)
        self.base_url = base_url.rstrip("/")

    def resolve(self, path: Path) -> Optional[str]:
        if not self.base_url:
            return None
        try:
            rel = relative_inside(path, self.root)
        except ValueError:
            return None
        return f"{self.base_url}/{quote(rel.as_posix())}"


def web_path_for(resolver: Optional[WebPathResolver], path: Path) -> str:
    """Resolver result, or the raw local path when there is none."""
    if resolver is not None:
        url = resolver.resolve(path)
        if url:
            return url
    return str(path)
