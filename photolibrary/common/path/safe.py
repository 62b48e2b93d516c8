# photolibrary/common/path/safe.py
from __future__ import annotations

from pathlib import Path


def resolve_root(root: Path | str) -> Path:
    """Resolve a cache/library root directory."""
    return Path(root).expanduser().resolve()


def relative_inside(path: Path | str, root: Path | str) -> Path:
    """
    Return ``path`` relative to ``root``. Raises ValueError if the resolved
    path escapes the root (symlinks and ``..`` included).
    """
    p = Path(path).expanduser().resolve()
    r = resolve_root(root)
    try:
        return p.relative_to(r)
    except ValueError as exc:
        raise ValueError(f"path {p} escapes root {r}") from exc
