from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Optional


@dataclass(frozen=True)
class RawPickResult:
    """
    What a picker session hands back for one selection, before ingestion.

    ``asset_identifier`` is the library id when the picker knows it (limited
    access still exposes ids on some hosts); otherwise ingestion assigns a
    session-unique ``picked-<uuid>`` identity. ``source`` is a readable
    temporary file owned by the picker.
    """
    source: Path
    asset_identifier: Optional[str] = None
    suggested_name: Optional[str] = None
    type_hint: Optional[str] = None   # MIME type or "image"/"video" if known
