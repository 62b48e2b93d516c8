from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from photolibrary.domain.enums.media_kind import MediaKind


@dataclass(frozen=True)
class PickedItem:
    """
    A file materialized from a picker session. Not a library asset: it lives
    in memory for the lifetime of the owning service and is never persisted.
    """
    asset_id: str
    path: Path
    mime_type: str
    media_type: MediaKind

    def __post_init__(self):
        if not self.asset_id or not self.asset_id.strip():
            raise ValueError("PickedItem.asset_id is required")
