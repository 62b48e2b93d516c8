# photolibrary/services/picked/registry.py
from __future__ import annotations

import threading
from pathlib import Path
from typing import Dict, Optional

from photolibrary.domain.entities.picked_item import PickedItem
from photolibrary.domain.enums.media_kind import MediaKind


class PickedItemRegistry:
    """
    Session-scoped table of picked items, keyed by the same identity strings
    the catalog uses, so fetches can address picked and library assets alike.

    Appended to concurrently by ingestion workers; every access holds the lock.
    Entries live until ``clear()`` or until the owning service goes away.
    Re-registering an identity replaces the previous entry.
    """

    def __init__(self) -> None:
        self._items: Dict[str, PickedItem] = {}
        self._lock = threading.Lock()

    def register(self, asset_id: str, path: Path, mime_type: str, media_type: MediaKind) -> PickedItem:
        item = PickedItem(asset_id=asset_id, path=Path(path), mime_type=mime_type, media_type=MediaKind(media_type))
        with self._lock:
            self._items[asset_id] = item
        return item

    def lookup(self, asset_id: str) -> Optional[PickedItem]:
        with self._lock:
            return self._items.get(asset_id)

    def clear(self) -> None:
        with self._lock:
            self._items.clear()

    def __contains__(self, asset_id: object) -> bool:
        with self._lock:
            return asset_id in self._items

    def __len__(self) -> int:
        with self._lock:
            return len(self._items)
