from __future__ import annotations

from pathlib import Path
from typing import Protocol

from photolibrary.domain.enums.media_kind import MediaKind


class TransformPort(Protocol):
    def resize(
        self,
        source: Path,
        media_kind: MediaKind,   # video -> first frame
        target_width: int,
        target_height: int,
        quality: float,          # 0..1 JPEG quality
    ) -> bytes: ...

    def export_original(self, source: Path) -> bytes: ...

    def encode_canonical(self, source: Path) -> bytes: ...
