from __future__ import annotations
from pathlib import Path
from typing import Protocol
from photolibrary.domain.entities.probe import ProbeResult
from photolibrary.domain.enums.media_kind import MediaKind

class MediaProbePort(Protocol):
    def probe(self, path: Path, media_kind: MediaKind) -> ProbeResult: ...
