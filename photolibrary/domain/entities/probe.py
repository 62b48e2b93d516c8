from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Optional


@dataclass
class ProbeResult:
    width: int = 0
    height: int = 0
    duration_sec: Optional[float] = None
    codec_video: Optional[str] = None
    container: Optional[str] = None
    size_bytes: Optional[int] = None

    # Optional raw payload for debugging
    raw: Dict[str, Any] = field(default_factory=dict)
