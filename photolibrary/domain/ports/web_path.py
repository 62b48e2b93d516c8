from __future__ import annotations
from pathlib import Path
from typing import Optional, Protocol

class WebPathResolver(Protocol):
    # None when the path cannot be exposed; callers fall back to the local path
    def resolve(self, path: Path) -> Optional[str]: ...
