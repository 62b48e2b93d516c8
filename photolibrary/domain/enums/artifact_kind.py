from __future__ import annotations
from enum import StrEnum

class ArtifactKind(StrEnum):
    thumbnail = "thumbnail"
    full_resolution = "fullResolution"
