from __future__ import annotations

import threading
from pathlib import Path
from typing import Callable, Optional

from PIL import Image, ImageOps, UnidentifiedImageError

from photolibrary.domain.entities.probe import ProbeResult
from photolibrary.domain.enums.media_kind import MediaKind
from photolibrary.domain.ports.probe import MediaProbePort
from photolibrary.services.probe.ffprobe_adapter import FFprobeAdapter


class MediaInspector(MediaProbePort):
    """
    Pixel dimensions (and duration for videos) of a local file.
    Images are read with Pillow honoring EXIF orientation; videos go through
    ffprobe. The ffprobe adapter is built lazily so image-only hosts do not
    need ffmpeg installed.
    """

    def __init__(self, video_prober: Optional[Callable[[], FFprobeAdapter]] = None) -> None:
        self._video_prober_factory = video_prober or (lambda: FFprobeAdapter())
        self._video_prober: Optional[FFprobeAdapter] = None
        self._lock = threading.Lock()

    def probe(self, path: Path, media_kind: MediaKind) -> ProbeResult:
        if media_kind == MediaKind.video:
            with self._lock:
                if self._video_prober is None:
                    self._video_prober = self._video_prober_factory()
            return self._video_prober.probe(path)
        return self._probe_image(Path(path))

    @staticmethod
    def _probe_image(path: Path) -> ProbeResult:
        try:
            with Image.open(path) as img:
                oriented = ImageOps.exif_transpose(img)
                width, height = oriented.size
                fmt = img.format
        except (UnidentifiedImageError, OSError) as e:
            raise ValueError(f"Cannot read image {path}: {e}") from e
        return ProbeResult(width=width, height=height, container=fmt, size_bytes=path.stat().st_size)
