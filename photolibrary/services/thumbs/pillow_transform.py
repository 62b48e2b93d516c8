# photolibrary/services/thumbs/pillow_transform.py
from __future__ import annotations

import io
from pathlib import Path
from typing import Optional

from PIL import Image, ImageOps

from photolibrary.common.logging import get_logger
from photolibrary.domain.enums.media_kind import MediaKind
from photolibrary.domain.ports.transform import TransformPort
from photolibrary.services.thumbs.video_frame import VideoFrameExtractor

logger = get_logger(__name__)


def _jpeg_quality(quality: float) -> int:
    # Pillow takes 1..100; callers speak 0..1
    q = max(0.0, min(1.0, float(quality)))
    return max(1, int(round(q * 100)))


def _encode_jpeg(img: Image.Image, quality: float) -> bytes:
    buf = io.BytesIO()
    img.convert("RGB").save(buf, format="JPEG", quality=_jpeg_quality(quality), optimize=True)
    return buf.getvalue()


class PillowTransformer(TransformPort):
    """
    Image/video transform capability backed by Pillow (and ffmpeg for the
    first frame of a video). Output thumbnails are exactly target_width x
    target_height JPEGs, aspect-filled and center-cropped.
    """

    def __init__(self, frames: Optional[VideoFrameExtractor] = None) -> None:
        self._frames = frames

    @property
    def frames(self) -> VideoFrameExtractor:
        if self._frames is None:
            self._frames = VideoFrameExtractor()
        return self._frames

    def resize(
        self,
        source: Path,
        media_kind: MediaKind,
        target_width: int,
        target_height: int,
        quality: float,
    ) -> bytes:
        if target_width <= 0 or target_height <= 0:
            raise ValueError(f"Thumbnail size must be positive, got {target_width}x{target_height}")

        if media_kind == MediaKind.video:
            frame = self.frames.extract(Path(source), 0.0, max_width=max(target_width, target_height) * 2)
            try:
                return self._fit(frame, target_width, target_height, quality)
            finally:
                frame.unlink(missing_ok=True)
        return self._fit(Path(source), target_width, target_height, quality)

    def export_original(self, source: Path) -> bytes:
        return Path(source).read_bytes()

    def encode_canonical(self, source: Path) -> bytes:
        """Decode any Pillow-readable image and re-encode it as a full-quality JPEG."""
        with Image.open(source) as img:
            oriented = ImageOps.exif_transpose(img)
            return _encode_jpeg(oriented, 1.0)

    @staticmethod
    def _fit(path: Path, width: int, height: int, quality: float) -> bytes:
        with Image.open(path) as img:
            oriented = ImageOps.exif_transpose(img)
            fitted = ImageOps.fit(oriented, (int(width), int(height)), method=Image.Resampling.LANCZOS)
            return _encode_jpeg(fitted, quality)
