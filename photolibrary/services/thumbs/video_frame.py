# photolibrary/services/thumbs/video_frame.py
from __future__ import annotations

import os
import shutil
import subprocess
import tempfile
from pathlib import Path
from typing import Optional

from photolibrary.common.logging import get_logger
from photolibrary.common.settings import get_settings

logger = get_logger(__name__)


class VideoFrameExtractor:
    """
    Pulls a single still out of a video with ffmpeg. The frame is written as
    PNG to a temp file the caller owns (and must unlink).
    """

    def __init__(self, ffmpeg: Optional[str] = None):
        self.ffmpeg = ffmpeg or os.getenv("PHOTOLIBRARY_FFMPEG") or get_settings().ffprobe.ffmpeg_bin
        self._has_ffmpeg = Path(self.ffmpeg).is_file() or shutil.which(self.ffmpeg) is not None

    def extract(self, video: Path, time_sec: float = 0.0, max_width: Optional[int] = None) -> Path:
        if not self._has_ffmpeg:
            raise RuntimeError("ffmpeg not found; install ffmpeg or set PHOTOLIBRARY_FFMPEG")
        with tempfile.NamedTemporaryFile("wb", suffix=".png", delete=False) as tf:
            out_png = Path(tf.name)

        cmd = [self.ffmpeg, "-hide_banner", "-loglevel", "error", "-ss", f"{max(0.0, time_sec):.3f}",
               "-i", str(video), "-frames:v", "1", "-an"]
        if max_width:
            # never upscale: the thumbnail step does the final fit
            cmd += ["-vf", f"scale='min({int(max_width)},iw)':-2:flags=lanczos,setsar=1"]
        cmd += ["-y", str(out_png)]

        try:
            subprocess.check_call(cmd, stdout=subprocess.DEVNULL, stderr=subprocess.STDOUT)
        except subprocess.CalledProcessError as e:
            out_png.unlink(missing_ok=True)
            raise RuntimeError(f"ffmpeg failed extracting frame at {time_sec:.3f}s from {video}: {e}") from e
        return out_png
