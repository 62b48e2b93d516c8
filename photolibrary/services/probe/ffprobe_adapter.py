# photolibrary/services/probe/ffprobe_adapter.py
from __future__ import annotations

import json
import shutil
import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from photolibrary.common.settings import get_settings
from photolibrary.common.logging import get_logger
from photolibrary.domain.entities.probe import ProbeResult

logger = get_logger(__name__)


@dataclass(frozen=True)
class FFprobeError(RuntimeError):
    """Adapter-level error for probe failures."""
    message: str
    stderr: Optional[str] = None
    rc: Optional[int] = None

    def __str__(self) -> str:
        return self.message


class FFprobeAdapter:
    """
    Reads video dimensions and duration with ``ffprobe``. Safe to call from
    ThreadManager workers (one subprocess per call).
    """

    def __init__(self, ffprobe_bin: Optional[str] = None, timeout_sec: Optional[int] = None):
        cfg = get_settings()
        candidate = ffprobe_bin or cfg.ffprobe.bin
        resolved = shutil.which(candidate) or (candidate if Path(candidate).is_file() else None)
        if not resolved:
            raise FFprobeError("ffprobe not found on PATH; set FFPROBE__BIN or install ffmpeg.")

        self.ffprobe_bin = resolved
        self.timeout_sec = int(timeout_sec or cfg.ffprobe.timeout_sec or 15)

    def probe(self, path: Path) -> ProbeResult:
        if not Path(path).is_file():
            raise FFprobeError(f"File not found: {path}")

        cmd = [
            self.ffprobe_bin,
            "-v", "quiet",
            "-print_format", "json",
            "-show_format",
            "-show_streams",
            str(path),
        ]

        try:
            proc = subprocess.run(cmd, capture_output=True, text=True, timeout=self.timeout_sec, check=False)
        except subprocess.TimeoutExpired as e:
            raise FFprobeError(f"ffprobe timed out after {self.timeout_sec}s", stderr=str(e)) from e
        except OSError as e:
            raise FFprobeError("Failed to execute ffprobe (OS error).", stderr=str(e)) from e

        if proc.returncode != 0:
            raise FFprobeError("ffprobe returned non-zero exit code", stderr=proc.stderr, rc=proc.returncode)

        try:
            data = json.loads(proc.stdout or "{}")
        except json.JSONDecodeError as e:
            raise FFprobeError("ffprobe produced invalid JSON", stderr=proc.stdout) from e

        return parse_ffprobe_json(data)


def parse_ffprobe_json(data: dict) -> ProbeResult:
    fmt = data.get("format") or {}
    streams = list(data.get("streams") or [])

    def _res_key(s: dict) -> int:
        return (_parse_int(s.get("width")) or 0) * (_parse_int(s.get("height")) or 0)

    vstreams = [s for s in streams if s.get("codec_type") == "video"]
    vstream = next((s for s in vstreams if (s.get("disposition") or {}).get("default") == 1), None)
    if vstream is None and vstreams:
        vstream = max(vstreams, key=_res_key)

    duration = _parse_float(fmt.get("duration"))
    if duration is None:
        candidates = [d for d in (_parse_float(s.get("duration")) for s in streams) if d is not None]
        duration = max(candidates) if candidates else None

    width = height = 0
    if vstream:
        width = _parse_int(vstream.get("width")) or 0
        height = _parse_int(vstream.get("height")) or 0
        # report display orientation, like a player applying the track transform
        if abs(_rotation(vstream)) % 180 == 90:
            width, height = height, width

    return ProbeResult(
        width=width,
        height=height,
        duration_sec=duration,
        codec_video=(vstream or {}).get("codec_name"),
        container=fmt.get("format_name"),
        size_bytes=_parse_int(fmt.get("size")),
        raw=data,
    )


# ---- tiny parse helpers -------------------------------------------------------
def _rotation(stream: dict) -> int:
    rot = _parse_int((stream.get("tags") or {}).get("rotate"))
    if rot is not None:
        return rot
    for side in stream.get("side_data_list") or []:
        rot = _parse_int(side.get("rotation"))
        if rot is not None:
            return rot
    return 0

def _parse_float(x) -> Optional[float]:
    try:
        if x is None:
            return None
        return float(x)
    except (TypeError, ValueError):
        return None

def _parse_int(x) -> Optional[int]:
    try:
        if x is None:
            return None
        return int(float(x))
    except (TypeError, ValueError):
        return None
