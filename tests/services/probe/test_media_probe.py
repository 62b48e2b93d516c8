import threading
import time
from concurrent.futures import ThreadPoolExecutor

import pytest

from photolibrary.domain.enums.media_kind import MediaKind
from photolibrary.services.probe.ffprobe_adapter import _parse_float, _parse_int, parse_ffprobe_json
from photolibrary.services.probe.media_inspector import MediaInspector


def test_parse_helpers():
    assert _parse_float("12.5") == 12.5
    assert _parse_float("N/A") is None
    assert _parse_int("1080") == 1080
    assert _parse_int("29.97") == 29
    assert _parse_int(None) is None


def test_parse_ffprobe_prefers_default_video_stream():
    data = {
        "format": {"duration": "3.480000", "format_name": "mov,mp4", "size": "1234"},
        "streams": [
            {"codec_type": "audio", "codec_name": "aac", "duration": "3.5"},
            {"codec_type": "video", "codec_name": "h264", "width": 640, "height": 360, "disposition": {"default": 0}},
            {"codec_type": "video", "codec_name": "hevc", "width": 1920, "height": 1080, "disposition": {"default": 1}},
        ],
    }
    r = parse_ffprobe_json(data)
    assert (r.width, r.height) == (1920, 1080)
    assert r.codec_video == "hevc"
    assert r.duration_sec == pytest.approx(3.48)
    assert r.size_bytes == 1234


def test_parse_ffprobe_rotation_swaps_dimensions():
    data = {
        "format": {},
        "streams": [
            {"codec_type": "video", "width": 1920, "height": 1080, "duration": "2.0",
             "side_data_list": [{"rotation": -90}]},
        ],
    }
    r = parse_ffprobe_json(data)
    assert (r.width, r.height) == (1080, 1920)
    assert r.duration_sec == 2.0


def test_parse_ffprobe_without_video_stream():
    r = parse_ffprobe_json({"format": {}, "streams": []})
    assert (r.width, r.height, r.duration_sec) == (0, 0, None)


def test_inspector_reads_image_dimensions(image_factory, tmp_path):
    p = image_factory(tmp_path / "a.jpg", size=(120, 90))
    r = MediaInspector().probe(p, MediaKind.image)
    assert (r.width, r.height) == (120, 90)
    assert r.container == "JPEG"
    assert r.duration_sec is None


def test_inspector_rejects_unreadable_image(tmp_path):
    p = tmp_path / "broken.jpg"
    p.write_bytes(b"nope")
    with pytest.raises(ValueError):
        MediaInspector().probe(p, MediaKind.image)


def test_inspector_builds_video_prober_lazily(tmp_path):
    built = []

    class _Probe:
        def probe(self, path):
            return parse_ffprobe_json({"format": {"duration": "1.5"}, "streams": []})

    def _factory():
        built.append(1)
        return _Probe()

    insp = MediaInspector(video_prober=_factory)
    assert built == []
    assert insp.probe(tmp_path / "x.mov", MediaKind.video).duration_sec == 1.5
    insp.probe(tmp_path / "y.mov", MediaKind.video)
    assert built == [1]


def test_concurrent_video_probes_share_one_prober(tmp_path):
    built = []
    start = threading.Barrier(4)

    class _Probe:
        def probe(self, path):
            return parse_ffprobe_json({"format": {"duration": "2"}, "streams": []})

    def _factory():
        built.append(1)
        time.sleep(0.05)
        return _Probe()

    insp = MediaInspector(video_prober=_factory)

    def _run(i):
        start.wait()
        return insp.probe(tmp_path / f"{i}.mov", MediaKind.video).duration_sec

    with ThreadPoolExecutor(max_workers=4) as pool:
        assert list(pool.map(_run, range(4))) == [2.0] * 4
    assert built == [1]
