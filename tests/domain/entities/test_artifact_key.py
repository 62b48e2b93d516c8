from pathlib import Path

from photolibrary.domain.entities.artifact import ArtifactFile, ArtifactKey, file_size, quality_bucket
from photolibrary.domain.enums.artifact_kind import ArtifactKind
from photolibrary.domain.policies.artifact_paths import artifact_filename, full_resolution_glob
from photolibrary.services.hashing.simple_hashing import SimpleHashing


def test_quality_bucket_clamps_and_rounds():
    assert quality_bucket(0.5) == 50
    assert quality_bucket(0.704) == 70
    assert quality_bucket(1.7) == 100
    assert quality_bucket(-3) == 0


def test_equal_requests_give_equal_keys():
    a = ArtifactKey.thumbnail("A/L0/001", 512, 384, 0.5)
    b = ArtifactKey.thumbnail("A/L0/001", 512, 384, 0.501)
    assert a == b
    assert hash(a) == hash(b)


def test_keys_differ_on_every_component():
    base = ArtifactKey.thumbnail("A", 512, 384, 0.5)
    assert base != ArtifactKey.thumbnail("B", 512, 384, 0.5)
    assert base != ArtifactKey.thumbnail("A", 256, 384, 0.5)
    assert base != ArtifactKey.thumbnail("A", 512, 256, 0.5)
    assert base != ArtifactKey.thumbnail("A", 512, 384, 0.7)
    assert base != ArtifactKey.full_resolution("A")


def test_full_resolution_key_has_no_dimensions():
    k = ArtifactKey.full_resolution("A")
    assert k.kind == ArtifactKind.full_resolution
    assert (k.width, k.height, k.quality_bucket) == (0, 0, 0)
    assert not k.is_thumbnail


def test_filenames_follow_layout():
    digest = SimpleHashing().sha256_text("A/L0/001")
    assert len(digest) == 64
    thumb = artifact_filename(ArtifactKey.thumbnail("A/L0/001", 512, 384, 0.5), digest)
    assert thumb == f"{digest}_512x384_q50.jpg"
    full = artifact_filename(ArtifactKey.full_resolution("A/L0/001"), digest, ".HEIC")
    assert full == f"{digest}.heic"
    assert artifact_filename(ArtifactKey.full_resolution("x"), digest) == f"{digest}.dat"
    assert full_resolution_glob(digest) == f"{digest}.*"


def test_filenames_never_contain_the_raw_identifier():
    digest = SimpleHashing().sha256_text("../../etc/passwd")
    name = artifact_filename(ArtifactKey.thumbnail("../../etc/passwd", 10, 10, 1.0), digest)
    assert "/" not in name and ".." not in name


def test_artifact_file_dict_and_size(tmp_path):
    p = tmp_path / "f.jpg"
    p.write_bytes(b"12345")
    f = ArtifactFile(path=p, web_path="http://x/f.jpg", mime_type="image/jpeg", size=file_size(p))
    assert f.as_dict() == {"path": str(p), "webPath": "http://x/f.jpg", "mimeType": "image/jpeg", "size": 5}
    assert f.size_known
    assert file_size(Path(tmp_path / "missing")) == -1
