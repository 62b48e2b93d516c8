from photolibrary.domain.enums.media_kind import MediaKind
from photolibrary.domain.policies.mime_types import (
    OCTET_STREAM,
    extension_for,
    extension_of,
    media_kind_for,
    mime_for_name,
)


def test_mime_lookup_by_extension():
    assert mime_for_name("IMG_0001.JPG") == "image/jpeg"
    assert mime_for_name("clip.mov") == "video/quicktime"
    assert mime_for_name("clip.m3u8") == "application/x-mpegURL"
    assert mime_for_name("noext") == OCTET_STREAM
    assert mime_for_name(None) == OCTET_STREAM


def test_declared_mime_wins():
    assert mime_for_name("a.jpg", "image/heic") == "image/heic"
    assert mime_for_name("a.jpg", "garbage") == "image/jpeg"


def test_extension_helpers():
    assert extension_of("a/b/c.HeIc") == "heic"
    assert extension_of("") == ""
    assert extension_for("x.png", None) == "png"
    assert extension_for("x", "video/mp4") == "mp4"
    assert extension_for(None, "application/unknown") == "dat"


def test_media_kind_for():
    assert media_kind_for("image/png") == MediaKind.image
    assert media_kind_for("video/mp4") == MediaKind.video
    assert media_kind_for("video") == MediaKind.video
    assert media_kind_for(OCTET_STREAM) is None
    assert media_kind_for(None) is None
