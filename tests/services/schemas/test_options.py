import pytest

from photolibrary.domain.enums.media_kind import MediaKind
from photolibrary.domain.errors import InvalidOptions
from photolibrary.services.schemas.options import GetLibraryOptions, PickMediaOptions, ThumbnailRequest


def test_get_library_defaults():
    o = GetLibraryOptions.parse(None)
    assert (o.offset, o.limit) == (0, None)
    assert o.include_images and not o.include_videos
    assert o.include_cloud_data and not o.include_album_data
    assert (o.thumbnail_width, o.thumbnail_height, o.thumbnail_quality) == (512, 384, 0.5)
    assert not o.include_full_resolution_data
    assert o.wants_thumbnail


def test_camel_and_snake_case_accepted():
    a = GetLibraryOptions.parse({"includeVideos": True, "thumbnailWidth": 100})
    b = GetLibraryOptions.parse({"include_videos": True, "thumbnail_width": 100})
    assert a == b
    assert a.media_kinds == frozenset({MediaKind.image, MediaKind.video})


def test_string_query_values_are_coerced():
    o = GetLibraryOptions.parse({"offset": "10", "limit": "5", "includeAlbumData": "true"})
    assert (o.offset, o.limit, o.include_album_data) == (10, 5, True)


def test_limit_zero_means_unbounded():
    o = GetLibraryOptions.parse({"limit": 0})
    assert o.limit is None
    assert o.window.resolve(7).end == 7


@pytest.mark.parametrize("field", ["offset", "limit"])
def test_negative_paging_rejected(field):
    with pytest.raises(InvalidOptions) as ei:
        GetLibraryOptions.parse({field: -1})
    assert ei.value.reason == f"Invalid options: {field} must be greater than or equal to 0"


def test_non_numeric_rejected_with_location():
    with pytest.raises(InvalidOptions) as ei:
        GetLibraryOptions.parse({"offset": "many"})
    assert ei.value.detail.startswith("offset:")


def test_both_media_types_off_forces_images():
    o = GetLibraryOptions.parse({"includeImages": False, "includeVideos": False})
    assert o.include_images is True
    assert o.media_kinds == frozenset({MediaKind.image})


def test_thumbnail_values_clamped():
    o = GetLibraryOptions.parse({"thumbnailWidth": -10, "thumbnailHeight": 50, "thumbnailQuality": 3})
    assert o.thumbnail_width == 0
    assert o.thumbnail_quality == 1.0
    assert not o.wants_thumbnail


def test_pick_media_defaults_and_limit():
    o = PickMediaOptions.parse({})
    assert o.selection_limit == 1
    assert (o.thumbnail_width, o.thumbnail_height, o.thumbnail_quality) == (256, 256, 0.7)
    with pytest.raises(InvalidOptions) as ei:
        PickMediaOptions.parse({"selectionLimit": -2})
    assert ei.value.reason == "Invalid options: selectionLimit must be greater than or equal to 0"


def test_thumbnail_request():
    r = ThumbnailRequest.parse({"width": "128", "quality": -1})
    assert (r.width, r.height, r.quality) == (128, 384, 0.0)
