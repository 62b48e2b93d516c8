# photolibrary/services/schemas/options.py
from __future__ import annotations

from typing import Any, Mapping, Optional, Type, TypeVar

from pydantic import BaseModel, ConfigDict, ValidationError, field_validator, model_validator
from pydantic.alias_generators import to_camel

from photolibrary.domain.dataclasses.paging import PageWindow
from photolibrary.domain.enums.media_kind import MediaKind
from photolibrary.domain.errors import InvalidOptions

M = TypeVar("M", bound="_Options")


def _clamp_dimension(v: Any) -> int:
    return max(0, int(v if v is not None else 0))


def _clamp_quality(v: Any) -> float:
    return max(0.0, min(1.0, float(v)))


class _Options(BaseModel):
    """Accepts snake_case or the camelCase names clients send."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")

    @classmethod
    def parse(cls: Type[M], data: Optional[Mapping[str, Any]] = None) -> M:
        """Validate ``data``; any failure becomes InvalidOptions with the first reason."""
        try:
            return cls.model_validate(dict(data or {}))
        except ValidationError as e:
            first = e.errors()[0]
            msg = str(first.get("msg", "invalid value"))
            loc = ".".join(str(p) for p in first.get("loc", ()))
            if msg.startswith("Value error, "):
                msg = msg[len("Value error, "):]
            elif loc:
                msg = f"{loc}: {msg}"
            raise InvalidOptions(msg) from e


class _MediaFilterOptions(_Options):
    include_images: bool = True
    include_videos: bool = False

    @model_validator(mode="after")
    def _default_to_images(self):
        # at least one media type is always queried
        if not self.include_images and not self.include_videos:
            self.include_images = True
        return self

    @property
    def media_kinds(self) -> frozenset[MediaKind]:
        kinds = set()
        if self.include_images:
            kinds.add(MediaKind.image)
        if self.include_videos:
            kinds.add(MediaKind.video)
        return frozenset(kinds)


class GetLibraryOptions(_MediaFilterOptions):
    offset: int = 0
    limit: Optional[int] = None
    include_images: bool = True
    include_videos: bool = False
    include_album_data: bool = False
    include_cloud_data: bool = True
    use_original_file_names: bool = False
    thumbnail_width: int = 512
    thumbnail_height: int = 384
    thumbnail_quality: float = 0.5
    include_full_resolution_data: bool = False

    @field_validator("offset")
    @classmethod
    def _offset_non_negative(cls, v: int) -> int:
        if v < 0:
            raise ValueError("offset must be greater than or equal to 0")
        return v

    @field_validator("limit")
    @classmethod
    def _limit_non_negative(cls, v: Optional[int]) -> Optional[int]:
        if v is None:
            return None
        if v < 0:
            raise ValueError("limit must be greater than or equal to 0")
        return v or None  # 0 means "no limit"

    @field_validator("thumbnail_width", "thumbnail_height", mode="before")
    @classmethod
    def _dims(cls, v):
        return _clamp_dimension(v)

    @field_validator("thumbnail_quality", mode="before")
    @classmethod
    def _quality(cls, v):
        return _clamp_quality(v)

    @property
    def window(self) -> PageWindow:
        return PageWindow(offset=self.offset, limit=self.limit)

    @property
    def wants_thumbnail(self) -> bool:
        return self.thumbnail_width > 0 and self.thumbnail_height > 0


class PickMediaOptions(_MediaFilterOptions):
    selection_limit: int = 1
    include_images: bool = True
    include_videos: bool = False
    thumbnail_width: int = 256
    thumbnail_height: int = 256
    thumbnail_quality: float = 0.7

    @field_validator("selection_limit")
    @classmethod
    def _selection_non_negative(cls, v: int) -> int:
        if v < 0:
            raise ValueError("selectionLimit must be greater than or equal to 0")
        return v

    @field_validator("thumbnail_width", "thumbnail_height", mode="before")
    @classmethod
    def _dims(cls, v):
        return _clamp_dimension(v)

    @field_validator("thumbnail_quality", mode="before")
    @classmethod
    def _quality(cls, v):
        return _clamp_quality(v)

    @property
    def wants_thumbnail(self) -> bool:
        return self.thumbnail_width > 0 and self.thumbnail_height > 0


class ThumbnailRequest(_Options):
    width: int = 512
    height: int = 384
    quality: float = 0.5

    @field_validator("width", "height", mode="before")
    @classmethod
    def _dims(cls, v):
        return _clamp_dimension(v)

    @field_validator("quality", mode="before")
    @classmethod
    def _quality(cls, v):
        return _clamp_quality(v)
