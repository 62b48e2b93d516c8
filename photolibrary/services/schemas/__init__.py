from photolibrary.services.schemas.options import (
    GetLibraryOptions,
    PickMediaOptions,
    ThumbnailRequest,
)

__all__ = [
    "GetLibraryOptions",
    "PickMediaOptions",
    "ThumbnailRequest",
]
