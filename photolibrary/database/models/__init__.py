# photolibrary/database/models/__init__.py

from photolibrary.database.core.main import Base
from photolibrary.database.models.library import (
    LibraryAlbum,
    LibraryAsset,
    library_album_asset,
)

__all__ = [
    "Base",
    "LibraryAlbum",
    "LibraryAsset",
    "library_album_asset",
]
