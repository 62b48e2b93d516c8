# photolibrary/services/api/deps.py
from __future__ import annotations

from functools import lru_cache

from photolibrary.services.library_service import PhotoLibraryService


@lru_cache(maxsize=1)
def get_library_service() -> PhotoLibraryService:
    """
    Process-wide service built from settings. Routers depend on this; tests
    swap it via ``app.dependency_overrides[get_library_service]``.
    """
    return PhotoLibraryService.from_settings()
