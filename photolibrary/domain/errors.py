# photolibrary/domain/errors.py
from __future__ import annotations


class PhotoLibraryError(Exception):
    """
    Base for every failure this library reports. ``reason`` is the structured,
    user-facing string; callers (API layer, bridges) surface it verbatim.
    """
    default_reason = "Photo library operation failed."

    def __init__(self, reason: str | None = None) -> None:
        self.reason = reason or self.default_reason
        super().__init__(self.reason)


class PermissionDenied(PhotoLibraryError):
    default_reason = "Permission Denial: application is not allowed to access photo library."


class InvalidOptions(PhotoLibraryError):
    def __init__(self, detail: str) -> None:
        self.detail = detail
        super().__init__(f"Invalid options: {detail}")


class AssetNotFound(PhotoLibraryError):
    default_reason = "Asset could not be found or no data was returned."


class TransformFailed(PhotoLibraryError):
    default_reason = "Asset could not be transformed."


class StorageWriteFailed(PhotoLibraryError):
    default_reason = "Artifact could not be written to the cache."


class PickInProgress(PhotoLibraryError):
    default_reason = "Another pick session is already in progress."
