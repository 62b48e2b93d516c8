from photolibrary.domain.enums.artifact_kind import ArtifactKind
from photolibrary.domain.enums.authorization_state import AuthorizationState
from photolibrary.domain.enums.media_kind import MediaKind
__all__ = [
    "ArtifactKind",
    "AuthorizationState",
    "MediaKind",
]
