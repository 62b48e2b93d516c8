from __future__ import annotations
from enum import StrEnum

class AuthorizationState(StrEnum):
    authorized = "authorized"
    limited = "limited"
    denied = "denied"
    not_determined = "notDetermined"

    @property
    def grants_access(self) -> bool:
        return self in (AuthorizationState.authorized, AuthorizationState.limited)
