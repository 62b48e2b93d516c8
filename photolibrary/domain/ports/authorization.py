from __future__ import annotations
from typing import Protocol
from photolibrary.domain.enums.authorization_state import AuthorizationState

class AuthorizationPort(Protocol):
    def current_state(self) -> AuthorizationState: ...
    def request_access(self) -> AuthorizationState: ...
