from __future__ import annotations

import threading

from photolibrary.common.logging import get_logger
from photolibrary.domain.enums.authorization_state import AuthorizationState
from photolibrary.domain.errors import PermissionDenied
from photolibrary.domain.ports.authorization import AuthorizationPort

logger = get_logger(__name__)


class StaticAuthorization(AuthorizationPort):
    """
    Authorization driven by configuration instead of an OS prompt.

    ``request_access()`` only changes anything while the state is
    notDetermined, mirroring a one-time permission prompt: it moves to
    ``grant_on_request`` and stays there.
    """

    def __init__(
        self,
        state: AuthorizationState | str = AuthorizationState.authorized,
        grant_on_request: AuthorizationState | str = AuthorizationState.authorized,
    ) -> None:
        self._state = AuthorizationState(state)
        self._grant = AuthorizationState(grant_on_request)
        self._lock = threading.Lock()

    def current_state(self) -> AuthorizationState:
        return self._state

    def request_access(self) -> AuthorizationState:
        with self._lock:
            if self._state == AuthorizationState.not_determined:
                self._state = self._grant
                logger.info("Photo library access resolved to %s", self._state.value)
            return self._state


def require_access(auth: AuthorizationPort) -> AuthorizationState:
    """Raise PermissionDenied unless the state is authorized or limited."""
    state = auth.current_state()
    if not state.grants_access:
        raise PermissionDenied()
    return state
