from __future__ import annotations

import threading
from contextlib import contextmanager
from typing import Iterator, Optional
from uuid import uuid4

from photolibrary.domain.errors import PickInProgress


class PickSessionGuard:
    """
    Single "pending session" slot. ``begin()`` is a compare-and-swap on the
    slot: it claims it if empty and raises PickInProgress otherwise. A second
    pick is rejected, never queued.
    """

    def __init__(self) -> None:
        self._pending: Optional[str] = None
        self._lock = threading.Lock()

    @property
    def pending(self) -> Optional[str]:
        with self._lock:
            return self._pending

    def try_begin(self) -> Optional[str]:
        with self._lock:
            if self._pending is not None:
                return None
            self._pending = uuid4().hex
            return self._pending

    def end(self, session_id: str) -> None:
        with self._lock:
            if self._pending == session_id:
                self._pending = None

    @contextmanager
    def session(self) -> Iterator[str]:
        session_id = self.try_begin()
        if session_id is None:
            raise PickInProgress()
        try:
            yield session_id
        finally:
            self.end(session_id)
