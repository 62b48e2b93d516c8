from __future__ import annotations

import logging
import os
import threading
import time
from concurrent.futures import Future, ThreadPoolExecutor
from dataclasses import dataclass
from typing import Callable, Generic, Optional, TypeVar

R = TypeVar("R")

log = logging.getLogger(__name__)


@dataclass
class ThreadStats:
    start_ts: float
    tasks_submitted: int = 0
    tasks_completed: int = 0
    tasks_failed: int = 0

    @property
    def uptime_sec(self) -> float:
        return time.time() - self.start_ts

    @property
    def in_flight(self) -> int:
        return max(0, self.tasks_submitted - (self.tasks_completed + self.tasks_failed))


class ThreadManager(Generic[R]):
    """
    Bounded worker pool for the blocking parts of the library: catalog
    queries, artifact production and picked-result ingestion.

    ``submit(fn, *args, **kwargs)`` returns a Future. Outstanding work is
    capped by ``max_queue`` (semaphore backpressure), so a large pick cannot
    flood the executor.
    """

    def __init__(
        self,
        name: str = "photolibrary",
        max_workers: Optional[int] = None,
        max_queue: Optional[int] = None,
        log_exceptions: bool = True,
    ) -> None:
        if max_workers is None:
            n = os.cpu_count() or 4
            max_workers = max(4, min(8, n * 2))  # I/O-friendly default

        self._name = name
        self._max_workers = max_workers
        self._executor = ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix=name)
        self._stats = ThreadStats(start_ts=time.time())
        self._log_exceptions = log_exceptions
        self._slots = threading.Semaphore(max_queue) if max_queue and max_queue > 0 else None
        self._closed = False
        self._lock = threading.Lock()

    # -------------------------
    # Lifecycle
    # -------------------------
    def shutdown(self, wait: bool = True, cancel_futures: bool = False) -> None:
        """Shut down the executor. Safe to call multiple times."""
        with self._lock:
            if self._closed:
                return
            self._closed = True
        self._executor.shutdown(wait=wait, cancel_futures=cancel_futures)

    def __enter__(self) -> "ThreadManager[R]":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.shutdown(wait=True, cancel_futures=True)

    @property
    def max_workers(self) -> int:
        return self._max_workers

    def stats(self) -> ThreadStats:
        """Return a *snapshot* of current stats."""
        with self._lock:
            return ThreadStats(
                start_ts=self._stats.start_ts,
                tasks_submitted=self._stats.tasks_submitted,
                tasks_completed=self._stats.tasks_completed,
                tasks_failed=self._stats.tasks_failed,
            )

    # -------------------------
    # Submission
    # -------------------------
    def submit(self, fn: Callable[..., R], /, *args, **kwargs) -> Future[R]:
        if self._closed:
            raise RuntimeError(f"{self._name}: submit() after shutdown")

        if self._slots is not None:
            self._slots.acquire()

        def _wrapped(*a, **kw) -> R:
            try:
                return fn(*a, **kw)
            finally:
                if self._slots is not None:
                    self._slots.release()

        with self._lock:
            self._stats.tasks_submitted += 1

        try:
            fut: Future[R] = self._executor.submit(_wrapped, *args, **kwargs)
        except RuntimeError:
            if self._slots is not None:
                self._slots.release()
            raise

        def _done(f: Future[R]) -> None:
            exc = f.exception() if not f.cancelled() else None
            with self._lock:
                if f.cancelled() or exc is not None:
                    self._stats.tasks_failed += 1
                else:
                    self._stats.tasks_completed += 1
            if exc is not None and self._log_exceptions:
                log.debug("%s task failed: %s", self._name, exc)

        fut.add_done_callback(_done)
        return fut
