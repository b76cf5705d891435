from __future__ import annotations

import threading
from contextlib import contextmanager
from typing import Iterator

from core.errors import OperationInProgress


class ActionLatch:
    """Per-action busy flag: one in-flight request per action name."""

    def __init__(self) -> None:
        self._held: set[str] = set()
        # sync routes run on the threadpool; check-and-set must be atomic
        self._lock = threading.Lock()

    def is_held(self, action: str) -> bool:
        with self._lock:
            return action in self._held

    @contextmanager
    def hold(self, action: str) -> Iterator[None]:
        with self._lock:
            if action in self._held:
                raise OperationInProgress()
            self._held.add(action)
        try:
            yield
        finally:
            with self._lock:
                self._held.discard(action)
