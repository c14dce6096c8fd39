"""Lock-guarded handle around the single live ``State``.

All reads go through ``snapshot`` and all writes through ``mutate``. A
``threading.Lock`` is used rather than an asyncio one so a UI thread can read
snapshots too; callers must keep critical sections to pure in-memory work.
"""

from __future__ import annotations

import threading
from typing import Callable, TypeVar

from core.models import State

T = TypeVar("T")


class SharedState:
    """Exclusive-access wrapper shared by the poller, the watcher and the UI."""

    def __init__(self, state: State) -> None:
        self._state = state
        self._lock = threading.Lock()

    def snapshot(self) -> State:
        """Return a deep copy that later mutations cannot affect."""

        with self._lock:
            return self._state.clone()

    def mutate(self, fn: Callable[[State], T]) -> T:
        """Run ``fn`` against the live state while holding the lock.

        ``fn`` must not perform I/O or await anything.
        """

        with self._lock:
            return fn(self._state)
