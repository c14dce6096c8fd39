"""Single-slot wake signal between the config watcher and the status poller."""

from __future__ import annotations

import asyncio


class WakeSignal:
    """At-least-once wake-up; repeated notifies before a wait coalesce."""

    def __init__(self) -> None:
        self._event = asyncio.Event()

    def notify(self) -> None:
        self._event.set()

    def is_set(self) -> bool:
        return self._event.is_set()

    async def wait(self, timeout: float) -> bool:
        """Wait up to ``timeout`` seconds; return True if woken by ``notify``."""

        try:
            await asyncio.wait_for(self._event.wait(), timeout)
        except asyncio.TimeoutError:
            return False
        self._event.clear()
        return True
