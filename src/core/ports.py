"""Ports (interfaces) used by the core loops.

Ports define the minimal contracts for the status API, the configuration
source and event delivery so the core can be reused with different backends.
"""

from __future__ import annotations

from typing import List, Protocol, Sequence

from core.models import State, StreamEvent, StreamInfo


class StatusApiPort(Protocol):
    """Twitch operations required by the status poller."""

    async def authenticate(self, client_id: str, client_secret: str) -> str:
        ...

    async def fetch_streams(self, client_id: str, token: str, names: Sequence[str]) -> List[StreamInfo]:
        ...


class ConfigSourcePort(Protocol):
    """Blocking configuration loader; called off the event loop."""

    def load(self) -> State:
        ...


class EventSinkPort(Protocol):
    """Notification operations required by both loops."""

    async def emit(self, event: StreamEvent) -> None:
        ...
