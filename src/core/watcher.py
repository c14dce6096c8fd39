"""Configuration watcher loop.

Re-reads the configuration on a fixed interval and merges structural changes
into the live state without losing the poller's live channel data.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Callable, Optional

from core.config import WatcherConfig
from core.errors import ConfigError
from core.merge import merge_states, states_equal
from core.models import State, StateChanged
from core.ports import ConfigSourcePort, EventSinkPort
from core.shared_state import SharedState
from core.wake import WakeSignal

LOGGER = logging.getLogger(__name__)


class ConfigWatcher:
    """Hot-reloads the tracked channel set."""

    def __init__(
        self,
        state: SharedState,
        source: ConfigSourcePort,
        sink: EventSinkPort,
        wake: WakeSignal,
        config: WatcherConfig,
        on_secret: Optional[Callable[[str], None]] = None,
    ) -> None:
        self._state = state
        self._source = source
        self._sink = sink
        self._wake = wake
        self._config = config
        self._on_secret = on_secret
        self._last_error: Optional[str] = None

    async def run(self) -> None:
        while True:
            await self.check_once()
            await asyncio.sleep(self._config.interval)

    async def check_once(self) -> bool:
        """Reload once; return True if a changed configuration was merged."""

        snapshot = self._state.snapshot()
        try:
            candidate = await asyncio.to_thread(self._source.load)
        except ConfigError as exc:
            message = str(exc)
            # Only log a failure once until it changes or recovers.
            if message != self._last_error:
                LOGGER.warning("Could not re-read configuration, keeping current state: %s", message)
            self._last_error = message
            return False

        if self._last_error is not None:
            LOGGER.info("Configuration is readable again")
            self._last_error = None

        if states_equal(snapshot, candidate):
            return False

        self._state.mutate(lambda live: _apply_merge(live, candidate))
        if self._on_secret is not None:
            self._on_secret(candidate.client_secret)
        LOGGER.info(
            "Configuration changed, tracking %s channels: %s",
            len(candidate.channels),
            ", ".join(candidate.channel_names()),
        )

        self._wake.notify()
        try:
            await self._sink.emit(StateChanged())
        except Exception:
            LOGGER.exception("Event sink failed for StateChanged")
        return True


def _apply_merge(live: State, candidate: State) -> None:
    # Merge against the live record, not the earlier snapshot, so poller
    # updates made in between are carried over too.
    live.replace_with(merge_states(live, candidate))
