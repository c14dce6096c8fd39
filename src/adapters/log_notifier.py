"""Event sink adapters.

``LoggingEventSink`` is the headless stand-in for the tray/toast layer: it
writes alerts to the log and, on every state change, the current channel
labels read from a snapshot.
"""

from __future__ import annotations

import logging
from typing import Optional

from adapters.notification_formatting import format_channel_list, format_title_changed, format_went_live
from core.models import StateChanged, StreamEvent, TitleChanged, WentLive
from core.shared_state import SharedState

LOGGER = logging.getLogger(__name__)


class LoggingEventSink:
    """Event sink that logs alerts instead of showing desktop toasts."""

    def __init__(self, state: Optional[SharedState] = None, logger: Optional[logging.Logger] = None) -> None:
        self._state = state
        self._logger = logger or LOGGER

    async def emit(self, event: StreamEvent) -> None:
        if isinstance(event, WentLive):
            heading, body = format_went_live(event)
            self._logger.info("%s | %s", body, heading)
        elif isinstance(event, TitleChanged):
            heading, body = format_title_changed(event)
            self._logger.info("%s: %s", heading, body)
        elif isinstance(event, StateChanged) and self._state is not None:
            if self._logger.isEnabledFor(logging.DEBUG):
                for label in format_channel_list(self._state.snapshot()):
                    self._logger.debug("  %s", label)
