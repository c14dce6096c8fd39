"""Shared notification formatting helpers.

Keeping formatting here prevents drift between sinks and keeps alerts
consistent regardless of delivery channel.
"""

from __future__ import annotations

from typing import List, Tuple

from core.models import State, TitleChanged, WentLive, format_channel_label


def format_went_live(event: WentLive) -> Tuple[str, str]:
    """Return ``(heading, body)`` for a channel that just went live."""

    viewers = "unknown" if event.viewer_count is None else str(event.viewer_count)
    heading = event.title or event.name
    return heading, f"{event.name} is live! ({viewers} viewers)"


def format_title_changed(event: TitleChanged) -> Tuple[str, str]:
    """Return ``(heading, body)`` for a title change on a live channel."""

    return f"{event.name} changed title", event.title or ""


def format_channel_list(state: State) -> List[str]:
    """Return one label per tracked channel, in configuration order."""

    return [format_channel_label(channel) for channel in state.channels]
