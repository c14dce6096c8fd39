"""Apply a status API response to the tracked channels (core domain)."""

from __future__ import annotations

from typing import Iterable, List

from core.models import PLACEHOLDER_TITLE, State, StreamEvent, StreamInfo, TitleChanged, WentLive


def _normalize_title(title: str | None) -> str:
    if title is None:
        return PLACEHOLDER_TITLE
    title = title.strip()
    return title or PLACEHOLDER_TITLE


def reconcile(state: State, streams: Iterable[StreamInfo]) -> List[StreamEvent]:
    """Update volatile channel fields in place and return alerts to emit.

    Matching is case-insensitive because Twitch logins are. Entries for
    channels that are no longer tracked are ignored. Channels without an entry
    go offline but keep their last title/viewer count.
    """

    live = {}
    for stream in streams:
        # First entry wins if the API ever repeats a login.
        live.setdefault(stream.user_login.lower(), stream)

    # Opt-ins follow the same case rule as login matching.
    notify = {name.lower() for name in state.notify_on_title_change}

    events: List[StreamEvent] = []
    for channel in state.channels:
        stream = live.get(channel.name.lower())
        if stream is None:
            channel.is_online = False
            continue

        title = _normalize_title(stream.title)
        was_online = channel.is_online
        previous_title = channel.title

        channel.title = title
        channel.viewer_count = stream.viewer_count

        if was_online:
            if title != previous_title and channel.name.lower() in notify:
                events.append(TitleChanged(name=channel.name, title=title, previous_title=previous_title))
        else:
            events.append(WentLive(name=channel.name, title=title, viewer_count=stream.viewer_count))

        channel.is_online = True

    return events
