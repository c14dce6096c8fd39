"""Structural comparison and merge of configuration snapshots (core domain).

Pure functions: no I/O and no locking. Channel identity during a merge is an
exact name match, unlike API reconciliation which ignores case.
"""

from __future__ import annotations

from core.models import Channel, State


def states_equal(a: State, b: State) -> bool:
    """Compare only the configuration-derived fields of two states.

    Volatile channel fields and the session player override are ignored.
    Channel order matters.
    """

    return (
        a.client_id == b.client_id
        and a.client_secret == b.client_secret
        and a.selected_player == b.selected_player
        and a.channel_names() == b.channel_names()
        and a.notify_on_title_change == b.notify_on_title_change
    )


def merge_states(old: State, new: State) -> State:
    """Return ``new``'s configuration carrying ``old``'s live channel data.

    Channels present in both keep their volatile fields, channels only in
    ``new`` start offline, and channels only in ``old`` are dropped. The
    session override always comes from ``old``. Neither input is modified.
    """

    previous = {channel.name: channel for channel in old.channels}
    channels = []
    for entry in new.channels:
        channel = Channel(name=entry.name)
        existing = previous.get(entry.name)
        if existing is not None:
            channel.copy_volatile_from(existing)
        channels.append(channel)

    return State(
        client_id=new.client_id,
        client_secret=new.client_secret,
        channels=channels,
        selected_player=new.selected_player,
        session_player_override=old.session_player_override,
        notify_on_title_change=frozenset(new.notify_on_title_change),
        source_path=new.source_path,
    )
