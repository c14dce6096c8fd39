"""Core domain models.

These dataclasses are shared across the core and adapters to avoid tight
coupling to any Twitch- or file-specific types.
"""

from __future__ import annotations

import copy
import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import FrozenSet, Iterable, List, Optional, Union

from core.errors import ConfigError

LOGGER = logging.getLogger(__name__)

PLACEHOLDER_TITLE = "Untitled broadcast"


class PlayerKind(str, Enum):
    """How a live channel is opened by the presentation layer."""

    BROWSER = "browser"
    MPV = "mpv"
    STREAMLINK = "streamlink"

    def command_for(self, channel_name: str) -> List[str]:
        """Return the argv that opens ``channel_name`` with this player."""

        if self is PlayerKind.MPV:
            return ["mpv", f"https://twitch.tv/{channel_name}", "--ytdl-format=best"]
        if self is PlayerKind.STREAMLINK:
            return ["streamlink", f"twitch.tv/{channel_name}", "best"]
        return [f"https://twitch.tv/{channel_name}"]


def parse_player(value: str) -> PlayerKind:
    """Parse a free-form player name, rejecting anything unknown."""

    if not isinstance(value, str):
        raise ConfigError(f"player must be a string, got {type(value).__name__}")
    normalized = value.strip().lower()
    for kind in PlayerKind:
        if kind.value == normalized:
            return kind
    choices = ", ".join(kind.value for kind in PlayerKind)
    raise ConfigError(f"Unknown player {value!r} (expected one of: {choices})")


@dataclass
class Channel:
    """Last known status of one tracked stream."""

    name: str
    is_online: bool = False
    title: Optional[str] = None
    viewer_count: Optional[int] = None

    def copy_volatile_from(self, other: "Channel") -> None:
        self.is_online = other.is_online
        self.title = other.title
        self.viewer_count = other.viewer_count


@dataclass(frozen=True)
class StreamInfo:
    """One live entry parsed from the status API response."""

    user_login: str
    title: Optional[str]
    viewer_count: Optional[int]


@dataclass
class State:
    """The single mutable record of channels and settings.

    Only ``SharedState`` should hand out references to the live instance;
    everything else works on snapshots.
    """

    client_id: str
    client_secret: str
    channels: List[Channel] = field(default_factory=list)
    selected_player: PlayerKind = PlayerKind.BROWSER
    session_player_override: Optional[PlayerKind] = None
    notify_on_title_change: FrozenSet[str] = frozenset()
    source_path: str = ""

    def clone(self) -> "State":
        return copy.deepcopy(self)

    def channel_names(self) -> List[str]:
        return [channel.name for channel in self.channels]

    def effective_player(self) -> PlayerKind:
        """Session choice wins over the configured player."""

        if self.session_player_override is not None:
            return self.session_player_override
        return self.selected_player

    def replace_with(self, other: "State") -> None:
        """Overwrite every field in place with ``other``'s values."""

        self.client_id = other.client_id
        self.client_secret = other.client_secret
        self.channels = other.channels
        self.selected_player = other.selected_player
        self.session_player_override = other.session_player_override
        self.notify_on_title_change = other.notify_on_title_change
        self.source_path = other.source_path


def build_channels(names: Iterable[str]) -> List[Channel]:
    """Build fresh offline channels, keeping the first occurrence of a name."""

    channels: List[Channel] = []
    seen: set[str] = set()
    for name in names:
        if name in seen:
            LOGGER.warning("Duplicate channel %r in configuration, keeping the first one", name)
            continue
        seen.add(name)
        channels.append(Channel(name=name))
    return channels


def format_channel_label(channel: Channel) -> str:
    """Return the label shown for a channel, e.g. ``alice - Chatting (120 viewers)``."""

    label = channel.name
    if not channel.is_online:
        return label
    if channel.title:
        label = f"{label} - {channel.title}"
    if channel.viewer_count is not None:
        label = f"{label} ({channel.viewer_count} viewers)"
    return label


@dataclass(frozen=True)
class StateChanged:
    """Tracked state changed; the presentation layer should re-read it."""


@dataclass(frozen=True)
class WentLive:
    name: str
    title: Optional[str]
    viewer_count: Optional[int]


@dataclass(frozen=True)
class TitleChanged:
    name: str
    title: Optional[str]
    previous_title: Optional[str]


StreamEvent = Union[StateChanged, WentLive, TitleChanged]
