from __future__ import annotations

import pytest

from core.errors import ConfigError
from core.models import Channel, PlayerKind, State, build_channels, parse_player


@pytest.mark.parametrize(
    "raw, expected",
    [("browser", PlayerKind.BROWSER), (" MPV ", PlayerKind.MPV), ("Streamlink", PlayerKind.STREAMLINK)],
)
def test_parse_player(raw, expected) -> None:
    assert parse_player(raw) is expected


@pytest.mark.parametrize("raw", ["vlc", "", 3])
def test_parse_player_rejects_unknown(raw) -> None:
    with pytest.raises(ConfigError):
        parse_player(raw)


def test_player_commands() -> None:
    assert PlayerKind.BROWSER.command_for("alice") == ["https://twitch.tv/alice"]
    assert PlayerKind.MPV.command_for("alice") == ["mpv", "https://twitch.tv/alice", "--ytdl-format=best"]
    assert PlayerKind.STREAMLINK.command_for("alice") == ["streamlink", "twitch.tv/alice", "best"]


def test_session_override_wins() -> None:
    state = State(client_id="id", client_secret="secret", selected_player=PlayerKind.MPV)
    assert state.effective_player() is PlayerKind.MPV

    state.session_player_override = PlayerKind.BROWSER
    assert state.effective_player() is PlayerKind.BROWSER


def test_build_channels_first_occurrence_wins() -> None:
    assert build_channels(["alice", "bob", "alice", "Alice"]) == [
        Channel("alice"),
        Channel("bob"),
        Channel("Alice"),
    ]
