from __future__ import annotations

import json

import pytest

from adapters.json_config import ConfigOverrides, JsonConfigSource, build_state, read_document
from core.errors import ConfigError
from core.models import Channel, PlayerKind

DOCUMENT = {
    "client": "doc-client",
    "secret": "doc-secret",
    "player": "MPV",
    "channels": ["alice", "bob", "alice"],
    "notify_title_changed": ["alice"],
}


def _write(tmp_path, document) -> str:
    path = tmp_path / "config.json"
    path.write_text(json.dumps(document) if not isinstance(document, str) else document, encoding="utf-8")
    return str(path)


def test_load_builds_offline_state(tmp_path) -> None:
    path = _write(tmp_path, DOCUMENT)

    state = JsonConfigSource(path).load()

    assert state.client_id == "doc-client"
    assert state.client_secret == "doc-secret"
    assert state.selected_player is PlayerKind.MPV
    # Duplicate names: the first occurrence wins.
    assert state.channels == [Channel("alice"), Channel("bob")]
    assert state.notify_on_title_change == frozenset({"alice"})
    assert state.source_path == path


def test_missing_file_is_config_error(tmp_path) -> None:
    with pytest.raises(ConfigError):
        JsonConfigSource(str(tmp_path / "missing.json")).load()


@pytest.mark.parametrize("content", ["{not json", "[1, 2]"])
def test_unparsable_document_is_config_error(tmp_path, content) -> None:
    with pytest.raises(ConfigError):
        read_document(_write(tmp_path, content))


@pytest.mark.parametrize(
    "document",
    [
        {"secret": "s", "channels": []},
        {"client": "c", "secret": "s", "player": "vlc"},
        {"client": "c", "secret": "s", "channels": "alice"},
        {"client": "c", "secret": "s", "channels": ["alice", 3]},
    ],
)
def test_invalid_fields_are_config_errors(document) -> None:
    with pytest.raises(ConfigError):
        build_state(document, "config.json", env={})


def test_defaults_for_optional_fields() -> None:
    state = build_state({"client": "c", "secret": "s"}, "config.json", env={})

    assert state.selected_player is PlayerKind.BROWSER
    assert state.channels == []
    assert state.notify_on_title_change == frozenset()


def test_cli_overrides_win_field_by_field() -> None:
    overrides = ConfigOverrides(
        secret="cli-secret",
        player="streamlink",
        channels=("carol",),
        notify_title_changed=(),
    )

    state = build_state(DOCUMENT, "config.json", overrides, env={})

    assert state.client_id == "doc-client"
    assert state.client_secret == "cli-secret"
    assert state.selected_player is PlayerKind.STREAMLINK
    assert state.channels == [Channel("carol")]
    assert state.notify_on_title_change == frozenset()


def test_environment_credentials_sit_between_cli_and_document() -> None:
    env = {"TWITCH_CLIENT_ID": "env-client", "TWITCH_CLIENT_SECRET": "env-secret"}

    state = build_state(DOCUMENT, "config.json", ConfigOverrides(client="cli-client"), env=env)

    assert state.client_id == "cli-client"
    assert state.client_secret == "env-secret"


def test_reload_picks_up_edits(tmp_path) -> None:
    path = _write(tmp_path, DOCUMENT)
    source = JsonConfigSource(path)
    first = source.load()

    _write(tmp_path, {**DOCUMENT, "channels": ["dave"]})
    second = source.load()

    assert first.channel_names() == ["alice", "bob"]
    assert second.channel_names() == ["dave"]
