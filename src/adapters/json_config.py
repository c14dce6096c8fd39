"""JSON configuration source adapter.

Implements the core ConfigSourcePort on top of a flat, user-friendly JSON
document::

    {
      "client": "...",
      "secret": "...",
      "player": "browser",
      "channels": ["alice", "bob"],
      "notify_title_changed": ["alice"]
    }

Command-line overrides win over environment variables, which win over the
document. List overrides replace the document's lists wholesale.
"""

from __future__ import annotations

import json
import os
from dataclasses import dataclass
from typing import Any, Mapping, Optional, Tuple

import settings
from core.errors import ConfigError
from core.models import PlayerKind, State, build_channels, parse_player


@dataclass(frozen=True)
class ConfigOverrides:
    """Values supplied on the command line; ``None`` means not given."""

    client: Optional[str] = None
    secret: Optional[str] = None
    player: Optional[str] = None
    channels: Optional[Tuple[str, ...]] = None
    notify_title_changed: Optional[Tuple[str, ...]] = None


def read_document(path: str) -> dict:
    """Read and decode the configuration file, raising ConfigError on failure."""

    try:
        with open(path, "r", encoding="utf-8") as handle:
            document = json.load(handle)
    except FileNotFoundError as exc:
        raise ConfigError(f"Config file not found: {path}") from exc
    except json.JSONDecodeError as exc:
        raise ConfigError(f"Config file {path} is not valid JSON: {exc}") from exc
    except (OSError, UnicodeDecodeError) as exc:
        raise ConfigError(f"Could not read config file {path}: {exc}") from exc

    if not isinstance(document, dict):
        raise ConfigError(f"Config file {path} must contain a JSON object")
    return document


def _string_list(document: Mapping[str, Any], key: str) -> list[str]:
    value = document.get(key, [])
    if not isinstance(value, list) or not all(isinstance(item, str) for item in value):
        raise ConfigError(f"'{key}' must be a list of channel names")
    return [item.strip() for item in value if item.strip()]


def _credential(
    override: Optional[str],
    env: Mapping[str, str],
    env_name: str,
    document: Mapping[str, Any],
    key: str,
) -> str:
    if override:
        return override
    if env.get(env_name):
        return env[env_name]
    value = document.get(key)
    if not isinstance(value, str) or not value:
        raise ConfigError(f"'{key}' is required (or set {env_name})")
    return value


def build_state(
    document: Mapping[str, Any],
    source_path: str,
    overrides: Optional[ConfigOverrides] = None,
    env: Optional[Mapping[str, str]] = None,
) -> State:
    """Build a fresh, all-offline State from a decoded document."""

    overrides = overrides or ConfigOverrides()
    env = os.environ if env is None else env

    client_id = _credential(overrides.client, env, settings.ENV_CLIENT_ID, document, "client")
    client_secret = _credential(overrides.secret, env, settings.ENV_CLIENT_SECRET, document, "secret")

    if overrides.player is not None:
        player = parse_player(overrides.player)
    elif "player" in document:
        player = parse_player(document["player"])
    else:
        player = PlayerKind.BROWSER

    if overrides.channels is not None:
        names = list(overrides.channels)
    else:
        names = _string_list(document, "channels")

    if overrides.notify_title_changed is not None:
        notify = list(overrides.notify_title_changed)
    else:
        notify = _string_list(document, "notify_title_changed")

    return State(
        client_id=client_id,
        client_secret=client_secret,
        channels=build_channels(names),
        selected_player=player,
        notify_on_title_change=frozenset(notify),
        source_path=source_path,
    )


class JsonConfigSource:
    """Loads State from a JSON file each time ``load`` is called."""

    def __init__(self, path: str, overrides: Optional[ConfigOverrides] = None) -> None:
        self._path = os.path.abspath(path)
        self._overrides = overrides or ConfigOverrides()

    @property
    def path(self) -> str:
        return self._path

    def load(self) -> State:
        return build_state(read_document(self._path), self._path, self._overrides)
