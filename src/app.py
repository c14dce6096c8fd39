"""Application entry point for the taskbar-twitch watcher."""

from __future__ import annotations

import argparse
import asyncio
import logging
import os
from logging.handlers import RotatingFileHandler
from typing import Callable, Optional

from art import tprint

import settings
from adapters.json_config import ConfigOverrides, JsonConfigSource, read_document
from adapters.log_notifier import LoggingEventSink
from adapters.notification_formatting import format_channel_list
from adapters.twitch_api import TwitchApiClient, build_session
from core.config import PollerConfig, WatcherConfig
from core.errors import ApiError, ConfigError, CredentialsRejectedError
from core.models import State
from core.poller import StatusPoller
from core.shared_state import SharedState
from core.wake import WakeSignal
from core.watcher import ConfigWatcher

NAME = "TASKBAR TWITCH"
FONT = "small"


def _print_banner() -> None:
    tprint(NAME, FONT, space=1)


class _RedactingFormatter(logging.Formatter):
    def __init__(self, secrets: list[str], fmt: str, datefmt: Optional[str] = None) -> None:
        super().__init__(fmt=fmt, datefmt=datefmt)
        self._secrets = [secret for secret in secrets if secret]

    def add_secret(self, secret: str) -> None:
        if secret and secret not in self._secrets:
            self._secrets.append(secret)
            self._secrets.sort(key=len, reverse=True)

    def format(self, record: logging.LogRecord) -> str:
        message = super().format(record)
        for secret in self._secrets:
            message = message.replace(secret, "***")
        return message


def _logging_config(config_path: str) -> dict:
    # Logging must work even when the config is broken, so that failure is
    # reported by the regular first-load path instead.
    try:
        config = read_document(config_path).get("logging", {})
    except ConfigError:
        return {}
    return config if isinstance(config, dict) else {}


def _configure_logging(config: dict, verbose: bool = False) -> Optional[_RedactingFormatter]:
    if not config.get("enabled", True):
        return None

    level_name = "DEBUG" if verbose else str(config.get("level", "INFO")).upper()
    level = getattr(logging, level_name, logging.INFO)

    fmt = "%(asctime)s %(levelname)s %(name)s: %(message)s"
    datefmt = "%Y-%m-%d %H:%M:%S"
    redact_cfg = config.get("redact")
    if not isinstance(redact_cfg, dict):
        redact_cfg = {}
    redact = redact_cfg.get("enabled", True)
    secrets = [os.getenv(settings.ENV_CLIENT_SECRET, "")] if redact else []
    formatter = _RedactingFormatter(secrets, fmt=fmt, datefmt=datefmt)

    handlers: list[logging.Handler] = []

    if config.get("console", True):
        console_handler = logging.StreamHandler()
        console_handler.setLevel(level)
        console_handler.setFormatter(formatter)
        handlers.append(console_handler)

    file_cfg = config.get("file")
    if not isinstance(file_cfg, dict):
        file_cfg = {}
    if file_cfg.get("enabled", False):
        path = file_cfg.get("path", settings.LOG_PATH)
        if not os.path.isabs(path):
            path = os.path.join(settings.PROJECT_ROOT, path)
        directory = os.path.dirname(path)
        if directory:
            os.makedirs(directory, exist_ok=True)

        file_handler = RotatingFileHandler(
            path,
            maxBytes=int(file_cfg.get("max_bytes", 5 * 1024 * 1024)),
            backupCount=int(file_cfg.get("backup_count", 5)),
            encoding="utf-8",
        )
        file_handler.setLevel(level)
        file_handler.setFormatter(formatter)
        handlers.append(file_handler)

    if not handlers:
        return None

    logging.basicConfig(level=level, handlers=handlers)
    # aiohttp is chatty at DEBUG and adds nothing for this app.
    logging.getLogger("aiohttp").setLevel(logging.WARNING)
    return formatter if redact else None


def _poller_config() -> PollerConfig:
    return PollerConfig(
        interval=settings.UPDATE_CHANNELS_INTERVAL,
        max_retries=settings.MAX_RETRIES,
        retry_delay=settings.RETRY_DELAY,
        chunk_size=settings.STREAMS_CHUNK_SIZE,
    )


def _load_initial_state(source: JsonConfigSource) -> Optional[State]:
    logger = logging.getLogger(__name__)
    try:
        state = source.load()
    except ConfigError as exc:
        logger.error("Cannot start: %s", exc)
        return None
    logger.info(
        "Loaded %s channels from %s (player: %s)",
        len(state.channels),
        state.source_path,
        state.effective_player().value,
    )
    return state


async def _watch(
    source: JsonConfigSource,
    state: State,
    redact: Optional[Callable[[str], None]] = None,
) -> None:
    shared = SharedState(state)
    wake = WakeSignal()
    sink = LoggingEventSink(shared)

    async with build_session() as session:
        poller = StatusPoller(
            shared,
            TwitchApiClient(session),
            sink,
            wake,
            _poller_config(),
            on_token=redact,
        )
        watcher = ConfigWatcher(
            shared,
            source,
            sink,
            wake,
            WatcherConfig(interval=settings.READ_CONFIG_INTERVAL),
            on_secret=redact,
        )
        tasks = [
            asyncio.create_task(poller.run(), name="status-poller"),
            asyncio.create_task(watcher.run(), name="config-watcher"),
        ]
        try:
            done, _ = await asyncio.wait(tasks, return_when=asyncio.FIRST_COMPLETED)
        finally:
            # Cancellation is process-wide: when one loop ends, both end.
            for task in tasks:
                task.cancel()
            await asyncio.gather(*tasks, return_exceptions=True)

        for task in done:
            task.result()


async def _status_once(
    state: State,
    redact: Optional[Callable[[str], None]] = None,
) -> Optional[list[str]]:
    """Poll once; return the channel labels, or None if the poll did not happen."""

    shared = SharedState(state)
    async with build_session() as session:
        poller = StatusPoller(
            shared,
            TwitchApiClient(session),
            LoggingEventSink(),
            WakeSignal(),
            _poller_config(),
            on_token=redact,
        )
        if not await poller.try_authenticate():
            return None
        if state.channels and not await poller.poll_once():
            return None
    return format_channel_list(shared.snapshot())


def _run(args: argparse.Namespace) -> int:
    source = JsonConfigSource(args.config, _overrides_from_args(args))
    formatter = _configure_logging(_logging_config(source.path), verbose=args.verbose)
    logger = logging.getLogger(__name__)

    state = _load_initial_state(source)
    if state is None:
        return 1
    redact = formatter.add_secret if formatter is not None else None
    if redact is not None:
        redact(state.client_secret)

    try:
        if args.command == "status":
            labels = asyncio.run(_status_once(state, redact))
            if labels is None:
                logger.error("Could not fetch channel status from Twitch")
                return 1
            for label in labels:
                print(label)
            return 0
        logger.info("Starting taskbar-twitch")
        asyncio.run(_watch(source, state, redact))
    except CredentialsRejectedError as exc:
        logger.error("%s", exc)
        return 1
    except ApiError as exc:
        logger.error("Twitch API failure: %s", exc)
        return 1
    except KeyboardInterrupt:
        logger.info("Interrupted, shutting down")
    return 0


def _overrides_from_args(args: argparse.Namespace) -> ConfigOverrides:
    return ConfigOverrides(
        client=args.client,
        secret=args.secret,
        player=args.player,
        channels=tuple(args.channels) if args.channels is not None else None,
        notify_title_changed=(
            tuple(args.notify_title_changed) if args.notify_title_changed is not None else None
        ),
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="taskbar-twitch")
    parser.add_argument("--config", default=settings.CONFIG_PATH, help="Path to the channels JSON file")
    parser.add_argument("--client", help="Twitch client id (overrides the config file)")
    parser.add_argument("--secret", help="Twitch client secret (overrides the config file)")
    parser.add_argument("--player", help="How to open streams: browser, mpv or streamlink")
    parser.add_argument("--channels", nargs="+", metavar="NAME", help="Replace the tracked channel list")
    parser.add_argument(
        "--notify-title-changed",
        nargs="*",
        metavar="NAME",
        help="Replace the list of channels with title-change alerts",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Log at DEBUG level")

    subparsers = parser.add_subparsers(dest="command")
    subparsers.add_parser("run", help="Watch channels until interrupted (default)")
    subparsers.add_parser("status", help="Poll once and print every channel's status")
    return parser


def main(argv: Optional[list[str]] = None) -> None:
    args = build_parser().parse_args(argv)
    _print_banner()
    code = _run(args)
    if code:
        raise SystemExit(code)


if __name__ == "__main__":
    main()
