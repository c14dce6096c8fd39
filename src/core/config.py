"""Core configuration dataclasses.

We keep config parsing outside the core, but these dataclasses define the
timing knobs the loops expect so the app layer and tests can build them safely.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class PollerConfig:
    """Timing and retry settings for the status poller."""

    interval: float
    max_retries: int
    retry_delay: float
    chunk_size: int = 100


@dataclass(frozen=True)
class WatcherConfig:
    """Timing settings for the config watcher."""

    interval: float
