"""Status poller loop.

The poller enforces a strict order on every cycle:
1) Snapshot the tracked channel names (lock held only for the copy)
2) Query the status API outside the lock, retrying transport failures
3) Reconcile the response into the live state under the lock
4) Emit alerts and a state-changed event after the lock is released
5) Idle until the interval elapses or the config watcher wakes us

Credential rejection is the only failure that escapes ``run``; everything
else is logged and the loop carries on with the next cycle. A network
failure during the first authentication counts as a skipped cycle too.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Callable, List, Optional, Sequence

from core.config import PollerConfig
from core.errors import InvalidResponseError, TokenExpiredError, TransportError
from core.models import State, StateChanged, StreamEvent, StreamInfo
from core.ports import EventSinkPort, StatusApiPort
from core.reconcile import reconcile
from core.shared_state import SharedState
from core.wake import WakeSignal

LOGGER = logging.getLogger(__name__)


def unique_logins(names: Sequence[str]) -> List[str]:
    """Drop names that only differ by case, keeping configuration order."""

    seen: set[str] = set()
    result: List[str] = []
    for name in names:
        key = name.lower()
        if key in seen:
            continue
        seen.add(key)
        result.append(name)
    return result


class StatusPoller:
    """Keeps the volatile channel fields in sync with the Twitch status API."""

    def __init__(
        self,
        state: SharedState,
        api: StatusApiPort,
        sink: EventSinkPort,
        wake: WakeSignal,
        config: PollerConfig,
        on_token: Optional[Callable[[str], None]] = None,
    ) -> None:
        self._state = state
        self._api = api
        self._sink = sink
        self._wake = wake
        self._config = config
        self._on_token = on_token
        self._token: Optional[str] = None

    async def run(self) -> None:
        """Authenticate once, then poll forever."""

        while not await self.try_authenticate():
            await self.wait_idle()
        while True:
            await self.poll_once()
            await self.wait_idle()

    async def authenticate(self, snapshot: Optional[State] = None) -> None:
        # CredentialsRejectedError propagates and ends the run.
        if snapshot is None:
            snapshot = self._state.snapshot()
        self._token = await self._api.authenticate(snapshot.client_id, snapshot.client_secret)
        if self._on_token is not None:
            self._on_token(self._token)
        LOGGER.info("Authenticated with Twitch as client %s", snapshot.client_id)

    async def try_authenticate(self) -> bool:
        """Authenticate with the status query retry policy; False if it gave up."""

        snapshot = self._state.snapshot()
        attempts = self._config.max_retries + 1
        for attempt in range(1, attempts + 1):
            try:
                await self.authenticate(snapshot)
                return True
            except TransportError as exc:
                if attempt == attempts:
                    LOGGER.error("Authentication failed after %s attempts, trying again later: %s", attempts, exc)
                    return False
                LOGGER.warning("Authentication failed (attempt %s/%s): %s", attempt, attempts, exc)
                await asyncio.sleep(self._config.retry_delay)
            except InvalidResponseError as exc:
                LOGGER.error("Invalid token response, trying again later: %s", exc)
                return False
        return False

    async def poll_once(self) -> bool:
        """Run one query/reconcile cycle; return False if it was skipped."""

        snapshot = self._state.snapshot()
        names = unique_logins(snapshot.channel_names())
        if not names:
            LOGGER.debug("No channels configured, skipping status query")
            return False

        try:
            streams = await self._fetch_with_retry(snapshot, names)
        except TransportError as exc:
            LOGGER.error(
                "Status query failed after %s attempts, skipping this cycle: %s",
                self._config.max_retries + 1,
                exc,
            )
            return False
        except (InvalidResponseError, TokenExpiredError) as exc:
            LOGGER.error("Invalid status response, skipping this cycle: %s", exc)
            return False

        events = self._state.mutate(lambda live: reconcile(live, streams))
        for event in events:
            await self._emit(event)
        await self._emit(StateChanged())
        LOGGER.debug("Reconciled %s channels, %s live", len(names), len(streams))
        return True

    async def wait_idle(self) -> bool:
        """Sleep for the poll interval, returning early if woken."""

        woken = await self._wake.wait(self._config.interval)
        if woken:
            LOGGER.debug("Woken up by a configuration change")
        return woken

    async def _fetch_with_retry(self, snapshot: State, names: List[str]) -> List[StreamInfo]:
        attempts = self._config.max_retries + 1
        for attempt in range(1, attempts + 1):
            try:
                return await self._fetch(snapshot, names)
            except TransportError as exc:
                if attempt == attempts:
                    raise
                LOGGER.warning("Status query failed (attempt %s/%s): %s", attempt, attempts, exc)
                await asyncio.sleep(self._config.retry_delay)
        raise AssertionError("unreachable")

    async def _fetch(self, snapshot: State, names: List[str]) -> List[StreamInfo]:
        if self._token is None:
            await self.authenticate(snapshot)
        try:
            return await self._fetch_chunks(snapshot.client_id, names)
        except TokenExpiredError:
            LOGGER.info("Bearer token was rejected, re-authenticating")
            await self.authenticate(snapshot)
            return await self._fetch_chunks(snapshot.client_id, names)

    async def _fetch_chunks(self, client_id: str, names: List[str]) -> List[StreamInfo]:
        size = self._config.chunk_size
        streams: List[StreamInfo] = []
        for start in range(0, len(names), size):
            streams.extend(await self._api.fetch_streams(client_id, self._token, names[start : start + size]))
        return streams

    async def _emit(self, event: StreamEvent) -> None:
        try:
            await self._sink.emit(event)
        except Exception:
            LOGGER.exception("Event sink failed for %s", type(event).__name__)
