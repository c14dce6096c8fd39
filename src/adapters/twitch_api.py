"""Twitch Helix API adapter.

Implements the core StatusApiPort on a shared aiohttp session. HTTP-level
failures are translated into the core error hierarchy so the poller can tell
retryable transport problems from bad credentials or bad payloads.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, List, Sequence

import aiohttp

import settings
from adapters.twitch_mapper import parse_streams_payload, parse_token_payload
from core.errors import InvalidResponseError, TokenExpiredError, TransportError
from core.models import StreamInfo

LOGGER = logging.getLogger(__name__)


def build_session(timeout: float = settings.HTTP_TIMEOUT) -> aiohttp.ClientSession:
    """Create the aiohttp session owned by the status poller."""

    return aiohttp.ClientSession(
        timeout=aiohttp.ClientTimeout(total=timeout),
        headers={"User-Agent": "taskbar-twitch"},
    )


class TwitchApiClient:
    """StatusApiPort implementation backed by aiohttp."""

    def __init__(
        self,
        session: aiohttp.ClientSession,
        token_url: str = settings.TOKEN_URL,
        streams_url: str = settings.STREAMS_URL,
    ) -> None:
        self._session = session
        self._token_url = token_url
        self._streams_url = streams_url

    async def authenticate(self, client_id: str, client_secret: str) -> str:
        """Exchange the client id/secret for an app access token."""

        params = {
            "client_id": client_id,
            "client_secret": client_secret,
            "grant_type": "client_credentials",
        }
        payload = await self._request("POST", self._token_url, params=params)
        return parse_token_payload(payload)

    async def fetch_streams(self, client_id: str, token: str, names: Sequence[str]) -> List[StreamInfo]:
        """Return live streams among ``names``; offline channels are absent."""

        params = [("user_login", name) for name in names]
        params.append(("first", str(max(len(names), 1))))
        headers = {"Authorization": f"Bearer {token}", "Client-Id": client_id}
        payload = await self._request("GET", self._streams_url, params=params, headers=headers, bearer=True)
        return parse_streams_payload(payload)

    async def _request(self, method: str, url: str, bearer: bool = False, **kwargs: Any) -> Any:
        try:
            async with self._session.request(method, url, **kwargs) as response:
                if response.status >= 500:
                    raise TransportError(f"{method} {url} returned HTTP {response.status}")
                if bearer and response.status == 401:
                    raise TokenExpiredError("bearer token rejected (HTTP 401)")
                try:
                    return await response.json(content_type=None)
                except ValueError as exc:
                    raise InvalidResponseError(f"{method} {url} did not return JSON") from exc
        except (aiohttp.ClientError, asyncio.TimeoutError) as exc:
            raise TransportError(f"{method} {url} failed: {exc!r}") from exc
