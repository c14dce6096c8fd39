"""Twitch-to-core payload mapping adapter.

This keeps Helix response shapes out of the core poller.
"""

from __future__ import annotations

from typing import Any, List, Optional

from core.errors import CredentialsRejectedError, InvalidResponseError
from core.models import StreamInfo


def parse_token_payload(payload: Any) -> str:
    """Return the access token from an OAuth client-credentials response."""

    if not isinstance(payload, dict):
        raise InvalidResponseError("token response is not an object")

    token = payload.get("access_token")
    if isinstance(token, str) and token:
        return token

    message = payload.get("message")
    if isinstance(message, str):
        raise CredentialsRejectedError(f"Twitch rejected the client credentials: {message}")

    raise InvalidResponseError("token response has neither 'access_token' nor 'message'")


def _viewer_count(value: Any) -> Optional[int]:
    # bool is an int subclass; Helix never sends one here.
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        return None
    return value


def _title(value: Any) -> Optional[str]:
    if not isinstance(value, str):
        return None
    return value.strip()


def parse_streams_payload(payload: Any) -> List[StreamInfo]:
    """Map a Helix ``/streams`` response to StreamInfo entries.

    Entries without a usable ``user_login`` are skipped rather than failing
    the whole response.
    """

    if not isinstance(payload, dict):
        raise InvalidResponseError("streams response is not an object")
    if "error" in payload:
        message = payload.get("message") or payload.get("error")
        raise InvalidResponseError(f"streams response reported an error: {message}")
    if "data" not in payload:
        raise InvalidResponseError("streams response has no 'data' field; check the channel names")

    data = payload["data"]
    if not isinstance(data, list):
        raise InvalidResponseError("streams response 'data' is not a list")

    streams: List[StreamInfo] = []
    for entry in data:
        if not isinstance(entry, dict):
            continue
        login = entry.get("user_login")
        if not isinstance(login, str) or not login:
            continue
        streams.append(
            StreamInfo(
                user_login=login,
                title=_title(entry.get("title")),
                viewer_count=_viewer_count(entry.get("viewer_count")),
            )
        )
    return streams
