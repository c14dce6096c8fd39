from __future__ import annotations

import pytest

from adapters.twitch_mapper import parse_streams_payload, parse_token_payload
from core.errors import CredentialsRejectedError, InvalidResponseError
from core.models import StreamInfo


def test_token_payload_success() -> None:
    assert parse_token_payload({"access_token": "abc", "expires_in": 5000}) == "abc"


def test_token_payload_with_message_is_rejection() -> None:
    with pytest.raises(CredentialsRejectedError):
        parse_token_payload({"status": 403, "message": "invalid client secret"})


@pytest.mark.parametrize("payload", [{}, {"status": 500}, [], "nope"])
def test_token_payload_unknown_shapes(payload) -> None:
    with pytest.raises(InvalidResponseError):
        parse_token_payload(payload)


def test_streams_payload_maps_entries() -> None:
    payload = {
        "data": [
            {"user_login": "alice", "user_name": "Alice", "title": " Chatting ", "viewer_count": 120},
            {"user_login": "bob", "title": "", "viewer_count": -1},
            {"user_name": "NoLogin", "title": "x", "viewer_count": 1},
            "garbage",
        ],
        "pagination": {},
    }

    assert parse_streams_payload(payload) == [
        StreamInfo(user_login="alice", title="Chatting", viewer_count=120),
        StreamInfo(user_login="bob", title="", viewer_count=None),
    ]


@pytest.mark.parametrize(
    "payload",
    [
        {"error": "Bad Request", "status": 400, "message": "Malformed query params."},
        {"pagination": {}},
        {"data": {"user_login": "alice"}},
        ["data"],
    ],
)
def test_streams_payload_invalid_shapes(payload) -> None:
    with pytest.raises(InvalidResponseError):
        parse_streams_payload(payload)
