from __future__ import annotations

import asyncio

import aiohttp
import pytest
from aiohttp import test_utils, web

from adapters.twitch_api import TwitchApiClient
from core.errors import CredentialsRejectedError, InvalidResponseError, TokenExpiredError, TransportError
from core.models import StreamInfo


def _run_against(routes: dict, action):
    async def scenario():
        app = web.Application()
        for path, handler in routes.items():
            app.router.add_route("*", path, handler)
        server = test_utils.TestServer(app)
        await server.start_server()
        try:
            async with aiohttp.ClientSession() as session:
                client = TwitchApiClient(
                    session,
                    token_url=str(server.make_url("/token")),
                    streams_url=str(server.make_url("/streams")),
                )
                return await action(client)
        finally:
            await server.close()

    return asyncio.run(scenario())


def test_authenticate_posts_client_credentials() -> None:
    seen = {}

    async def token(request: web.Request) -> web.Response:
        seen["method"] = request.method
        seen["query"] = dict(request.query)
        return web.json_response({"access_token": "abc", "expires_in": 5000, "token_type": "bearer"})

    result = _run_against({"/token": token}, lambda client: client.authenticate("cid", "csecret"))

    assert result == "abc"
    assert seen["method"] == "POST"
    assert seen["query"] == {"client_id": "cid", "client_secret": "csecret", "grant_type": "client_credentials"}


def test_authenticate_rejected() -> None:
    async def token(request: web.Request) -> web.Response:
        return web.json_response({"status": 403, "message": "invalid client secret"}, status=403)

    with pytest.raises(CredentialsRejectedError):
        _run_against({"/token": token}, lambda client: client.authenticate("cid", "bad"))


def test_fetch_streams_sends_headers_and_logins() -> None:
    seen = {}

    async def streams(request: web.Request) -> web.Response:
        seen["logins"] = request.query.getall("user_login")
        seen["auth"] = request.headers.get("Authorization")
        seen["client"] = request.headers.get("Client-Id")
        return web.json_response({"data": [{"user_login": "alice", "title": "Chatting", "viewer_count": 120}]})

    result = _run_against({"/streams": streams}, lambda client: client.fetch_streams("cid", "abc", ["alice", "bob"]))

    assert result == [StreamInfo(user_login="alice", title="Chatting", viewer_count=120)]
    assert seen == {"logins": ["alice", "bob"], "auth": "Bearer abc", "client": "cid"}


@pytest.mark.parametrize(
    "status, body, expected",
    [
        (503, "unavailable", TransportError),
        (401, '{"error": "Unauthorized", "status": 401}', TokenExpiredError),
        (200, "<html>oops</html>", InvalidResponseError),
        (400, '{"error": "Bad Request", "status": 400, "message": "Malformed query params."}', InvalidResponseError),
    ],
)
def test_fetch_streams_error_mapping(status, body, expected) -> None:
    async def streams(request: web.Request) -> web.Response:
        return web.Response(status=status, text=body)

    with pytest.raises(expected):
        _run_against({"/streams": streams}, lambda client: client.fetch_streams("cid", "abc", ["alice"]))


def test_connection_failure_is_transport_error() -> None:
    async def scenario():
        async with aiohttp.ClientSession() as session:
            client = TwitchApiClient(session, streams_url="http://127.0.0.1:9/streams")
            await client.fetch_streams("cid", "abc", ["alice"])

    with pytest.raises(TransportError):
        asyncio.run(scenario())
