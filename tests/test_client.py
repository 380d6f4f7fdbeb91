import asyncio

import httpx
import pytest

from chatwidget.ChatClient import (
    ChatClient,
    ChatNetworkError,
    RateLimitedError,
    ServerError,
    extract_reply,
)
from chatwidget.messages import FALLBACK_REPLY

from conftest import API_URL


def _client(handler) -> ChatClient:
    return ChatClient(
        API_URL, http_client=httpx.AsyncClient(transport=httpx.MockTransport(handler))
    )


MESSAGES = [{"role": "user", "content": "hi"}]


def test_complete_returns_reply_text():
    seen = []

    def handler(request):
        seen.append(request)
        return httpx.Response(200, json={"choices": [{"message": {"content": "hello"}}]})

    reply = asyncio.run(_client(handler).complete(MESSAGES))

    assert reply == "hello"
    assert str(seen[0].url) == API_URL
    assert seen[0].method == "POST"
    assert seen[0].headers["content-type"] == "application/json"


def test_rate_limit_status_raises():
    client = _client(lambda request: httpx.Response(429, json={"error": "slow down"}))

    with pytest.raises(RateLimitedError):
        asyncio.run(client.complete(MESSAGES))


@pytest.mark.parametrize("code", [400, 404, 500, 502])
def test_error_status_raises_server_error(code):
    client = _client(lambda request: httpx.Response(code, json={}))

    with pytest.raises(ServerError) as exc_info:
        asyncio.run(client.complete(MESSAGES))

    assert exc_info.value.status_code == code


def test_transport_failure_raises_network_error():
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(ChatNetworkError):
        asyncio.run(_client(handler).complete(MESSAGES))


def test_unknown_role_is_rejected_before_sending():
    client = _client(lambda request: httpx.Response(200, json={}))

    with pytest.raises(ValueError):
        asyncio.run(client.complete([{"role": "system", "content": "x"}]))


@pytest.mark.parametrize(
    "data",
    [
        {},
        None,
        [],
        {"choices": []},
        {"choices": [{}]},
        {"choices": [{"message": {}}]},
        {"choices": [{"message": {"content": ""}}]},
        {"choices": [{"message": {"content": ["not", "text"]}}]},
    ],
)
def test_extract_reply_falls_back_on_malformed_bodies(data):
    assert extract_reply(data) == FALLBACK_REPLY


def test_extract_reply_reads_first_choice():
    data = {
        "choices": [
            {"message": {"content": "first"}},
            {"message": {"content": "second"}},
        ]
    }

    assert extract_reply(data) == "first"


def test_shared_http_client_is_not_closed():
    http_client = httpx.AsyncClient(transport=httpx.MockTransport(lambda r: httpx.Response(200)))
    client = ChatClient(API_URL, http_client=http_client)

    asyncio.run(client.aclose())

    assert not http_client.is_closed
