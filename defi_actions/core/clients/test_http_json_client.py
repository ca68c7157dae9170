from __future__ import annotations

import httpx
import pytest

from defi_actions.core.clients.HttpJsonClient import HttpJsonClient
from defi_actions.core.errors import DefiActionError, ErrorCode

BASE_URL = "https://api.example.test/v1"


def _client(handler) -> httpx.AsyncClient:
    return httpx.AsyncClient(transport=httpx.MockTransport(handler))


@pytest.mark.asyncio
async def test_get_json_builds_url_and_drops_none_params():
    seen: dict[str, object] = {}

    async def _handler(request: httpx.Request) -> httpx.Response:
        seen["path"] = request.url.path
        seen["params"] = dict(request.url.params)
        seen["accept"] = request.headers.get("accept")
        return httpx.Response(200, json={"ok": True})

    async with _client(_handler) as raw:
        async with HttpJsonClient(base_url=BASE_URL, provider="demo", client=raw) as http:
            out = await http.get_json("/limits", {"amount": 5, "token": None})

    assert out == {"ok": True}
    assert seen["path"] == "/v1/limits"
    assert seen["params"] == {"amount": "5"}
    assert seen["accept"] == "application/json"


@pytest.mark.asyncio
async def test_injected_client_is_not_closed():
    async def _handler(_request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={})

    async with _client(_handler) as raw:
        async with HttpJsonClient(base_url=BASE_URL, provider="demo", client=raw):
            pass
        assert not raw.is_closed


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "status,code",
    [
        (429, ErrorCode.RATE_LIMITED),
        (401, ErrorCode.AUTH),
        (403, ErrorCode.AUTH),
        (400, ErrorCode.UNAVAILABLE),
        (503, ErrorCode.UNAVAILABLE),
    ],
)
async def test_status_codes_map_to_error_codes(status, code):
    async def _handler(_request: httpx.Request) -> httpx.Response:
        return httpx.Response(status, text="nope")

    async with _client(_handler) as raw:
        http = HttpJsonClient(base_url=BASE_URL, provider="demo", client=raw)
        with pytest.raises(DefiActionError) as exc:
            await http.get_json("/quote")
    assert exc.value.code == code


@pytest.mark.asyncio
async def test_transport_error_is_unavailable():
    async def _handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("refused", request=request)

    async with _client(_handler) as raw:
        http = HttpJsonClient(base_url=BASE_URL, provider="demo", client=raw)
        with pytest.raises(DefiActionError) as exc:
            await http.get_json("/quote")
    assert exc.value.code == ErrorCode.UNAVAILABLE
    assert exc.value.retryable


@pytest.mark.asyncio
async def test_invalid_json_is_unavailable():
    async def _handler(_request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, text="<html>")

    async with _client(_handler) as raw:
        http = HttpJsonClient(base_url=BASE_URL, provider="demo", client=raw)
        with pytest.raises(DefiActionError, match="invalid JSON"):
            await http.get_json("/quote")
