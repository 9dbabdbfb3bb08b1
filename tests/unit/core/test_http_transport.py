import json

import httpx
import pytest

from carrier_rates.core.http import HttpxTransport, TransportError, TransportFailure


def _transport(handler) -> HttpxTransport:
    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return HttpxTransport(client=client)


@pytest.mark.asyncio
async def test_post_sends_json_and_headers() -> None:
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["url"] = str(request.url)
        seen["auth"] = request.headers.get("Authorization")
        seen["body"] = json.loads(request.content)
        return httpx.Response(200, json={"result": "ok"}, headers={"X-Trace": "t-1"})

    async with _transport(handler) as transport:
        response = await transport.post(
            "https://api.example.com/api/test",
            {"key": "value"},
            headers={"Authorization": "Bearer token123"},
        )

    assert response.status == 200
    assert response.data == {"result": "ok"}
    assert response.headers["x-trace"] == "t-1"
    assert seen == {
        "url": "https://api.example.com/api/test",
        "auth": "Bearer token123",
        "body": {"key": "value"},
    }


@pytest.mark.asyncio
@pytest.mark.parametrize("status", [400, 401, 429, 500, 503])
async def test_non_2xx_raises_http_status_failure(status: int) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(status, json={"error": "nope"}, headers={"Retry-After": "5"})

    transport = _transport(handler)
    with pytest.raises(TransportError) as info:
        await transport.post("https://api.example.com/endpoint", {})

    assert info.value.kind is TransportFailure.HTTP_STATUS
    assert info.value.status == status
    assert info.value.body == {"error": "nope"}
    assert info.value.header("Retry-After") == "5"


@pytest.mark.asyncio
async def test_error_body_that_is_not_json_is_kept_as_text() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(502, text="<html>Bad Gateway</html>")

    with pytest.raises(TransportError) as info:
        await _transport(handler).post("https://api.example.com/endpoint", {})

    assert info.value.body == "<html>Bad Gateway</html>"


@pytest.mark.asyncio
async def test_timeout_is_reported_as_timeout() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ReadTimeout("timed out", request=request)

    with pytest.raises(TransportError) as info:
        await _transport(handler).post("https://api.example.com/endpoint", {})

    assert info.value.kind is TransportFailure.TIMEOUT
    assert isinstance(info.value.cause, httpx.ReadTimeout)


@pytest.mark.asyncio
async def test_connection_refused_is_reported_as_connection() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(TransportError) as info:
        await _transport(handler).post("https://api.example.com/endpoint", {})

    assert info.value.kind is TransportFailure.CONNECTION


@pytest.mark.asyncio
async def test_success_with_non_json_body_is_a_decode_failure() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, text="not json")

    with pytest.raises(TransportError) as info:
        await _transport(handler).post("https://api.example.com/endpoint", {})

    assert info.value.kind is TransportFailure.DECODE
    assert info.value.body == "not json"
