"""Testes do HttpClient base dos adapters."""

from __future__ import annotations

import httpx
import pytest

from api.connectors.http_base import HttpClient, HttpClientConfig, response_json
from utils.errors import ProviderTransportError


def _client(handler, **config) -> HttpClient:
    config.setdefault("base_url", "https://gateway.test")
    config.setdefault("backoff_base_seconds", 0.0)
    return HttpClient(HttpClientConfig(**config), provider="fake", transport=httpx.MockTransport(handler))


@pytest.mark.asyncio
async def test_post_joins_base_url_and_merges_headers() -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(201, json={"id": "abc"})

    client = _client(handler, default_headers={"X-Default": "1"})
    response = await client.post("v1/charges", json={"value": 10}, headers={"X-Extra": "2"})

    assert response.status_code == 201
    assert str(seen[0].url) == "https://gateway.test/v1/charges"
    assert seen[0].headers["X-Default"] == "1"
    assert seen[0].headers["X-Extra"] == "2"


@pytest.mark.asyncio
async def test_absolute_url_is_kept() -> None:
    seen: list[str] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(str(request.url))
        return httpx.Response(200, json={})

    await _client(handler).get("https://outro.test/status")

    assert seen == ["https://outro.test/status"]


@pytest.mark.asyncio
async def test_client_errors_are_returned_to_caller() -> None:
    client = _client(lambda request: httpx.Response(422, json={"message": "recusado"}))

    response = await client.post("/charges", json={})

    assert response.status_code == 422
    assert response_json(response) == {"message": "recusado"}


@pytest.mark.asyncio
async def test_server_error_raises_without_retry() -> None:
    calls: list[int] = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(1)
        return httpx.Response(503)

    with pytest.raises(ProviderTransportError) as exc_info:
        await _client(handler).post("/charges", json={})

    assert exc_info.value.status_code == 503
    assert exc_info.value.provider == "fake"
    assert len(calls) == 1


@pytest.mark.asyncio
async def test_timeout_raises_without_retry() -> None:
    calls: list[int] = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(1)
        raise httpx.ReadTimeout("lento", request=request)

    with pytest.raises(ProviderTransportError, match="http_timeout"):
        await _client(handler).post("/charges", json={})
    assert len(calls) == 1


@pytest.mark.asyncio
async def test_connection_error_is_retried() -> None:
    calls: list[int] = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(1)
        if len(calls) < 3:
            raise httpx.ConnectError("recusado", request=request)
        return httpx.Response(200, json={"ok": True})

    response = await _client(handler, max_retries=2).post("/charges", json={})

    assert response.status_code == 200
    assert len(calls) == 3


@pytest.mark.asyncio
async def test_rate_limit_exhausted_raises() -> None:
    calls: list[int] = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(1)
        return httpx.Response(429)

    with pytest.raises(ProviderTransportError, match="http_rate_limited"):
        await _client(handler, max_retries=1).post("/charges", json={})
    assert len(calls) == 2


def test_response_json_non_json_body() -> None:
    assert response_json(httpx.Response(400, text="<html>")) == {}
