"""Testes do adapter Woovi com httpx.MockTransport."""

from __future__ import annotations

import json

import httpx
import pytest

from api.connectors.http_base import HttpClient, HttpClientConfig
from api.connectors.woovi import WooviAdapter
from api.connectors.woovi.adapter import extract_reference, extract_status
from app.protocols.models import ChargeRequest
from fsm.states import TransactionStatus


def _adapter(handler, **kwargs) -> WooviAdapter:
    http = HttpClient(
        HttpClientConfig(base_url="https://woovi.test", backoff_base_seconds=0.0),
        provider="woovi",
        transport=httpx.MockTransport(handler),
    )
    kwargs.setdefault("api_key", "app-id")
    return WooviAdapter(http_client=http, **kwargs)


class TestExtraction:
    def test_reference_priority(self) -> None:
        assert extract_reference({"id": "a", "charge": {"id": "b"}}) == "a"
        assert extract_reference({"charge": {"correlationID": "c"}}) == "c"
        assert extract_reference({"pix": {"id": "p"}}) == "p"
        assert extract_reference({}) is None

    def test_status_from_nested_charge(self) -> None:
        assert extract_status({"charge": {"status": "COMPLETED"}}) == "COMPLETED"
        assert extract_status({"transaction": {"status": "ACTIVE"}}) == "ACTIVE"
        assert extract_status({}) is None


@pytest.mark.asyncio
async def test_pix_charge_sends_cents_and_correlation_id() -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json={"charge": {"status": "ACTIVE", "correlationID": "tx_1"}})

    request = ChargeRequest(
        transaction_id="tx_1",
        method="pix",
        amount_cents=1234,
        metadata={"description": "Pedido 42"},
    )
    result = await _adapter(handler).charge(request)

    assert result.success is True
    assert result.status == TransactionStatus.PENDING
    assert result.provider_reference == "tx_1"
    sent = json.loads(seen[0].content)
    assert sent["value"] == 1234
    assert sent["correlationID"] == "tx_1"
    assert sent["comment"] == "Pedido 42"
    assert seen[0].headers["Authorization"] == "app-id"
    assert seen[0].url.path == "/api/v1/charge"


@pytest.mark.asyncio
async def test_card_disabled_without_path() -> None:
    request = ChargeRequest(transaction_id="tx_1", method="card", amount_cents=100, card_hash="h")

    result = await _adapter(lambda r: httpx.Response(200, json={})).charge(request)

    assert result.success is False
    assert "Cartão" in result.error


@pytest.mark.asyncio
async def test_card_charge_formats_expiration() -> None:
    seen: list[dict] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(json.loads(request.content))
        return httpx.Response(200, json={"id": "card-1", "status": "paid"})

    request = ChargeRequest(
        transaction_id="tx_1",
        method="card",
        amount_cents=9999,
        card={"number": "4111", "holder_name": "A", "exp_month": 3, "exp_year": 2030, "cvv": "123"},
    )
    result = await _adapter(handler, card_path="/api/v1/card").charge(request)

    assert result.status == TransactionStatus.PAID
    assert seen[0]["card_expiration_date"] == "0330"
    assert seen[0]["amount"] == 9999


@pytest.mark.asyncio
async def test_card_pending_is_not_accepted() -> None:
    request = ChargeRequest(transaction_id="tx_1", method="card", amount_cents=100, card_hash="h")
    adapter = _adapter(lambda r: httpx.Response(200, json={"status": "ACTIVE"}), card_path="/card")

    result = await adapter.charge(request)

    assert result.success is False
    assert result.status == TransactionStatus.FAILED


@pytest.mark.asyncio
async def test_not_configured() -> None:
    request = ChargeRequest(transaction_id="tx_1", method="pix", amount_cents=100)
    result = await _adapter(lambda r: httpx.Response(200), api_key="").charge(request)
    assert result.success is False


@pytest.mark.asyncio
async def test_confirm_disabled_without_path() -> None:
    result = await _adapter(lambda r: httpx.Response(200)).confirm("ref-1")
    assert result.success is False
    assert result.provider_reference == "ref-1"


@pytest.mark.asyncio
async def test_confirm_completed_is_paid() -> None:
    adapter = _adapter(
        lambda r: httpx.Response(200, json={"charge": {"status": "COMPLETED"}}),
        pix_confirm_path="/api/v1/charge/confirm",
    )

    result = await adapter.confirm("ref-1")

    assert result.success is True
    assert result.status == TransactionStatus.PAID
    assert result.provider_reference == "ref-1"
