"""Testes do adapter InfinitePay (checkout hospedado)."""

from __future__ import annotations

import json

import httpx
import pytest

from api.connectors.http_base import HttpClient, HttpClientConfig
from api.connectors.infinitepay import InfinitePayAdapter
from api.connectors.infinitepay.adapter import normalize_phone_number, pick_customer_phone
from app.protocols.models import ChargeRequest
from fsm.states import TransactionStatus


def _adapter(handler, **kwargs) -> InfinitePayAdapter:
    http = HttpClient(HttpClientConfig(), provider="infinitepay", transport=httpx.MockTransport(handler))
    kwargs.setdefault("handle", "loja-teste")
    return InfinitePayAdapter(http_client=http, **kwargs)


def _card_request(**overrides) -> ChargeRequest:
    data = {
        "transaction_id": "tx_1",
        "method": "card",
        "amount_cents": 5000,
        "customer": {"name": "Ana", "phone": "(41) 99999-0000"},
    }
    data.update(overrides)
    return ChargeRequest(**data)


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("(41) 99999-0000", "5541999990000"),
        ("4133330000", "554133330000"),
        ("+55 41 99999-0000", "5541999990000"),
        (None, ""),
    ],
)
def test_normalize_phone_number(raw: object, expected: str) -> None:
    assert normalize_phone_number(raw) == expected


def test_pick_customer_phone_falls_back_to_metadata() -> None:
    assert pick_customer_phone(None, {"customer_whatsapp": "41999990000"}) == "5541999990000"
    assert pick_customer_phone({}, {}) == ""


@pytest.mark.asyncio
async def test_checkout_link_created_as_pending() -> None:
    seen: list[dict] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(json.loads(request.content))
        return httpx.Response(200, json={"slug": "abc123", "url": "https://checkout/abc123"})

    result = await _adapter(handler, webhook_url="https://axion/webhooks/infinitepay").charge(_card_request())

    assert result.success is True
    assert result.status == TransactionStatus.PENDING
    assert result.provider_reference == "abc123"
    sent = seen[0]
    assert sent["order_nsu"] == "tx_1"
    assert sent["handle"] == "loja-teste"
    assert sent["items"][0]["price"] == 5000
    assert sent["customer"]["phone_number"] == "5541999990000"
    assert sent["webhook_url"] == "https://axion/webhooks/infinitepay"


@pytest.mark.asyncio
async def test_metadata_handle_overrides_default() -> None:
    seen: list[dict] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(json.loads(request.content))
        return httpx.Response(200, json={})

    result = await _adapter(handler).charge(_card_request(metadata={"handle": "outra-loja"}))

    assert seen[0]["handle"] == "outra-loja"
    assert result.provider_reference == "tx_1"


@pytest.mark.asyncio
async def test_pix_is_rejected() -> None:
    result = await _adapter(lambda r: httpx.Response(200)).charge(_card_request(method="pix"))
    assert result.success is False


@pytest.mark.asyncio
async def test_missing_phone_is_rejected_before_network() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise AssertionError("não deveria chamar a rede")

    result = await _adapter(handler).charge(_card_request(customer={"name": "Ana"}))

    assert result.success is False
    assert "phone_number" in result.error


@pytest.mark.asyncio
async def test_missing_handle_is_rejected() -> None:
    result = await _adapter(lambda r: httpx.Response(200), handle="").charge(_card_request())
    assert result.success is False


@pytest.mark.asyncio
async def test_confirm_not_supported() -> None:
    result = await _adapter(lambda r: httpx.Response(200)).confirm("abc")
    assert result.success is False
    assert result.provider_reference == "abc"
