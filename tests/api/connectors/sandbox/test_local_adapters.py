"""Testes dos adapters sem rede: mock (sandbox) e PIX estático."""

from __future__ import annotations

import pytest

from api.connectors.mock import MockPaymentAdapter
from api.connectors.static_pix import StaticPixAdapter
from api.payload_builders.pix import verify_br_code
from app.protocols.models import ChargeRequest
from fsm.states import TransactionStatus


@pytest.mark.asyncio
@pytest.mark.parametrize(
    ("capture", "expected"),
    [(True, TransactionStatus.PAID), (False, TransactionStatus.AUTHORIZED)],
)
async def test_mock_card_respects_capture(capture: bool, expected: TransactionStatus) -> None:
    request = ChargeRequest(transaction_id="tx_1", method="card", amount_cents=9999, capture=capture)

    result = await MockPaymentAdapter().charge(request)

    assert result.success is True
    assert result.status == expected
    assert result.provider_reference == "mock-card-tx_1"


@pytest.mark.asyncio
async def test_mock_pix_is_pending_with_valid_br_code() -> None:
    request = ChargeRequest(transaction_id="tx_1", method="pix", amount_cents=1234)

    result = await MockPaymentAdapter().charge(request)

    assert result.status == TransactionStatus.PENDING
    assert result.provider_reference == "mock-pix-tx_1"
    assert verify_br_code(result.raw["qr_code"])
    assert "540512.34" in result.raw["qr_code"]


@pytest.mark.asyncio
async def test_mock_confirm_is_paid() -> None:
    result = await MockPaymentAdapter().confirm("mock-pix-tx_1")
    assert result.status == TransactionStatus.PAID
    assert result.provider_reference == "mock-pix-tx_1"


@pytest.mark.asyncio
async def test_static_pix_generates_br_code() -> None:
    adapter = StaticPixAdapter(pix_key="financeiro@axionpay.dev", merchant_name="Loja Teste", merchant_city="Curitiba")
    request = ChargeRequest(transaction_id="tx_abc", method="pix", amount_cents=1234)

    result = await adapter.charge(request)

    assert result.success is True
    assert result.status == TransactionStatus.PENDING
    assert result.provider_reference == "pix-TXABC"
    assert result.raw["amount"] == "12.34"
    assert result.raw["merchant_name"] == "LOJA TESTE"
    assert verify_br_code(result.raw["qr_code"])


@pytest.mark.asyncio
async def test_static_pix_rejects_card() -> None:
    adapter = StaticPixAdapter(pix_key="financeiro@axionpay.dev")
    request = ChargeRequest(transaction_id="tx_1", method="card", amount_cents=100)

    result = await adapter.charge(request)

    assert result.success is False


@pytest.mark.asyncio
async def test_static_pix_without_key_fails() -> None:
    request = ChargeRequest(transaction_id="tx_1", method="pix", amount_cents=100)

    result = await StaticPixAdapter(pix_key="").charge(request)

    assert result.success is False
    assert result.status == TransactionStatus.FAILED


@pytest.mark.asyncio
async def test_static_pix_confirm_is_manual() -> None:
    result = await StaticPixAdapter(pix_key="k").confirm("pix-TX1")
    assert result.status == TransactionStatus.PAID
    assert result.raw["confirmation"] == "manual"
