"""Testes das operações de ciclo de vida (confirm, capture, cancel, refund, metadata)."""

from __future__ import annotations

import pytest

from app.use_cases.payments import PaymentIntent
from fsm import TransactionStatus
from tests.fakes.fake_payment_provider import FakePaymentProvider
from utils.errors import (
    InsufficientAmountError,
    InternalError,
    InvalidMethodError,
    InvalidRequestError,
    InvalidStatusError,
    NotFoundError,
)

CARD = {"number": "5555444433331111", "exp_month": 1, "exp_year": 2031, "cvv": "321"}


async def _create(services, **overrides):
    data = {"method": "card", "amount_cents": 9999, "card": CARD}
    data.update(overrides)
    result = await services.create_payment.execute(PaymentIntent(**data))
    return result.transaction


async def _event_types(ledger, transaction_id: str) -> list[str]:
    return [event.type for event in await ledger.list_events(transaction_id)]


async def _stored(ledger, transaction_id: str) -> dict:
    return (await ledger.get(transaction_id)).model_dump()


class TestCapture:
    @pytest.mark.asyncio
    async def test_authorized_card_is_captured_once(self, make_services, ledger) -> None:
        services = make_services(sandbox=True)
        transaction = await _create(services, capture=False)
        assert transaction.status == TransactionStatus.AUTHORIZED

        captured = await services.lifecycle.capture(transaction.id)

        assert captured.status == TransactionStatus.PAID
        assert "card_captured" in await _event_types(ledger, transaction.id)
        before = await _stored(ledger, transaction.id)
        with pytest.raises(InvalidStatusError):
            await services.lifecycle.capture(transaction.id)
        assert await _stored(ledger, transaction.id) == before

    @pytest.mark.asyncio
    async def test_capture_of_pix_is_invalid_method(self, make_services) -> None:
        services = make_services(sandbox=True)
        transaction = await _create(services, method="pix", card=None)

        with pytest.raises(InvalidMethodError):
            await services.lifecycle.capture(transaction.id)

    @pytest.mark.asyncio
    async def test_capture_unknown_transaction(self, make_services) -> None:
        with pytest.raises(NotFoundError):
            await make_services().lifecycle.capture("tx_inexistente")


class TestConfirm:
    @pytest.mark.asyncio
    async def test_confirm_static_pix(self, make_services, ledger) -> None:
        services = make_services()
        transaction = await _create(services, method="pix", card=None, amount_cents=1234)

        confirmed = await services.lifecycle.confirm(transaction.id)

        assert confirmed.status == TransactionStatus.PAID
        assert confirmed.metadata["pix_confirmation"]["confirmation"] == "manual"
        assert "pix_confirmed" in await _event_types(ledger, transaction.id)

    @pytest.mark.asyncio
    async def test_confirm_paid_pix_is_idempotent(self, make_services, ledger) -> None:
        services = make_services()
        transaction = await _create(services, method="pix", card=None)
        await services.lifecycle.confirm(transaction.id)
        events_before = await _event_types(ledger, transaction.id)

        again = await services.lifecycle.confirm(transaction.id)

        assert again.status == TransactionStatus.PAID
        assert await _event_types(ledger, transaction.id) == events_before

    @pytest.mark.asyncio
    async def test_confirm_card_is_invalid_method(self, make_services) -> None:
        services = make_services(sandbox=True)
        transaction = await _create(services)

        with pytest.raises(InvalidMethodError):
            await services.lifecycle.confirm(transaction.id)

    @pytest.mark.asyncio
    async def test_confirm_canceled_pix_is_invalid_status(self, make_services, ledger) -> None:
        services = make_services()
        transaction = await _create(services, method="pix", card=None)
        await services.lifecycle.cancel(transaction.id)
        before = await _stored(ledger, transaction.id)

        with pytest.raises(InvalidStatusError):
            await services.lifecycle.confirm(transaction.id)
        assert await _stored(ledger, transaction.id) == before

    @pytest.mark.asyncio
    async def test_provider_refusal_marks_failed(self, make_services, registry, ledger) -> None:
        gateway = FakePaymentProvider(name="mercadopago", confirm_success=False)
        registry.register(gateway)
        services = make_services()
        transaction = await _create(services, method="pix", card=None, metadata={"operation_mode": "black"})

        result = await services.lifecycle.confirm(transaction.id)

        assert gateway.confirms == [f"mercadopago-{transaction.id}"]
        assert result.status == TransactionStatus.FAILED
        assert result.metadata["error"] == "not confirmed"
        assert "pix_failed" in await _event_types(ledger, transaction.id)

    @pytest.mark.asyncio
    async def test_confirm_transport_error_raises_502(self, make_services, registry, ledger) -> None:
        registry.register(FakePaymentProvider(name="mercadopago", confirm_error=True))
        services = make_services()
        transaction = await _create(services, method="pix", card=None, metadata={"operation_mode": "black"})

        with pytest.raises(InternalError) as exc_info:
            await services.lifecycle.confirm(transaction.id)

        assert exc_info.value.status_code == 502
        assert (await ledger.get(transaction.id)).status == TransactionStatus.PENDING


class TestCancel:
    @pytest.mark.asyncio
    async def test_cancel_pending_and_authorized(self, make_services, ledger) -> None:
        services = make_services(sandbox=True)
        pix = await _create(services, method="pix", card=None)
        card = await _create(services, capture=False)

        assert (await services.lifecycle.cancel(pix.id)).status == TransactionStatus.CANCELED
        assert (await services.lifecycle.cancel(card.id)).status == TransactionStatus.CANCELED
        assert "payment_canceled" in await _event_types(ledger, pix.id)

    @pytest.mark.asyncio
    async def test_cancel_paid_is_invalid_status(self, make_services, ledger) -> None:
        services = make_services(sandbox=True)
        transaction = await _create(services)
        before = await _stored(ledger, transaction.id)

        with pytest.raises(InvalidStatusError):
            await services.lifecycle.cancel(transaction.id)
        assert await _stored(ledger, transaction.id) == before


class TestRefund:
    @pytest.mark.asyncio
    async def test_full_refund(self, make_services, ledger) -> None:
        services = make_services(sandbox=True)
        transaction = await _create(services)

        refunded = await services.lifecycle.refund(transaction.id)

        assert refunded.status == TransactionStatus.REFUNDED
        assert refunded.metadata["refund"] == {"amount_cents": 9999}
        assert "payment_refunded" in await _event_types(ledger, transaction.id)

    @pytest.mark.asyncio
    async def test_partial_refund(self, make_services) -> None:
        services = make_services(sandbox=True)
        transaction = await _create(services)

        refunded = await services.lifecycle.refund(transaction.id, 5000)

        assert refunded.status == TransactionStatus.REFUNDED
        assert refunded.metadata["refund"] == {"amount_cents": 5000}

    @pytest.mark.asyncio
    async def test_refund_above_amount(self, make_services) -> None:
        services = make_services(sandbox=True)
        transaction = await _create(services)

        with pytest.raises(InsufficientAmountError):
            await services.lifecycle.refund(transaction.id, 10000)

    @pytest.mark.asyncio
    async def test_refund_non_positive(self, make_services) -> None:
        services = make_services(sandbox=True)
        transaction = await _create(services)

        with pytest.raises(InvalidRequestError):
            await services.lifecycle.refund(transaction.id, 0)

    @pytest.mark.asyncio
    async def test_refund_unpaid_is_invalid_status(self, make_services, ledger) -> None:
        services = make_services(sandbox=True)
        transaction = await _create(services, capture=False)
        before = await _stored(ledger, transaction.id)

        with pytest.raises(InvalidStatusError):
            await services.lifecycle.refund(transaction.id)
        assert await _stored(ledger, transaction.id) == before

    @pytest.mark.asyncio
    async def test_refund_twice_is_invalid_status(self, make_services, ledger) -> None:
        services = make_services(sandbox=True)
        transaction = await _create(services)
        await services.lifecycle.refund(transaction.id)
        before = await _stored(ledger, transaction.id)

        with pytest.raises(InvalidStatusError):
            await services.lifecycle.refund(transaction.id)
        assert await _stored(ledger, transaction.id) == before


class TestMetadata:
    @pytest.mark.asyncio
    async def test_shallow_merge_with_redaction(self, make_services, ledger) -> None:
        services = make_services()
        transaction = await _create(services, method="pix", card=None, metadata={"pedido": "A1"})

        updated = await services.lifecycle.update_metadata(
            transaction.id,
            {"nota": "entregue", "card_hash": "segredo"},
        )

        assert updated.metadata["pedido"] == "A1"
        assert updated.metadata["nota"] == "entregue"
        assert updated.metadata["card_hash"] == "***"
        assert updated.status == transaction.status
        assert "metadata_updated" in await _event_types(ledger, transaction.id)

    @pytest.mark.asyncio
    async def test_metadata_on_final_status_is_allowed(self, make_services) -> None:
        services = make_services(sandbox=True)
        transaction = await _create(services)
        await services.lifecycle.refund(transaction.id)

        updated = await services.lifecycle.update_metadata(transaction.id, {"nota": "ok"})

        assert updated.status == TransactionStatus.REFUNDED
        assert updated.metadata["nota"] == "ok"

    @pytest.mark.asyncio
    async def test_metadata_unknown_transaction(self, make_services) -> None:
        with pytest.raises(NotFoundError):
            await make_services().lifecycle.update_metadata("tx_x", {"a": 1})
