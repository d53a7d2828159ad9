"""Use case de criação de pagamento (PIX ou cartão).

Fluxo:
1. Replay pela Idempotency-Key, se houver
2. Roteamento do provedor (sem efeitos colaterais)
3. Montagem da transação `pending`, reserva da chave e insert (a chave é
   liberada se o insert falhar)
4. charge() com timeout
5. Aplicação do resultado pelo caminho de provedor (compare-and-set)
"""

from __future__ import annotations

import asyncio
import logging
import time
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from app.domain.transaction import (
    MAX_AMOUNT_CENTS,
    PaymentMethod,
    Transaction,
    cents_to_amount,
    new_transaction_id,
)
from app.observability import elapsed_ms, record_latency, record_provider_call
from app.protocols.models import ChargeRequest
from app.services.provider_router import normalize_operation_mode
from fsm import TransactionStatus
from utils.errors import InternalError, InvalidMethodError, InvalidRequestError, ProviderTransportError
from utils.redaction import redact

from ._persistence import apply_provider_status, record_event
from .card_summary import build_card_summary

if TYPE_CHECKING:
    from app.protocols.models import ProviderResult
    from app.protocols.payment_provider import PaymentProviderProtocol
    from app.protocols.transaction_ledger import TransactionLedgerProtocol
    from app.services.idempotency_guard import IdempotencyGuard
    from app.services.provider_registry import ProviderRegistry
    from app.services.provider_router import ProviderRouter

logger = logging.getLogger(__name__)

DEFAULT_PROVIDER_TIMEOUT_SECONDS = 10.0


@dataclass(frozen=True, slots=True)
class PaymentIntent:
    """Intenção de pagamento já validada pela camada HTTP."""

    method: str
    amount_cents: int
    currency: str = "BRL"
    capture: bool = True
    customer: dict[str, Any] | None = None
    card: dict[str, Any] | None = None
    card_hash: str | None = None
    metadata: dict[str, Any] = field(default_factory=dict)
    provider: str | None = None
    idempotency_key: str | None = None


@dataclass(frozen=True, slots=True)
class CreatePaymentResult:
    transaction: Transaction
    replayed: bool = False


def _customer_id(customer: dict[str, Any] | None) -> str | None:
    if not customer or customer.get("id") in (None, ""):
        return None
    return str(customer["id"]).strip() or None


class CreatePaymentUseCase:
    """Orquestra idempotência, roteamento, persistência e charge."""

    def __init__(
        self,
        ledger: TransactionLedgerProtocol,
        registry: ProviderRegistry,
        router: ProviderRouter,
        idempotency_guard: IdempotencyGuard,
        *,
        provider_timeout_seconds: float = DEFAULT_PROVIDER_TIMEOUT_SECONDS,
    ) -> None:
        self._ledger = ledger
        self._registry = registry
        self._router = router
        self._guard = idempotency_guard
        self._timeout = provider_timeout_seconds

    async def execute(self, intent: PaymentIntent) -> CreatePaymentResult:
        """Cria a transação ou devolve a existente (replay).

        Raises:
            InvalidMethodError: método diferente de pix/card
            InvalidRequestError: hint de provedor desconhecido ou valor fora do intervalo
            IdempotencyInProgressError: chave reservada por requisição em curso
            InternalError: falha de transporte com o provedor (502)
        """
        started = time.perf_counter()
        if intent.method not in {m.value for m in PaymentMethod}:
            msg = "Método de pagamento não suportado"
            raise InvalidMethodError(msg)
        if not 0 < intent.amount_cents <= MAX_AMOUNT_CENTS:
            msg = "Valor do pagamento fora do intervalo permitido"
            raise InvalidRequestError(msg)

        if intent.idempotency_key:
            existing = await self._guard.replay(intent.idempotency_key)
            if existing is not None:
                return CreatePaymentResult(transaction=existing, replayed=True)

        metadata = redact(dict(intent.metadata))
        pay_tag = str(metadata.get("pay_tag") or "").strip()
        operation_mode = normalize_operation_mode(metadata.get("operation_mode"))
        decision = self._router.select(
            intent.method,
            provider_hint=intent.provider or metadata.get("provider"),
            pay_tag=pay_tag,
            operation_mode=operation_mode,
        )
        adapter = self._registry.get(decision.provider)

        transaction_id = new_transaction_id()
        metadata["transactionId"] = transaction_id
        metadata["provider"] = decision.provider
        if pay_tag:
            metadata["pay_tag"] = pay_tag
        if operation_mode is not None:
            metadata["operation_mode"] = str(operation_mode)

        transaction = Transaction(
            id=transaction_id,
            amount=cents_to_amount(intent.amount_cents),
            amount_cents=intent.amount_cents,
            currency=intent.currency,
            method=PaymentMethod(intent.method),
            status=TransactionStatus.PENDING,
            capture=intent.capture,
            customer=intent.customer,
            customer_id=_customer_id(intent.customer),
            provider=decision.provider,
            method_details=build_card_summary(intent.card) if intent.method == "card" else None,
            metadata=metadata,
            idempotency_key=intent.idempotency_key,
        )

        if intent.idempotency_key:
            reservation = await self._guard.reserve(intent.idempotency_key, transaction_id)
            if reservation.replayed:
                existing = await self._guard.wait_for_transaction(reservation.transaction_id)
                return CreatePaymentResult(transaction=existing, replayed=True)
        try:
            await self._ledger.insert(transaction)
        except Exception:
            if intent.idempotency_key:
                await self._guard.release(intent.idempotency_key, transaction_id)
            raise
        await record_event(
            self._ledger,
            transaction_id,
            "payment_created",
            {"method": intent.method, "amount_cents": intent.amount_cents, "provider": decision.provider},
        )
        logger.info(
            "payment_created",
            extra={
                "transaction_id": transaction_id,
                "method": intent.method,
                "provider": decision.provider,
                "routing_rule": decision.rule,
            },
        )

        request = ChargeRequest(
            transaction_id=transaction_id,
            method=intent.method,
            amount_cents=intent.amount_cents,
            currency=intent.currency,
            capture=intent.capture,
            customer=intent.customer,
            card=intent.card,
            card_hash=intent.card_hash,
            metadata=metadata,
        )
        result = await self._charge(adapter, transaction, request)
        updated = await self._apply_charge_result(transaction, result)
        record_latency("create_payment", "execute", elapsed_ms(started))
        return CreatePaymentResult(transaction=updated, replayed=False)

    async def _charge(
        self,
        adapter: PaymentProviderProtocol,
        transaction: Transaction,
        request: ChargeRequest,
    ) -> ProviderResult:
        started = time.perf_counter()
        try:
            result = await asyncio.wait_for(adapter.charge(request), timeout=self._timeout)
        except TimeoutError as exc:
            record_provider_call(adapter.name, "charge", "timeout", elapsed_ms(started))
            await self._mark_transport_failure(transaction, "provider_timeout")
            msg = "Tempo esgotado aguardando o provedor de pagamento"
            raise InternalError(msg, status_code=502) from exc
        except ProviderTransportError as exc:
            record_provider_call(adapter.name, "charge", "transport_error", elapsed_ms(started))
            await self._mark_transport_failure(transaction, "provider_transport_error")
            msg = "Falha de comunicação com o provedor de pagamento"
            raise InternalError(msg, status_code=502) from exc
        except Exception as exc:
            logger.warning(
                "provider_charge_unexpected_error",
                extra={"transaction_id": transaction.id, "error_type": type(exc).__name__},
            )
            record_provider_call(adapter.name, "charge", "internal_error", elapsed_ms(started))
            await self._mark_transport_failure(transaction, "provider_internal_error")
            msg = "Erro inesperado no provedor de pagamento"
            raise InternalError(msg, status_code=502) from exc

        outcome = "success" if result.success else "declined"
        record_provider_call(adapter.name, "charge", outcome, elapsed_ms(started))
        return result

    async def _mark_transport_failure(self, transaction: Transaction, reason: str) -> None:
        logger.warning(
            "provider_charge_transport_failure",
            extra={"transaction_id": transaction.id, "provider": transaction.provider, "reason": reason},
        )
        await apply_provider_status(
            self._ledger,
            transaction,
            TransactionStatus.FAILED,
            trigger="provider_error",
            metadata_patch={"error": reason},
        )
        await record_event(
            self._ledger,
            transaction.id,
            "provider_error",
            {"provider": transaction.provider, "reason": reason},
        )

    async def _apply_charge_result(self, transaction: Transaction, result: ProviderResult) -> Transaction:
        if result.success:
            raw_key = "pix" if transaction.method == PaymentMethod.PIX else "provider_raw"
            changes: dict[str, Any] = {"provider": result.provider or transaction.provider}
            if result.provider_reference:
                changes["provider_reference"] = result.provider_reference
            outcome = await apply_provider_status(
                self._ledger,
                transaction,
                result.status,
                trigger="provider_charge",
                changes=changes,
                metadata_patch={raw_key: redact(result.raw)},
            )
        else:
            default_error = (
                "Falha ao criar cobrança PIX" if transaction.method == PaymentMethod.PIX
                else "Falha ao processar cartão"
            )
            outcome = await apply_provider_status(
                self._ledger,
                transaction,
                TransactionStatus.FAILED,
                trigger="provider_charge",
                metadata_patch={"error": redact(result.error) or default_error},
            )
            logger.info(
                "payment_declined",
                extra={"transaction_id": transaction.id, "provider": result.provider},
            )

        reported = result.status if result.success else TransactionStatus.FAILED
        await record_event(
            self._ledger,
            transaction.id,
            "provider_charge",
            {
                "provider": result.provider or transaction.provider,
                "success": result.success,
                "status": str(reported),
                "applied": outcome.applied,
            },
        )
        if not outcome.applied:
            await record_event(
                self._ledger,
                transaction.id,
                "provider_status_ignored",
                {"status": str(reported), "current_status": str(outcome.transaction.status)},
            )
        return outcome.transaction
