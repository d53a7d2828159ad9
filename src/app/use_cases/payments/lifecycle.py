"""Operações de ciclo de vida disparadas pelo cliente.

confirm (PIX), capture (cartão), cancel, refund e patch de metadata.
Violações de método/status são rejeitadas antes de qualquer efeito
colateral; a gravação usa compare-and-set sobre o status lido.
"""

from __future__ import annotations

import asyncio
import logging
import time
from typing import TYPE_CHECKING, Any

from app.domain.transaction import PaymentMethod
from app.observability import elapsed_ms, record_provider_call
from fsm import LifecycleOperation, TransactionStatus, create_machine
from utils.errors import (
    InsufficientAmountError,
    InternalError,
    InvalidMethodError,
    InvalidRequestError,
    InvalidStatusError,
    ProviderTransportError,
    StatusConflictError,
)
from utils.redaction import redact

from ._persistence import (
    MAX_CAS_ATTEMPTS,
    apply_operation,
    apply_provider_status,
    load_transaction,
    record_event,
)
from .create_payment import DEFAULT_PROVIDER_TIMEOUT_SECONDS

if TYPE_CHECKING:
    from app.domain.transaction import Transaction
    from app.protocols.models import ProviderResult
    from app.protocols.transaction_ledger import TransactionLedgerProtocol
    from app.services.provider_registry import ProviderRegistry

logger = logging.getLogger(__name__)

DEFAULT_STATIC_PIX_PROVIDER = "static_pix"


class PaymentLifecycleUseCase:
    """Confirm, capture, cancel, refund e metadata."""

    def __init__(
        self,
        ledger: TransactionLedgerProtocol,
        registry: ProviderRegistry,
        *,
        provider_timeout_seconds: float = DEFAULT_PROVIDER_TIMEOUT_SECONDS,
    ) -> None:
        self._ledger = ledger
        self._registry = registry
        self._timeout = provider_timeout_seconds

    async def confirm(self, transaction_id: str) -> Transaction:
        """Confirma um PIX junto ao provedor.

        PIX já pago retorna inalterado. Recusa do provedor marca a
        transação como failed e a retorna normalmente.

        Raises:
            NotFoundError: transação inexistente
            InvalidMethodError: transação não é PIX
            InvalidStatusError: status não permite confirmação ou sem referência
            InternalError: falha de transporte com o provedor (502)
        """
        transaction = await load_transaction(self._ledger, transaction_id)
        if transaction.method != PaymentMethod.PIX:
            msg = "Método inválido para confirmação PIX"
            raise InvalidMethodError(msg)
        if transaction.status == TransactionStatus.PAID:
            return transaction

        self._ensure_operation_allowed(transaction, LifecycleOperation.CONFIRM)
        if not transaction.provider_reference:
            msg = "Transação sem referência do provedor"
            raise InvalidStatusError(msg)

        result = await self.call_confirm(transaction)
        return await self.apply_confirm_result(transaction, result)

    async def call_confirm(self, transaction: Transaction) -> ProviderResult:
        """Chama confirm() do provedor da transação com timeout.

        Raises:
            InternalError: timeout ou falha de transporte (502)
        """
        adapter = self._registry.get(transaction.provider or DEFAULT_STATIC_PIX_PROVIDER)
        started = time.perf_counter()
        try:
            result = await asyncio.wait_for(
                adapter.confirm(transaction.provider_reference or ""),
                timeout=self._timeout,
            )
        except (TimeoutError, ProviderTransportError) as exc:
            record_provider_call(adapter.name, "confirm", "transport_error", elapsed_ms(started))
            logger.warning(
                "provider_confirm_transport_failure",
                extra={"transaction_id": transaction.id, "provider": adapter.name},
            )
            msg = "Falha de comunicação com o provedor de pagamento"
            raise InternalError(msg, status_code=502) from exc

        record_provider_call(
            adapter.name,
            "confirm",
            "success" if result.success else "declined",
            elapsed_ms(started),
        )
        return result

    async def apply_confirm_result(self, transaction: Transaction, result: ProviderResult) -> Transaction:
        """Aplica o resultado de confirm() (também usado pelo webhook PIX)."""
        raw = redact(result.raw)
        if result.success and result.status == TransactionStatus.PAID:
            if transaction.status == TransactionStatus.PAID:
                return transaction
            return await apply_operation(
                self._ledger,
                transaction,
                LifecycleOperation.CONFIRM,
                metadata_patch={"pix_confirmation": raw},
                event_payload=raw,
            )

        if result.success:
            outcome = await apply_provider_status(
                self._ledger,
                transaction,
                result.status,
                trigger="pix_confirm",
                metadata_patch={"pix_confirmation": raw},
            )
            await record_event(
                self._ledger,
                transaction.id,
                "provider_charge" if outcome.applied else "provider_status_ignored",
                {"provider": result.provider, "status": str(result.status), "operation": "confirm"},
            )
            return outcome.transaction

        error = redact(result.error) or "Falha ao confirmar PIX"
        outcome = await apply_provider_status(
            self._ledger,
            transaction,
            TransactionStatus.FAILED,
            trigger="pix_confirm",
            metadata_patch={"error": error},
        )
        await record_event(self._ledger, transaction.id, "pix_failed", {"error": error})
        return outcome.transaction

    async def capture(self, transaction_id: str) -> Transaction:
        """Captura cartão pré-autorizado (authorized → paid)."""
        transaction = await load_transaction(self._ledger, transaction_id)
        if transaction.method != PaymentMethod.CARD:
            msg = "Método inválido para captura"
            raise InvalidMethodError(msg)
        return await apply_operation(self._ledger, transaction, LifecycleOperation.CAPTURE)

    async def cancel(self, transaction_id: str) -> Transaction:
        transaction = await load_transaction(self._ledger, transaction_id)
        return await apply_operation(self._ledger, transaction, LifecycleOperation.CANCEL)

    async def refund(self, transaction_id: str, amount_cents: int | None = None) -> Transaction:
        """Reembolsa total ou parcialmente (paid → refunded).

        Raises:
            InvalidStatusError: transação não está paga
            InvalidRequestError: valor não positivo
            InsufficientAmountError: valor maior que amount_cents
        """
        transaction = await load_transaction(self._ledger, transaction_id)
        self._ensure_operation_allowed(transaction, LifecycleOperation.REFUND)

        if amount_cents is not None:
            if amount_cents <= 0:
                msg = "Valor de reembolso deve ser positivo"
                raise InvalidRequestError(msg)
            if amount_cents > transaction.amount_cents:
                msg = "Valor de reembolso maior que o valor da transação"
                raise InsufficientAmountError(msg)

        refund = {"amount_cents": amount_cents if amount_cents is not None else transaction.amount_cents}
        return await apply_operation(
            self._ledger,
            transaction,
            LifecycleOperation.REFUND,
            metadata_patch={"refund": refund},
            event_payload=refund,
        )

    async def update_metadata(self, transaction_id: str, patch: dict[str, Any]) -> Transaction:
        """Merge raso e redigido em metadata; evento metadata_updated."""
        safe_patch = redact(patch)
        for _ in range(MAX_CAS_ATTEMPTS):
            transaction = await load_transaction(self._ledger, transaction_id)
            try:
                updated = await self._ledger.update(
                    transaction_id,
                    {"metadata": {**transaction.metadata, **safe_patch}},
                    expected_status=transaction.status,
                )
            except StatusConflictError:
                continue
            await record_event(self._ledger, transaction_id, "metadata_updated", safe_patch)
            return updated

        msg = "Status da transação mudou repetidamente durante a atualização"
        raise StatusConflictError(msg)

    @staticmethod
    def _ensure_operation_allowed(transaction: Transaction, operation: LifecycleOperation) -> None:
        machine = create_machine(transaction.id, transaction.status, transaction.method)
        if not machine.can_apply_operation(operation):
            msg = f"Status inválido para {operation}: {transaction.status}"
            raise InvalidStatusError(msg)
