"""Reconciliação de webhooks de provedores no ledger.

Localiza a transação (id interno no payload, senão referência do
provedor), mapeia o status pelo vocabulário do provedor e aplica pelo
caminho de provedor. Toda entrega grava o payload redigido em
metadata.provider_webhook e gera o evento provider_webhook.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import StrEnum
from typing import TYPE_CHECKING

from app.domain.status_vocabulary import map_provider_status
from app.observability import record_webhook_outcome
from fsm import TransactionStatus
from utils.redaction import redact

from ._persistence import apply_provider_status, record_event

if TYPE_CHECKING:
    from app.domain.transaction import Transaction
    from app.protocols.dedupe import AsyncDedupeProtocol
    from app.protocols.models import WebhookUpdate
    from app.protocols.transaction_ledger import TransactionLedgerProtocol

    from .lifecycle import PaymentLifecycleUseCase

logger = logging.getLogger(__name__)

DEFAULT_DEDUPE_TTL_SECONDS = 86400
PIX_CONFIRMED_EVENT = "PIX_CONFIRMED"

_PIX_EVENT_TYPES = {
    TransactionStatus.PAID: "pix_confirmed",
    TransactionStatus.FAILED: "pix_failed",
    TransactionStatus.EXPIRED: "pix_expired",
}


class WebhookOutcome(StrEnum):
    APPLIED = "applied"
    IGNORED = "ignored"
    NOT_FOUND = "not_found"
    DUPLICATE = "duplicate"


@dataclass(frozen=True, slots=True)
class ReconcileResult:
    outcome: WebhookOutcome
    transaction: Transaction | None = None


class ReconcileWebhookUseCase:
    """Aplica atualizações de webhook.

    Args:
        ledger: Ledger de transações
        lifecycle: Usado para confirmar PIX e consultar status no provedor
        dedupe: Store de dedupe de entregas (None desativa)
        dedupe_ttl_seconds: TTL das chaves de entrega
    """

    def __init__(
        self,
        ledger: TransactionLedgerProtocol,
        lifecycle: PaymentLifecycleUseCase,
        *,
        dedupe: AsyncDedupeProtocol | None = None,
        dedupe_ttl_seconds: int = DEFAULT_DEDUPE_TTL_SECONDS,
    ) -> None:
        self._ledger = ledger
        self._lifecycle = lifecycle
        self._dedupe = dedupe
        self._dedupe_ttl = dedupe_ttl_seconds

    async def execute(self, update: WebhookUpdate, *, delivery_id: str | None = None) -> ReconcileResult:
        """Reconcilia uma entrega de webhook.

        A entrega só fica marcada como vista se o processamento terminar;
        em caso de erro a marca é removida e a reentrega é processada.

        Raises:
            InternalError: falha de transporte ao consultar o provedor (502)
        """
        dedupe = self._dedupe if delivery_id else None
        dedupe_key = f"{update.provider}:{delivery_id}"
        if dedupe is not None and await dedupe.seen(dedupe_key, ttl=self._dedupe_ttl):
            logger.info("webhook_duplicate_delivery", extra={"provider": update.provider})
            record_webhook_outcome(update.provider, WebhookOutcome.DUPLICATE)
            return ReconcileResult(outcome=WebhookOutcome.DUPLICATE)

        try:
            return await self._reconcile(update)
        except Exception:
            if dedupe is not None:
                await dedupe.forget(dedupe_key)
                logger.info("webhook_delivery_released", extra={"provider": update.provider})
            raise

    async def _reconcile(self, update: WebhookUpdate) -> ReconcileResult:
        transaction = await self._locate(update)
        if transaction is None:
            logger.warning(
                "webhook_transaction_not_found",
                extra={
                    "provider": update.provider,
                    "transaction_id": update.transaction_id,
                    "provider_reference": update.provider_reference,
                },
            )
            record_webhook_outcome(update.provider, WebhookOutcome.NOT_FOUND)
            return ReconcileResult(outcome=WebhookOutcome.NOT_FOUND)

        if update.provider == "pix":
            return await self._apply_pix_event(transaction, update)

        target = await self._resolve_target(transaction, update)
        changes = {}
        if update.provider_reference:
            changes["provider_reference"] = update.provider_reference
        outcome = await apply_provider_status(
            self._ledger,
            transaction,
            target,
            trigger="provider_webhook",
            changes=changes,
            metadata_patch={"provider_webhook": redact(update.payload)},
        )
        return await self._finish(update, outcome.transaction, target, applied=outcome.applied)

    async def _locate(self, update: WebhookUpdate) -> Transaction | None:
        if update.transaction_id:
            transaction = await self._ledger.get(update.transaction_id)
            if transaction is not None:
                return transaction
        if update.provider_reference:
            return await self._ledger.find_by_provider_reference(update.provider_reference)
        return None

    async def _resolve_target(self, transaction: Transaction, update: WebhookUpdate) -> TransactionStatus:
        if update.requires_lookup and update.provider_reference:
            lookup = transaction.model_copy(update={"provider_reference": update.provider_reference})
            result = await self._lifecycle.call_confirm(lookup)
            return result.status if result.success else transaction.status
        return map_provider_status(update.provider, update.raw_status, transaction.status)

    async def _apply_pix_event(self, transaction: Transaction, update: WebhookUpdate) -> ReconcileResult:
        metadata_patch: dict[str, object] = {"provider_webhook": redact(update.payload)}
        if update.raw_status == PIX_CONFIRMED_EVENT and transaction.status == TransactionStatus.PAID:
            target = TransactionStatus.PAID
        elif update.raw_status == PIX_CONFIRMED_EVENT:
            result = await self._lifecycle.call_confirm(transaction)
            if result.success:
                target = result.status
                metadata_patch["pix_confirmation"] = redact(result.raw)
            else:
                target = TransactionStatus.FAILED
                metadata_patch["error"] = redact(result.error) or "Falha ao confirmar PIX"
        else:
            target = map_provider_status("pix", update.raw_status, transaction.status)

        outcome = await apply_provider_status(
            self._ledger,
            transaction,
            target,
            trigger="pix_webhook",
            metadata_patch=metadata_patch,
        )
        event_type = _PIX_EVENT_TYPES.get(target)
        if outcome.changed and event_type:
            await record_event(self._ledger, transaction.id, event_type, metadata_patch.get("pix_confirmation"))
        return await self._finish(update, outcome.transaction, target, applied=outcome.applied)

    async def _finish(
        self,
        update: WebhookUpdate,
        transaction: Transaction,
        target: TransactionStatus,
        *,
        applied: bool,
    ) -> ReconcileResult:
        await record_event(
            self._ledger,
            transaction.id,
            "provider_webhook",
            {"provider": update.provider, "status": str(target), "raw_status": update.raw_status},
        )
        if not applied:
            await record_event(
                self._ledger,
                transaction.id,
                "provider_status_ignored",
                {"provider": update.provider, "status": str(target), "current_status": str(transaction.status)},
            )
        outcome = WebhookOutcome.APPLIED if applied else WebhookOutcome.IGNORED
        logger.info(
            "webhook_reconciled",
            extra={
                "provider": update.provider,
                "transaction_id": transaction.id,
                "status": str(transaction.status),
                "outcome": str(outcome),
            },
        )
        record_webhook_outcome(update.provider, outcome)
        return ReconcileResult(outcome=outcome, transaction=transaction)
