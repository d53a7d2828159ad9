"""Persistência de transições: compare-and-set + eventos.

Toda mudança de status passa por aqui. A máquina de estados decide se a
transição é aceita; o ledger aplica com expected_status igual ao status
lido. Atualizações de provedor re-leem e reavaliam em caso de conflito.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from app.domain.transaction import TransactionEvent
from fsm import LifecycleOperation, create_machine, get_operation_rule
from utils.errors import InvalidStatusError, NotFoundError, StatusConflictError
from utils.redaction import redact

if TYPE_CHECKING:
    from app.domain.transaction import Transaction
    from app.protocols.transaction_ledger import TransactionLedgerProtocol
    from fsm import TransactionStatus

logger = logging.getLogger(__name__)

MAX_CAS_ATTEMPTS = 3


@dataclass(frozen=True, slots=True)
class ProviderUpdateOutcome:
    """Resultado de uma atualização de provedor.

    applied=False: status fora da tabela; só os demais campos foram gravados.
    """

    transaction: Transaction
    applied: bool
    changed: bool
    previous_status: TransactionStatus


async def load_transaction(ledger: TransactionLedgerProtocol, transaction_id: str) -> Transaction:
    transaction = await ledger.get(transaction_id)
    if transaction is None:
        msg = "Transação não encontrada"
        raise NotFoundError(msg)
    return transaction


async def record_event(
    ledger: TransactionLedgerProtocol,
    transaction_id: str,
    event_type: str,
    payload: Any = None,
) -> TransactionEvent:
    event = TransactionEvent(transaction_id=transaction_id, type=event_type, payload=redact(payload))
    await ledger.append_event(event)
    return event


def _merged_metadata(transaction: Transaction, patch: dict[str, Any] | None) -> dict[str, Any] | None:
    if not patch:
        return None
    return {**transaction.metadata, **redact(patch)}


async def apply_provider_status(
    ledger: TransactionLedgerProtocol,
    transaction: Transaction,
    target: TransactionStatus,
    *,
    trigger: str,
    changes: dict[str, Any] | None = None,
    metadata_patch: dict[str, Any] | None = None,
) -> ProviderUpdateOutcome:
    """Aplica status reportado por provedor (charge, confirm, webhook).

    Status fora da tabela de provedor não é aplicado, mas `changes` e
    `metadata_patch` são gravados mesmo assim.

    Raises:
        NotFoundError: transação removida durante a atualização
        StatusConflictError: conflitos sucessivos além de MAX_CAS_ATTEMPTS
    """
    current = transaction
    for attempt in range(1, MAX_CAS_ATTEMPTS + 1):
        machine = create_machine(current.id, current.status, current.method)
        result = machine.apply_provider_status(target, trigger)

        fields: dict[str, Any] = dict(changes or {})
        metadata = _merged_metadata(current, metadata_patch)
        if metadata is not None:
            fields["metadata"] = metadata
        if result.success:
            fields["status"] = target

        try:
            updated = await ledger.update(current.id, fields, expected_status=current.status)
        except StatusConflictError:
            logger.info(
                "provider_update_conflict",
                extra={"transaction_id": current.id, "attempt": attempt, "trigger": trigger},
            )
            current = await load_transaction(ledger, current.id)
            continue

        if not result.success:
            logger.info(
                "provider_status_ignored",
                extra={
                    "transaction_id": current.id,
                    "current_status": str(current.status),
                    "reported_status": str(target),
                    "trigger": trigger,
                },
            )
        return ProviderUpdateOutcome(
            transaction=updated,
            applied=result.success,
            changed=result.changed,
            previous_status=current.status,
        )

    msg = "Status da transação mudou repetidamente durante a atualização"
    raise StatusConflictError(msg, current_status=str(current.status))


async def apply_operation(
    ledger: TransactionLedgerProtocol,
    transaction: Transaction,
    operation: LifecycleOperation,
    *,
    metadata_patch: dict[str, Any] | None = None,
    event_payload: Any = None,
) -> Transaction:
    """Aplica operação de ciclo de vida com compare-and-set.

    Confirm de PIX já pago retorna a transação sem gravar nem emitir evento.

    Raises:
        InvalidStatusError: operação ilegal no status atual ou conflito
    """
    machine = create_machine(transaction.id, transaction.status, transaction.method)
    result = machine.apply_operation(operation)
    if not result.success:
        raise InvalidStatusError(result.error_reason or "Status inválido para a operação")
    if not result.changed:
        return transaction

    fields: dict[str, Any] = {"status": result.transition.to_state}
    metadata = _merged_metadata(transaction, metadata_patch)
    if metadata is not None:
        fields["metadata"] = metadata

    updated = await ledger.update(transaction.id, fields, expected_status=transaction.status)
    rule = get_operation_rule(operation)
    await record_event(ledger, transaction.id, rule.event_type, event_payload)
    logger.info(
        "payment_operation_applied",
        extra={
            "transaction_id": transaction.id,
            "operation": str(operation),
            "from_status": str(transaction.status),
            "to_status": str(updated.status),
        },
    )
    return updated
