"""Consultas de leitura sobre o ledger."""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from fsm import TransactionStatus
from utils.errors import NotFoundError

from ._persistence import load_transaction

if TYPE_CHECKING:
    from app.domain.transaction import Transaction, TransactionEvent
    from app.protocols.models import TransactionFilter
    from app.protocols.transaction_ledger import TransactionLedgerProtocol

DEFAULT_PAGE_LIMIT = 50
MAX_PAGE_LIMIT = 200


@dataclass(frozen=True, slots=True)
class TransactionPage:
    total: int
    limit: int
    offset: int
    transactions: list[Transaction] = field(default_factory=list)

    @property
    def count(self) -> int:
        return len(self.transactions)

    def to_dict(self) -> dict[str, Any]:
        return {
            "total": self.total,
            "count": self.count,
            "limit": self.limit,
            "offset": self.offset,
            "transactions": [tx.to_dict() for tx in self.transactions],
        }


class PaymentQueriesUseCase:
    """Leitura de transações, estatísticas e eventos."""

    def __init__(self, ledger: TransactionLedgerProtocol) -> None:
        self._ledger = ledger

    async def get(self, transaction_id: str) -> Transaction:
        return await load_transaction(self._ledger, transaction_id)

    async def get_by_provider_reference(self, provider_reference: str) -> Transaction:
        transaction = await self._ledger.find_by_provider_reference(provider_reference)
        if transaction is None:
            msg = "Transação não encontrada para a referência informada"
            raise NotFoundError(msg)
        return transaction

    async def list_transactions(
        self,
        filters: TransactionFilter | None = None,
        *,
        limit: int = DEFAULT_PAGE_LIMIT,
        offset: int = 0,
    ) -> TransactionPage:
        """Lista paginada, mais recentes primeiro; total ignora a paginação."""
        limit = max(1, min(limit, MAX_PAGE_LIMIT))
        offset = max(0, offset)
        matching = await self._ledger.query(filters)
        return TransactionPage(
            total=len(matching),
            limit=limit,
            offset=offset,
            transactions=matching[offset : offset + limit],
        )

    async def stats(self) -> dict[str, Any]:
        transactions = await self._ledger.query()
        by_status = Counter(str(tx.status) for tx in transactions)
        by_method = Counter(str(tx.method) for tx in transactions)
        return {
            "total": len(transactions),
            "total_amount_cents": sum(tx.amount_cents for tx in transactions),
            "total_paid_cents": sum(
                tx.amount_cents for tx in transactions if tx.status == TransactionStatus.PAID
            ),
            "by_status": dict(by_status),
            "by_method": dict(by_method),
        }

    async def events(self, transaction_id: str) -> list[TransactionEvent]:
        await load_transaction(self._ledger, transaction_id)
        return await self._ledger.list_events(transaction_id)
