"""Protocolo do ledger de transações (registro durável + eventos)."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from app.domain.transaction import Transaction, TransactionEvent
    from fsm.states import TransactionStatus

    from .models import TransactionFilter


class TransactionLedgerProtocol(ABC):
    """Contrato mínimo assíncrono do ledger.

    Garantias exigidas das implementações:
    - insert falha se o id já existir
    - update com expected_status é compare-and-set (StatusConflictError)
    - eventos são append-only
    """

    @abstractmethod
    async def insert(self, transaction: Transaction) -> None: ...

    @abstractmethod
    async def get(self, transaction_id: str) -> Transaction | None: ...

    @abstractmethod
    async def find_by_provider_reference(self, provider_reference: str) -> Transaction | None: ...

    @abstractmethod
    async def update(
        self,
        transaction_id: str,
        changes: dict[str, Any],
        *,
        expected_status: TransactionStatus | None = None,
    ) -> Transaction:
        """Aplica `changes` e atualiza updated_at.

        Raises:
            NotFoundError: transação inexistente
            StatusConflictError: status atual diferente de expected_status
        """

    @abstractmethod
    async def query(
        self,
        filters: TransactionFilter | None = None,
        limit: int | None = None,
        offset: int = 0,
    ) -> list[Transaction]:
        """Lista transações mais recentes primeiro (limit=None → todas)."""

    @abstractmethod
    async def append_event(self, event: TransactionEvent) -> None: ...

    @abstractmethod
    async def list_events(self, transaction_id: str) -> list[TransactionEvent]:
        """Eventos da transação, mais recentes primeiro."""
