"""Stores em memória — apenas para desenvolvimento e testes.

ATENÇÃO: Não usar em staging/production. Sem persistência entre reinícios
e sem coordenação entre processos.
"""

from __future__ import annotations

import asyncio
import time
from typing import TYPE_CHECKING, Any

from app.domain.transaction import utcnow
from app.infra.stores._filters import matches_filter, paginate
from app.protocols.dedupe import AsyncDedupeProtocol
from app.protocols.idempotency import IdempotencyStoreProtocol
from app.protocols.transaction_ledger import TransactionLedgerProtocol
from utils.errors import InternalError, NotFoundError, StatusConflictError

if TYPE_CHECKING:
    from app.domain.transaction import Transaction, TransactionEvent
    from app.protocols.models import TransactionFilter
    from fsm.states import TransactionStatus


class MemoryTransactionLedger(TransactionLedgerProtocol):
    """Ledger em memória — apenas para dev/test.

    Guarda cópias profundas: quem lê nunca altera o registro por referência.
    """

    def __init__(self) -> None:
        self._transactions: dict[str, Transaction] = {}
        self._events: dict[str, list[TransactionEvent]] = {}
        self._lock = asyncio.Lock()

    async def insert(self, transaction: Transaction) -> None:
        async with self._lock:
            if transaction.id in self._transactions:
                msg = "Transação já existe"
                raise InternalError(msg)
            self._transactions[transaction.id] = transaction.model_copy(deep=True)

    async def get(self, transaction_id: str) -> Transaction | None:
        tx = self._transactions.get(transaction_id)
        return tx.model_copy(deep=True) if tx is not None else None

    async def find_by_provider_reference(self, provider_reference: str) -> Transaction | None:
        for tx in self._transactions.values():
            if tx.provider_reference == provider_reference:
                return tx.model_copy(deep=True)
        return None

    async def update(
        self,
        transaction_id: str,
        changes: dict[str, Any],
        *,
        expected_status: TransactionStatus | None = None,
    ) -> Transaction:
        async with self._lock:
            current = self._transactions.get(transaction_id)
            if current is None:
                msg = "Transação não encontrada"
                raise NotFoundError(msg)
            if expected_status is not None and current.status != expected_status:
                msg = "Status da transação mudou durante a atualização"
                raise StatusConflictError(msg, current_status=str(current.status))
            updated = type(current).model_validate(
                {**current.model_dump(), **changes, "updated_at": utcnow()}
            )
            self._transactions[transaction_id] = updated
            return updated.model_copy(deep=True)

    async def query(
        self,
        filters: TransactionFilter | None = None,
        limit: int | None = None,
        offset: int = 0,
    ) -> list[Transaction]:
        items = [tx for tx in self._transactions.values() if matches_filter(tx, filters)]
        items.sort(key=lambda tx: tx.created_at, reverse=True)
        return [tx.model_copy(deep=True) for tx in paginate(items, limit, offset)]

    async def append_event(self, event: TransactionEvent) -> None:
        async with self._lock:
            self._events.setdefault(event.transaction_id, []).append(event.model_copy(deep=True))

    async def list_events(self, transaction_id: str) -> list[TransactionEvent]:
        events = self._events.get(transaction_id, [])
        return [e.model_copy(deep=True) for e in reversed(events)]


class MemoryIdempotencyStore(IdempotencyStoreProtocol):
    """Store de idempotência em memória (dict + lock) — apenas para dev/test."""

    def __init__(self) -> None:
        self._keys: dict[str, str] = {}
        self._lock = asyncio.Lock()

    async def claim(self, key: str, transaction_id: str) -> str:
        async with self._lock:
            return self._keys.setdefault(key, transaction_id)

    async def get(self, key: str) -> str | None:
        return self._keys.get(key)

    async def release(self, key: str, transaction_id: str) -> bool:
        async with self._lock:
            if self._keys.get(key) != transaction_id:
                return False
            del self._keys[key]
            return True


class MemoryDedupeStore(AsyncDedupeProtocol):
    """Store de dedupe em memória — apenas para dev/test."""

    def __init__(self) -> None:
        self._store: dict[str, float] = {}  # key -> expires_at

    def _cleanup_expired(self) -> None:
        """Remove entradas expiradas."""
        now = time.time()
        expired = [k for k, v in self._store.items() if v < now]
        for k in expired:
            del self._store[k]

    async def seen(self, key: str, ttl: int = 86400) -> bool:
        self._cleanup_expired()
        now = time.time()
        if key in self._store and self._store[key] > now:
            return True  # Duplicado
        self._store[key] = now + ttl
        return False  # Novo

    async def forget(self, key: str) -> None:
        self._store.pop(key, None)
