"""Stores — implementações concretas de persistência.

Módulos disponíveis:
    - memory_stores: Ledger, idempotência e dedupe em memória (dev/test)
    - redis_idempotency_store: Idempotência com SET NX (Upstash)
    - redis_dedupe_store: Dedupe de reentregas de webhook (Upstash)
    - firestore_transaction_ledger: Ledger de transações e eventos
    - firestore_idempotency_store: Idempotência com document.create()
"""

from __future__ import annotations

from app.infra.stores.firestore_idempotency_store import FirestoreIdempotencyStore
from app.infra.stores.firestore_transaction_ledger import FirestoreTransactionLedger
from app.infra.stores.memory_stores import (
    MemoryDedupeStore,
    MemoryIdempotencyStore,
    MemoryTransactionLedger,
)
from app.infra.stores.redis_dedupe_store import RedisDedupeStore
from app.infra.stores.redis_idempotency_store import RedisIdempotencyStore

__all__ = [
    # Firestore
    "FirestoreIdempotencyStore",
    "FirestoreTransactionLedger",
    # Memory (dev/test)
    "MemoryDedupeStore",
    "MemoryIdempotencyStore",
    "MemoryTransactionLedger",
    # Redis (Upstash)
    "RedisDedupeStore",
    "RedisIdempotencyStore",
]
