"""Factories de stores — criação de implementações concretas.

Centraliza a escolha do backend (memory, redis, firestore) de cada
store a partir das settings.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from app.bootstrap.clients import create_async_redis_client, create_firestore_client
from app.infra.stores import (
    FirestoreIdempotencyStore,
    FirestoreTransactionLedger,
    MemoryDedupeStore,
    MemoryIdempotencyStore,
    MemoryTransactionLedger,
    RedisDedupeStore,
    RedisIdempotencyStore,
)

if TYPE_CHECKING:
    from app.protocols.dedupe import AsyncDedupeProtocol
    from app.protocols.idempotency import IdempotencyStoreProtocol
    from app.protocols.transaction_ledger import TransactionLedgerProtocol
    from config.settings import (
        BaseSettings,
        IdempotencySettings,
        LedgerSettings,
        WebhookSettings,
    )

logger = logging.getLogger(__name__)


def _warn_memory_backend(store: str, base: BaseSettings) -> None:
    if not base.is_local:
        logger.warning(
            "memory_store_in_non_dev",
            extra={"store": store, "backend": "memory", "environment": base.environment},
        )


# ──────────────────────────────────────────────────────────────────────────────
# Ledger
# ──────────────────────────────────────────────────────────────────────────────


def create_transaction_ledger(
    settings: LedgerSettings,
    base: BaseSettings,
) -> TransactionLedgerProtocol:
    """Cria o ledger conforme LEDGER_BACKEND (memory|firestore)."""
    if settings.backend == "firestore":
        ledger = FirestoreTransactionLedger(
            create_firestore_client(),
            collection_name=settings.collection_transactions,
            events_subcollection=settings.events_subcollection,
        )
        logger.info("transaction_ledger_created", extra={"backend": "firestore"})
        return ledger

    if settings.backend == "memory":
        _warn_memory_backend("transaction_ledger", base)
        logger.info("transaction_ledger_created", extra={"backend": "memory"})
        return MemoryTransactionLedger()

    msg = f"LEDGER_BACKEND inválido: {settings.backend}"
    raise ValueError(msg)


# ──────────────────────────────────────────────────────────────────────────────
# Idempotency Store
# ──────────────────────────────────────────────────────────────────────────────


def create_idempotency_store(
    settings: IdempotencySettings,
    base: BaseSettings,
) -> IdempotencyStoreProtocol:
    """Cria store de idempotência conforme IDEMPOTENCY_BACKEND."""
    if settings.backend == "redis":
        store = RedisIdempotencyStore(
            create_async_redis_client(),
            ttl_seconds=settings.ttl_seconds or None,
        )
        logger.info("idempotency_store_created", extra={"backend": "redis"})
        return store

    if settings.backend == "firestore":
        store = FirestoreIdempotencyStore(
            create_firestore_client(),
            collection_name=settings.collection,
        )
        logger.info("idempotency_store_created", extra={"backend": "firestore"})
        return store

    if settings.backend == "memory":
        _warn_memory_backend("idempotency_store", base)
        logger.info("idempotency_store_created", extra={"backend": "memory"})
        return MemoryIdempotencyStore()

    msg = f"IDEMPOTENCY_BACKEND inválido: {settings.backend}"
    raise ValueError(msg)


# ──────────────────────────────────────────────────────────────────────────────
# Webhook Dedupe Store
# ──────────────────────────────────────────────────────────────────────────────


def create_webhook_dedupe_store(
    settings: WebhookSettings,
    base: BaseSettings,
) -> AsyncDedupeProtocol | None:
    """Store de dedupe de entregas; None quando WEBHOOK_DEDUPE_DELIVERIES=false."""
    if not settings.dedupe_deliveries:
        return None

    if settings.dedupe_backend == "redis":
        logger.info("webhook_dedupe_store_created", extra={"backend": "redis"})
        return RedisDedupeStore(create_async_redis_client())

    _warn_memory_backend("webhook_dedupe_store", base)
    logger.info("webhook_dedupe_store_created", extra={"backend": "memory"})
    return MemoryDedupeStore()
