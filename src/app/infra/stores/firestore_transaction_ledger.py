"""Firestore Transaction Ledger — registro durável de transações.

Layout:
    transactions/{transaction_id}                   documento da transação
    transactions/{transaction_id}/events/{event_id} eventos append-only

Firestore Python SDK é síncrono; operações rodam via asyncio.to_thread
para não bloquear o event loop. Compare-and-set de status usa transação
do Firestore (leitura + escrita atômicas).
"""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING, Any

from google.api_core import exceptions as gcp_exceptions
from google.cloud import firestore
from google.cloud.firestore_v1.base_query import FieldFilter

from app.domain.transaction import Transaction, TransactionEvent, utcnow
from app.protocols.transaction_ledger import TransactionLedgerProtocol
from utils.errors import (
    FirestoreUnavailableError,
    InternalError,
    NotFoundError,
    StatusConflictError,
)

if TYPE_CHECKING:
    from google.cloud.firestore import Client as FirestoreClient

    from app.protocols.models import TransactionFilter
    from fsm.states import TransactionStatus

logger = logging.getLogger(__name__)

TRANSACTIONS_COLLECTION = "transactions"
EVENTS_SUBCOLLECTION = "events"
_DATETIME_FIELDS = ("created_at", "updated_at")


def _to_document(model: Transaction | TransactionEvent) -> dict[str, Any]:
    """Dict JSON-safe, com datas nativas (Timestamp) para ordenação/filtro."""
    data = model.model_dump(mode="json")
    for field_name in _DATETIME_FIELDS:
        if hasattr(model, field_name):
            data[field_name] = getattr(model, field_name)
    return data


class FirestoreTransactionLedger(TransactionLedgerProtocol):
    """Ledger de transações usando Firestore.

    Args:
        firestore_client: Cliente Firestore
        collection_name: Collection raiz (default: transactions)
    """

    def __init__(
        self,
        firestore_client: FirestoreClient,
        collection_name: str = TRANSACTIONS_COLLECTION,
        events_subcollection: str = EVENTS_SUBCOLLECTION,
    ) -> None:
        self._db = firestore_client
        self._collection = collection_name
        self._events_subcollection = events_subcollection

    def _doc(self, transaction_id: str) -> Any:
        return self._db.collection(self._collection).document(transaction_id)

    # ──────────────────────────────────────────────────────────────
    # Sync backend
    # ──────────────────────────────────────────────────────────────

    def _insert_sync(self, transaction: Transaction) -> None:
        try:
            self._doc(transaction.id).create(_to_document(transaction))
        except gcp_exceptions.AlreadyExists as exc:
            msg = "Transação já existe"
            raise InternalError(msg) from exc
        except gcp_exceptions.GoogleAPICallError as exc:
            logger.error("ledger_insert_error", extra={"error": str(exc), "transaction_id": transaction.id})
            raise FirestoreUnavailableError("Falha ao gravar transação no Firestore") from exc

    def _get_sync(self, transaction_id: str) -> Transaction | None:
        try:
            snapshot = self._doc(transaction_id).get()
        except gcp_exceptions.GoogleAPICallError as exc:
            raise FirestoreUnavailableError("Falha ao ler transação no Firestore") from exc
        if not snapshot.exists:
            return None
        return Transaction.from_dict(snapshot.to_dict())

    def _find_by_reference_sync(self, provider_reference: str) -> Transaction | None:
        try:
            docs = (
                self._db.collection(self._collection)
                .where(filter=FieldFilter("provider_reference", "==", provider_reference))
                .limit(1)
                .stream()
            )
            for doc in docs:
                return Transaction.from_dict(doc.to_dict())
        except gcp_exceptions.GoogleAPICallError as exc:
            raise FirestoreUnavailableError("Falha ao buscar referência no Firestore") from exc
        return None

    def _update_sync(
        self,
        transaction_id: str,
        changes: dict[str, Any],
        expected_status: TransactionStatus | None,
    ) -> Transaction:
        doc_ref = self._doc(transaction_id)

        @firestore.transactional
        def _apply(fs_transaction: Any) -> Transaction:
            snapshot = doc_ref.get(transaction=fs_transaction)
            if not snapshot.exists:
                msg = "Transação não encontrada"
                raise NotFoundError(msg)
            current = Transaction.from_dict(snapshot.to_dict())
            if expected_status is not None and current.status != expected_status:
                msg = "Status da transação mudou durante a atualização"
                raise StatusConflictError(msg, current_status=str(current.status))
            updated = Transaction.model_validate(
                {**current.model_dump(), **changes, "updated_at": utcnow()}
            )
            fs_transaction.set(doc_ref, _to_document(updated))
            return updated

        try:
            return _apply(self._db.transaction())
        except gcp_exceptions.GoogleAPICallError as exc:
            logger.error("ledger_update_error", extra={"error": str(exc), "transaction_id": transaction_id})
            raise FirestoreUnavailableError("Falha ao atualizar transação no Firestore") from exc

    def _query_sync(
        self,
        filters: TransactionFilter | None,
        limit: int | None,
        offset: int,
    ) -> list[Transaction]:
        query: Any = self._db.collection(self._collection)
        if filters is not None:
            for field_name in ("status", "method", "provider", "customer_id"):
                value = getattr(filters, field_name)
                if value:
                    query = query.where(filter=FieldFilter(field_name, "==", value))
            if filters.created_from:
                query = query.where(filter=FieldFilter("created_at", ">=", filters.created_from))
            if filters.created_to:
                query = query.where(filter=FieldFilter("created_at", "<=", filters.created_to))
        query = query.order_by("created_at", direction=firestore.Query.DESCENDING)
        if offset:
            query = query.offset(offset)
        if limit is not None:
            query = query.limit(limit)
        try:
            return [Transaction.from_dict(doc.to_dict()) for doc in query.stream()]
        except gcp_exceptions.GoogleAPICallError as exc:
            raise FirestoreUnavailableError("Falha ao listar transações no Firestore") from exc

    def _append_event_sync(self, event: TransactionEvent) -> None:
        try:
            (
                self._doc(event.transaction_id)
                .collection(self._events_subcollection)
                .document(event.id)
                .create(_to_document(event))
            )
        except gcp_exceptions.GoogleAPICallError as exc:
            logger.error(
                "ledger_event_append_error",
                extra={"error": str(exc), "transaction_id": event.transaction_id},
            )
            raise FirestoreUnavailableError("Falha ao gravar evento no Firestore") from exc

    def _list_events_sync(self, transaction_id: str) -> list[TransactionEvent]:
        try:
            docs = (
                self._doc(transaction_id)
                .collection(self._events_subcollection)
                .order_by("created_at", direction=firestore.Query.DESCENDING)
                .stream()
            )
            return [TransactionEvent.from_dict(doc.to_dict()) for doc in docs]
        except gcp_exceptions.GoogleAPICallError as exc:
            raise FirestoreUnavailableError("Falha ao listar eventos no Firestore") from exc

    # ──────────────────────────────────────────────────────────────
    # Async API (TransactionLedgerProtocol)
    # ──────────────────────────────────────────────────────────────

    async def insert(self, transaction: Transaction) -> None:
        await asyncio.to_thread(self._insert_sync, transaction)

    async def get(self, transaction_id: str) -> Transaction | None:
        return await asyncio.to_thread(self._get_sync, transaction_id)

    async def find_by_provider_reference(self, provider_reference: str) -> Transaction | None:
        return await asyncio.to_thread(self._find_by_reference_sync, provider_reference)

    async def update(
        self,
        transaction_id: str,
        changes: dict[str, Any],
        *,
        expected_status: TransactionStatus | None = None,
    ) -> Transaction:
        return await asyncio.to_thread(self._update_sync, transaction_id, changes, expected_status)

    async def query(
        self,
        filters: TransactionFilter | None = None,
        limit: int | None = None,
        offset: int = 0,
    ) -> list[Transaction]:
        return await asyncio.to_thread(self._query_sync, filters, limit, offset)

    async def append_event(self, event: TransactionEvent) -> None:
        await asyncio.to_thread(self._append_event_sync, event)

    async def list_events(self, transaction_id: str) -> list[TransactionEvent]:
        return await asyncio.to_thread(self._list_events_sync, transaction_id)
