"""Firestore Idempotency Store — vínculo chave → transação com create().

`document.create()` falha com AlreadyExists se o documento existir, o que
dá o insert-if-absent atômico exigido. O registro nunca é atualizado.
"""

from __future__ import annotations

import asyncio
import hashlib
import logging
from typing import TYPE_CHECKING

from google.api_core import exceptions as gcp_exceptions

from app.domain.transaction import IdempotencyRecord
from app.protocols.idempotency import IdempotencyStoreProtocol
from utils.errors import FirestoreUnavailableError

if TYPE_CHECKING:
    from google.cloud.firestore import Client as FirestoreClient

logger = logging.getLogger(__name__)

IDEMPOTENCY_COLLECTION = "idempotency_keys"


def _doc_id(key: str) -> str:
    """Id de documento seguro (chaves do cliente podem conter '/')."""
    return hashlib.sha256(key.encode("utf-8")).hexdigest()


class FirestoreIdempotencyStore(IdempotencyStoreProtocol):
    """Store de idempotência usando Firestore.

    Args:
        firestore_client: Cliente Firestore
        collection_name: Nome da collection (default: idempotency_keys)
    """

    def __init__(
        self,
        firestore_client: FirestoreClient,
        collection_name: str = IDEMPOTENCY_COLLECTION,
    ) -> None:
        self._db = firestore_client
        self._collection = collection_name

    def _claim_sync(self, key: str, transaction_id: str) -> str:
        doc_ref = self._db.collection(self._collection).document(_doc_id(key))
        record = IdempotencyRecord(key=key, transaction_id=transaction_id)
        try:
            doc_ref.create({**record.to_dict(), "created_at": record.created_at})
            return transaction_id
        except gcp_exceptions.AlreadyExists:
            logger.debug("idempotency_key_exists", extra={"doc_id": doc_ref.id})
        except gcp_exceptions.GoogleAPICallError as exc:
            raise FirestoreUnavailableError("Falha ao reservar idempotência no Firestore") from exc

        existing = self._get_sync(key)
        return existing or transaction_id

    def _get_sync(self, key: str) -> str | None:
        try:
            snapshot = self._db.collection(self._collection).document(_doc_id(key)).get()
        except gcp_exceptions.GoogleAPICallError as exc:
            raise FirestoreUnavailableError("Falha ao consultar idempotência no Firestore") from exc
        if not snapshot.exists:
            return None
        data = snapshot.to_dict() or {}
        return data.get("transaction_id")

    def _release_sync(self, key: str, transaction_id: str) -> bool:
        doc_ref = self._db.collection(self._collection).document(_doc_id(key))
        try:
            snapshot = doc_ref.get()
            if not snapshot.exists or (snapshot.to_dict() or {}).get("transaction_id") != transaction_id:
                return False
            # Precondição: só apaga se o documento não mudou desde a leitura
            doc_ref.delete(option=self._db.write_option(last_update_time=snapshot.update_time))
        except gcp_exceptions.FailedPrecondition:
            return False
        except gcp_exceptions.GoogleAPICallError as exc:
            raise FirestoreUnavailableError("Falha ao liberar idempotência no Firestore") from exc
        logger.info("idempotency_key_released", extra={"doc_id": doc_ref.id})
        return True

    async def claim(self, key: str, transaction_id: str) -> str:
        return await asyncio.to_thread(self._claim_sync, key, transaction_id)

    async def get(self, key: str) -> str | None:
        return await asyncio.to_thread(self._get_sync, key)

    async def release(self, key: str, transaction_id: str) -> bool:
        return await asyncio.to_thread(self._release_sync, key, transaction_id)
