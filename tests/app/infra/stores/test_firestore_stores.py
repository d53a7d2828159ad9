"""Testes dos stores Firestore com cliente mockado."""

from __future__ import annotations

from unittest.mock import MagicMock

import pytest
from google.api_core import exceptions as gcp_exceptions

from app.domain.transaction import PaymentMethod, Transaction, TransactionEvent
from app.infra.stores.firestore_idempotency_store import FirestoreIdempotencyStore, _doc_id
from app.infra.stores.firestore_transaction_ledger import FirestoreTransactionLedger
from app.protocols.models import TransactionFilter
from utils.errors import FirestoreUnavailableError, InternalError


def _snapshot(data: dict | None) -> MagicMock:
    snapshot = MagicMock()
    snapshot.exists = data is not None
    snapshot.to_dict.return_value = data
    return snapshot


def _tx(transaction_id: str = "tx_1") -> Transaction:
    return Transaction(id=transaction_id, amount=12.34, amount_cents=1234, method=PaymentMethod.PIX)


class TestFirestoreIdempotencyStore:
    """Testes do FirestoreIdempotencyStore."""

    def test_doc_id_is_stable_hash(self) -> None:
        assert _doc_id("a/b") == _doc_id("a/b")
        assert "/" not in _doc_id("a/b")
        assert len(_doc_id("a/b")) == 64

    @pytest.mark.asyncio
    async def test_claim_creates_document(self) -> None:
        client = MagicMock()
        doc_ref = client.collection.return_value.document.return_value
        store = FirestoreIdempotencyStore(client)

        assert await store.claim("pedido-1", "tx_1") == "tx_1"
        client.collection.assert_called_with("idempotency_keys")
        written = doc_ref.create.call_args[0][0]
        assert written["key"] == "pedido-1"
        assert written["transaction_id"] == "tx_1"

    @pytest.mark.asyncio
    async def test_claim_existing_returns_bound_id(self) -> None:
        client = MagicMock()
        doc_ref = client.collection.return_value.document.return_value
        doc_ref.create.side_effect = gcp_exceptions.AlreadyExists("exists")
        doc_ref.get.return_value = _snapshot({"key": "pedido-1", "transaction_id": "tx_original"})
        store = FirestoreIdempotencyStore(client)

        assert await store.claim("pedido-1", "tx_2") == "tx_original"

    @pytest.mark.asyncio
    async def test_get_missing(self) -> None:
        client = MagicMock()
        client.collection.return_value.document.return_value.get.return_value = _snapshot(None)
        assert await FirestoreIdempotencyStore(client).get("nova") is None

    @pytest.mark.asyncio
    async def test_api_error_maps_to_unavailable(self) -> None:
        client = MagicMock()
        doc_ref = client.collection.return_value.document.return_value
        doc_ref.create.side_effect = gcp_exceptions.ServiceUnavailable("down")

        with pytest.raises(FirestoreUnavailableError):
            await FirestoreIdempotencyStore(client).claim("pedido-1", "tx_1")

    @pytest.mark.asyncio
    async def test_release_deletes_matching_binding(self) -> None:
        client = MagicMock()
        doc_ref = client.collection.return_value.document.return_value
        doc_ref.get.return_value = _snapshot({"key": "pedido-1", "transaction_id": "tx_1"})

        assert await FirestoreIdempotencyStore(client).release("pedido-1", "tx_1") is True
        doc_ref.delete.assert_called_once()

    @pytest.mark.asyncio
    async def test_release_keeps_other_binding(self) -> None:
        client = MagicMock()
        doc_ref = client.collection.return_value.document.return_value
        doc_ref.get.return_value = _snapshot({"key": "pedido-1", "transaction_id": "tx_outra"})

        assert await FirestoreIdempotencyStore(client).release("pedido-1", "tx_1") is False
        doc_ref.delete.assert_not_called()


class TestFirestoreTransactionLedger:
    """Testes do FirestoreTransactionLedger."""

    @pytest.mark.asyncio
    async def test_insert_writes_document_with_native_dates(self) -> None:
        client = MagicMock()
        doc_ref = client.collection.return_value.document.return_value
        transaction = _tx()

        await FirestoreTransactionLedger(client).insert(transaction)

        client.collection.return_value.document.assert_called_with("tx_1")
        written = doc_ref.create.call_args[0][0]
        assert written["amount_cents"] == 1234
        assert written["method"] == "pix"
        assert written["created_at"] == transaction.created_at

    @pytest.mark.asyncio
    async def test_insert_existing_raises_internal_error(self) -> None:
        client = MagicMock()
        client.collection.return_value.document.return_value.create.side_effect = gcp_exceptions.AlreadyExists("x")

        with pytest.raises(InternalError):
            await FirestoreTransactionLedger(client).insert(_tx())

    @pytest.mark.asyncio
    async def test_get_roundtrip_from_snapshot(self) -> None:
        client = MagicMock()
        stored = _tx().model_dump(mode="json")
        client.collection.return_value.document.return_value.get.return_value = _snapshot(stored)

        loaded = await FirestoreTransactionLedger(client).get("tx_1")

        assert loaded is not None
        assert loaded.id == "tx_1"
        assert loaded.method == PaymentMethod.PIX

    @pytest.mark.asyncio
    async def test_get_missing(self) -> None:
        client = MagicMock()
        client.collection.return_value.document.return_value.get.return_value = _snapshot(None)
        assert await FirestoreTransactionLedger(client).get("tx_9") is None

    @pytest.mark.asyncio
    async def test_query_applies_filters_and_pagination(self) -> None:
        client = MagicMock()
        query = MagicMock()
        client.collection.return_value = query
        query.where.return_value = query
        query.order_by.return_value = query
        query.offset.return_value = query
        query.limit.return_value = query
        doc = MagicMock()
        doc.to_dict.return_value = _tx("tx_2").model_dump(mode="json")
        query.stream.return_value = [doc]

        result = await FirestoreTransactionLedger(client).query(
            TransactionFilter(status="paid", method="pix"),
            limit=10,
            offset=20,
        )

        assert [tx.id for tx in result] == ["tx_2"]
        assert query.where.call_count == 2
        query.offset.assert_called_once_with(20)
        query.limit.assert_called_once_with(10)

    @pytest.mark.asyncio
    async def test_append_event_goes_to_subcollection(self) -> None:
        client = MagicMock()
        tx_doc = client.collection.return_value.document.return_value
        event = TransactionEvent(transaction_id="tx_1", type="payment.created")

        await FirestoreTransactionLedger(client).append_event(event)

        tx_doc.collection.assert_called_once_with("events")
        tx_doc.collection.return_value.document.assert_called_once_with(event.id)
