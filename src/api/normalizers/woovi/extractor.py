"""Extrator de webhooks Woovi.

O corpo pode vir como `{data: {...}}` ou direto; charge/transaction/pix
são containers alternativos. A transação interna é localizada por
metadata.transactionId, transactionId ou referenceId; a referência do
provedor é o primeiro id disponível.
"""

from __future__ import annotations

from typing import Any

from api.connectors.woovi.adapter import PROVIDER_NAME, extract_reference, extract_status
from app.protocols.models import WebhookUpdate

from ..payment_shared import as_dict, first_present, optional_str


def _metadata(data: dict[str, Any]) -> dict[str, Any]:
    return as_dict(
        first_present(
            as_dict(data.get("metadata")),
            as_dict(as_dict(data.get("charge")).get("metadata")),
            as_dict(as_dict(data.get("transaction")).get("metadata")),
            as_dict(as_dict(data.get("pix")).get("metadata")),
        )
    )


def extract_woovi_update(payload: dict[str, Any]) -> WebhookUpdate:
    data = as_dict(payload.get("data")) or payload
    metadata = _metadata(data)
    transaction_id = first_present(
        metadata.get("transactionId"),
        data.get("transactionId"),
        data.get("referenceId"),
    )
    return WebhookUpdate(
        provider=PROVIDER_NAME,
        raw_status=optional_str(extract_status(data)),
        transaction_id=optional_str(transaction_id),
        provider_reference=extract_reference(data),
        payload=payload,
    )
