"""Extrator de webhooks do checkout hospedado InfinitePay.

`order_nsu` carrega o id interno da transação (enviado na criação do
link); `id` é a referência do provedor.
"""

from __future__ import annotations

from typing import Any

from app.protocols.models import WebhookUpdate

from ..payment_shared import as_dict, first_present, optional_str

PROVIDER_NAME = "infinitepay"


def extract_infinitepay_update(payload: dict[str, Any]) -> WebhookUpdate:
    metadata = as_dict(payload.get("metadata"))
    transaction_id = first_present(payload.get("order_nsu"), metadata.get("transactionId"))
    return WebhookUpdate(
        provider=PROVIDER_NAME,
        raw_status=optional_str(payload.get("status")),
        transaction_id=optional_str(transaction_id),
        provider_reference=optional_str(first_present(payload.get("id"), payload.get("invoice_slug"))),
        payload=payload,
    )
