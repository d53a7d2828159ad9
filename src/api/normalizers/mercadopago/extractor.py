"""Extrator de notificações MercadoPago.

Notificações `payment` normalmente trazem apenas `data.id`; nesse caso o
status é consultado no gateway (requires_lookup). Quando o corpo já traz
o recurso completo, usa `status` e `external_reference` diretamente.
"""

from __future__ import annotations

from typing import Any

from app.protocols.models import WebhookUpdate

from ..payment_shared import as_dict, first_present, optional_str

PROVIDER_NAME = "mercadopago"


def extract_mercadopago_update(payload: dict[str, Any]) -> WebhookUpdate:
    data = as_dict(payload.get("data"))
    metadata = as_dict(first_present(as_dict(data.get("metadata")), as_dict(payload.get("metadata"))))
    raw_status = first_present(data.get("status"), payload.get("status"))
    transaction_id = first_present(
        data.get("external_reference"),
        payload.get("external_reference"),
        metadata.get("transaction_id"),
        metadata.get("transactionId"),
    )
    reference = first_present(data.get("id"), payload.get("id") if raw_status else None)
    return WebhookUpdate(
        provider=PROVIDER_NAME,
        raw_status=optional_str(raw_status),
        transaction_id=optional_str(transaction_id),
        provider_reference=optional_str(reference),
        payload=payload,
        requires_lookup=raw_status is None and reference is not None,
    )
