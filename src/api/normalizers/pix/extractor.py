"""Extrator do webhook PIX genérico (`{providerReference, event}`)."""

from __future__ import annotations

from typing import Any

from app.protocols.models import WebhookUpdate
from utils.errors import InvalidRequestError

from ..payment_shared import optional_str

PROVIDER_NAME = "pix"
PIX_EVENTS = frozenset({"PIX_CONFIRMED", "PIX_FAILED", "PIX_EXPIRED"})


def extract_pix_update(payload: dict[str, Any]) -> WebhookUpdate:
    """Extrai referência e evento.

    Raises:
        InvalidRequestError: providerReference ou event ausentes
    """
    reference = optional_str(payload.get("providerReference"))
    event = optional_str(payload.get("event"))
    if not reference or not event:
        msg = 'Campos obrigatórios: "providerReference" e "event".'
        raise InvalidRequestError(msg)
    return WebhookUpdate(
        provider=PROVIDER_NAME,
        raw_status=event.strip().upper(),
        provider_reference=reference,
        payload=payload,
    )
