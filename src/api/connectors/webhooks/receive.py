"""Parse e validação inicial de webhooks de pagamento (sem PII)."""

from __future__ import annotations

import json
from typing import TYPE_CHECKING

from .signature import SignatureResult, verify_signature

if TYPE_CHECKING:
    from collections.abc import Mapping, Sequence

TIMESTAMP_HEADERS: tuple[str, ...] = ("x-webhook-timestamp", "x-timestamp")


class WebhookRequestError(ValueError):
    """Erro base para falhas de webhook."""


class InvalidSignatureError(WebhookRequestError):
    """Assinatura inválida do webhook."""


class InvalidJsonError(WebhookRequestError):
    """JSON inválido no payload do webhook."""


def first_header(headers: Mapping[str, str], names: Sequence[str]) -> str | None:
    """Primeiro header não vazio da lista (case-insensitive)."""
    lowered = {str(k).lower(): v for k, v in headers.items()}
    for name in names:
        value = lowered.get(name.lower())
        if value:
            return value
    return None


def parse_webhook_request(
    raw_body: bytes,
    headers: Mapping[str, str],
    secret: str | None,
    *,
    signature_headers: Sequence[str],
    tolerance_seconds: float | None = None,
    require_timestamp: bool = False,
) -> tuple[dict[str, object], SignatureResult]:
    """Valida assinatura e parseia JSON do webhook.

    Args:
        raw_body: Corpo bruto do request
        headers: Headers recebidos
        secret: Secret do webhook (None → verificação ignorada)
        signature_headers: Headers candidatos à assinatura, em ordem
        tolerance_seconds: Janela do timestamp
        require_timestamp: Exige header de timestamp

    Raises:
        InvalidSignatureError: Se assinatura for inválida
        InvalidJsonError: Se o JSON estiver inválido ou não for objeto

    Returns:
        (payload dict, SignatureResult)
    """
    signature_result = verify_signature(
        raw_body,
        first_header(headers, signature_headers),
        secret,
        timestamp_header=first_header(headers, TIMESTAMP_HEADERS),
        tolerance_seconds=tolerance_seconds,
        require_timestamp=require_timestamp,
    )
    if not signature_result.valid:
        reason = signature_result.error or "invalid_signature"
        raise InvalidSignatureError(reason)

    try:
        payload = json.loads(raw_body or b"{}")
    except (json.JSONDecodeError, UnicodeDecodeError) as exc:
        raise InvalidJsonError("invalid_json") from exc

    if not isinstance(payload, dict):
        raise InvalidJsonError("payload_not_object")

    return payload, signature_result
