"""Endpoints de webhooks dos provedores de pagamento.

Endpoints:
- POST /webhooks/pix: evento PIX genérico ({providerReference, event})
- POST /webhooks/woovi
- POST /webhooks/mercadopago
- POST /webhooks/infinitepay

Fluxo:
1. Assinatura HMAC (+ timestamp opcional) sobre o corpo bruto
2. JSON válido
3. Extração do WebhookUpdate pelo normalizer do provedor
4. Reconciliação (dedupe opcional por id de entrega)

Segurança:
- Falha de assinatura responde 401 antes de qualquer mutação
- Sem secret configurado a verificação é ignorada com log de alerta
- Payloads nunca são logados
"""

from __future__ import annotations

import hashlib
import logging

from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import JSONResponse

from api.connectors.webhooks import (
    InvalidJsonError,
    first_header,
    parse_webhook_request,
)
from api.connectors.webhooks import InvalidSignatureError as WebhookSignatureError
from api.normalizers import WEBHOOK_EXTRACTORS
from app.bootstrap import get_payment_services
from app.bootstrap.dependencies_services import PaymentServices
from app.use_cases.payments import WebhookOutcome
from config.settings import get_webhook_settings
from utils.errors import InvalidRequestError, InvalidSignatureError, NotFoundError

logger = logging.getLogger(__name__)

router = APIRouter()

SIGNATURE_HEADERS: dict[str, tuple[str, ...]] = {
    "pix": ("x-pix-signature", "x-webhook-signature"),
    "woovi": ("x-woovi-signature", "x-openpix-signature", "x-hub-signature", "x-webhook-signature"),
    "mercadopago": ("x-mercadopago-signature", "x-webhook-signature"),
    "infinitepay": ("x-infinitepay-signature", "x-webhook-signature"),
}
DELIVERY_ID_HEADERS: tuple[str, ...] = ("x-webhook-id", "x-delivery-id")

# Provedores que respondem 404 quando a transação não existe; os demais
# respondem 200 para não provocar reentrega.
_NOT_FOUND_AS_ERROR = frozenset({"pix", "infinitepay"})


def delivery_id_for(raw_body: bytes, headers: dict[str, str]) -> str:
    """Id da entrega: header do provedor ou SHA-256 do corpo bruto."""
    header_value = first_header(headers, DELIVERY_ID_HEADERS)
    if header_value:
        return header_value.strip()
    return hashlib.sha256(raw_body).hexdigest()


async def _handle_webhook(provider: str, request: Request, services: PaymentServices) -> JSONResponse:
    settings = get_webhook_settings()
    raw_body = await request.body()
    headers = dict(request.headers)

    try:
        payload, signature_result = parse_webhook_request(
            raw_body,
            headers,
            settings.secret_for(provider) or None,
            signature_headers=SIGNATURE_HEADERS[provider],
            tolerance_seconds=settings.tolerance_seconds,
            require_timestamp=settings.require_timestamp,
        )
    except WebhookSignatureError as exc:
        logger.warning("webhook_signature_invalid", extra={"provider": provider, "reason": str(exc)})
        raise InvalidSignatureError(str(exc)) from exc
    except InvalidJsonError as exc:
        logger.warning("webhook_json_invalid", extra={"provider": provider, "reason": str(exc)})
        msg = "JSON inválido no corpo do webhook."
        raise InvalidRequestError(msg) from exc

    if signature_result.skipped:
        logger.warning("webhook_signature_skipped", extra={"provider": provider, "reason": "secret_not_configured"})

    logger.info(
        "webhook_received",
        extra={
            "provider": provider,
            "signature_valid": signature_result.valid,
            "signature_skipped": signature_result.skipped,
            "payload_size": len(raw_body),
        },
    )

    update = WEBHOOK_EXTRACTORS[provider](payload)
    result = await services.reconcile_webhook.execute(
        update,
        delivery_id=delivery_id_for(raw_body, headers),
    )

    if result.outcome == WebhookOutcome.DUPLICATE:
        return JSONResponse(content={"ok": True, "duplicate": True})

    if result.outcome == WebhookOutcome.NOT_FOUND or result.transaction is None:
        if provider in _NOT_FOUND_AS_ERROR:
            msg = "Transação não encontrada para o webhook."
            raise NotFoundError(msg)
        return JSONResponse(
            content={"ok": False, "message": "Nenhuma transação atualizada a partir deste webhook."},
            status_code=status.HTTP_200_OK,
        )

    return JSONResponse(
        content={
            "ok": True,
            "outcome": str(result.outcome),
            "transaction": result.transaction.to_dict(),
        }
    )


@router.post("/pix")
async def pix_webhook(request: Request, services: PaymentServices = Depends(get_payment_services)) -> JSONResponse:
    return await _handle_webhook("pix", request, services)


@router.post("/woovi")
async def woovi_webhook(request: Request, services: PaymentServices = Depends(get_payment_services)) -> JSONResponse:
    return await _handle_webhook("woovi", request, services)


@router.post("/mercadopago")
async def mercadopago_webhook(
    request: Request,
    services: PaymentServices = Depends(get_payment_services),
) -> JSONResponse:
    return await _handle_webhook("mercadopago", request, services)


@router.post("/infinitepay")
async def infinitepay_webhook(
    request: Request,
    services: PaymentServices = Depends(get_payment_services),
) -> JSONResponse:
    return await _handle_webhook("infinitepay", request, services)
