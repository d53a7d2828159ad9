"""Adapter MercadoPago — gateway dinâmico (PIX e cartão).

POST /v1/payments com Bearer token. Respostas 4xx são recusas de negócio
(success=False); timeout/5xx sobem como ProviderTransportError pelo
HttpClient.
"""

from __future__ import annotations

import logging
from typing import Any

from api.connectors.http_base import HttpClient, HttpClientConfig, response_json
from app.domain.status_vocabulary import lookup_provider_status
from app.protocols.models import ChargeRequest, ProviderResult
from app.protocols.payment_provider import PaymentProviderProtocol
from fsm.states import TransactionStatus
from utils.redaction import redact

logger = logging.getLogger(__name__)

PROVIDER_NAME = "mercadopago"
DEFAULT_BASE_URL = "https://api.mercadopago.com"
PAYMENTS_PATH = "/v1/payments"

_ACCEPTED = frozenset({
    TransactionStatus.PENDING,
    TransactionStatus.AUTHORIZED,
    TransactionStatus.PAID,
})


def _split_name(name: str | None) -> tuple[str, str]:
    parts = (name or "").split()
    if not parts:
        return "Cliente", ""
    return parts[0], " ".join(parts[1:])


def build_payer(customer: dict[str, Any] | None) -> dict[str, Any]:
    customer = customer or {}
    first_name, last_name = _split_name(customer.get("name"))
    return {
        "email": customer.get("email") or "customer@example.com",
        "first_name": first_name,
        "last_name": last_name,
        "identification": {
            "type": "CPF",
            "number": customer.get("document") or "00000000000",
        },
    }


def build_payment_payload(request: ChargeRequest) -> dict[str, Any]:
    """Monta o corpo de /v1/payments (PIX ou cartão)."""
    payload: dict[str, Any] = {
        "transaction_amount": request.amount_cents / 100,
        "description": request.metadata.get("description")
        or f"Pagamento {request.transaction_id}",
        "payer": build_payer(request.customer),
        "external_reference": request.transaction_id,
    }
    if request.method == "pix":
        payload["payment_method_id"] = "pix"
        return payload

    payload["capture"] = request.capture
    if request.card_hash:
        payload["token"] = request.card_hash
    elif request.card:
        card = request.card
        payload["card"] = {
            "number": card.get("number"),
            "holder_name": card.get("holder_name"),
            "expiration_month": str(card.get("exp_month", "")).zfill(2),
            "expiration_year": str(card.get("exp_year", "")),
            "security_code": card.get("cvv"),
        }
    return payload


class MercadoPagoAdapter(PaymentProviderProtocol):
    """Gateway MercadoPago.

    Args:
        access_token: Token de acesso (Bearer)
        base_url: URL base da API
        timeout_seconds: Timeout por chamada
        http_client: Cliente HTTP alternativo (testes)
    """

    name = PROVIDER_NAME

    def __init__(
        self,
        access_token: str,
        base_url: str = DEFAULT_BASE_URL,
        timeout_seconds: float = 10.0,
        http_client: HttpClient | None = None,
    ) -> None:
        self._access_token = access_token
        self._http = http_client or HttpClient(
            HttpClientConfig(base_url=base_url, timeout_seconds=timeout_seconds),
            provider=PROVIDER_NAME,
        )

    def _headers(self, idempotency_key: str | None = None) -> dict[str, str]:
        headers = {
            "Authorization": f"Bearer {self._access_token}",
            "Content-Type": "application/json",
        }
        if idempotency_key:
            headers["X-Idempotency-Key"] = idempotency_key
        return headers

    def _not_configured(self) -> ProviderResult:
        logger.warning("mercadopago_not_configured")
        return ProviderResult(
            success=False,
            status=TransactionStatus.FAILED,
            provider=self.name,
            error="MercadoPago não configurado",
        )

    async def charge(self, request: ChargeRequest) -> ProviderResult:
        if not self._access_token:
            return self._not_configured()

        logger.info(
            "mercadopago_charge_request",
            extra={"method": request.method, "amount_cents": request.amount_cents},
        )
        response = await self._http.post(
            PAYMENTS_PATH,
            json=build_payment_payload(request),
            headers=self._headers(request.transaction_id),
        )
        data = response_json(response)
        if response.is_error:
            logger.warning(
                "mercadopago_charge_declined",
                extra={"status_code": response.status_code},
            )
            return ProviderResult(
                success=False,
                status=TransactionStatus.FAILED,
                provider=self.name,
                error=redact(data) or f"http_{response.status_code}",
            )
        return self._to_result(data, capture=request.capture, method=request.method)

    async def confirm(self, provider_reference: str) -> ProviderResult:
        if not self._access_token:
            return self._not_configured()

        response = await self._http.get(
            f"{PAYMENTS_PATH}/{provider_reference}",
            headers=self._headers(),
        )
        data = response_json(response)
        if response.is_error:
            return ProviderResult(
                success=False,
                status=TransactionStatus.FAILED,
                provider=self.name,
                provider_reference=provider_reference,
                error=redact(data) or f"http_{response.status_code}",
            )
        return self._to_result(data, capture=True, method="pix")

    def _to_result(self, data: dict[str, Any], *, capture: bool, method: str) -> ProviderResult:
        data = data if isinstance(data, dict) else {}
        raw_status = data.get("status")
        status = lookup_provider_status(self.name, raw_status) or TransactionStatus.FAILED
        if status == TransactionStatus.PAID and method == "card" and not capture:
            status = TransactionStatus.AUTHORIZED

        reference = str(data["id"]) if data.get("id") is not None else None
        if method == "pix":
            tx_data = (data.get("point_of_interaction") or {}).get("transaction_data") or {}
            raw: Any = {
                "qr_code": tx_data.get("qr_code"),
                "qr_code_base64": tx_data.get("qr_code_base64"),
                "ticket_url": tx_data.get("ticket_url"),
                "expires_at": data.get("date_of_expiration"),
                "status": raw_status,
            }
        else:
            raw = redact(data)

        success = status in _ACCEPTED
        return ProviderResult(
            success=success,
            status=status,
            provider=self.name,
            provider_reference=reference,
            raw=raw,
            error=None if success else f"Status inesperado: {raw_status}",
        )
