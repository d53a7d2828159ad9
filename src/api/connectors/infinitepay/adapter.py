"""Adapter InfinitePay — checkout hospedado para cartão.

Gera um link de checkout (POST público, sem credencial); a transação fica
`pending` até o webhook da InfinitePay informar o resultado. O id interno
vai como `order_nsu` e volta no webhook.
"""

from __future__ import annotations

import logging
import re
from typing import Any

from api.connectors.http_base import HttpClient, HttpClientConfig, response_json
from app.protocols.models import ChargeRequest, ProviderResult
from app.protocols.payment_provider import PaymentProviderProtocol
from fsm.states import TransactionStatus
from utils.redaction import redact

logger = logging.getLogger(__name__)

PROVIDER_NAME = "infinitepay"
DEFAULT_CHECKOUT_URL = "https://api.infinitepay.io/invoices/public/checkout/links"

_NON_DIGITS_RE = re.compile(r"\D+")


def normalize_phone_number(value: Any) -> str:
    """Somente dígitos; 10/11 dígitos (BR sem DDI) recebem prefixo 55."""
    digits = _NON_DIGITS_RE.sub("", str(value or ""))
    if len(digits) in (10, 11):
        return f"55{digits}"
    return digits


def pick_customer_phone(customer: dict[str, Any] | None, metadata: dict[str, Any]) -> str:
    customer = customer or {}
    metadata_customer = metadata.get("customer") if isinstance(metadata.get("customer"), dict) else {}
    candidates = (
        customer.get("phone_number"),
        customer.get("phoneNumber"),
        customer.get("phone"),
        customer.get("whatsapp"),
        metadata_customer.get("phone_number"),
        metadata.get("customer_phone"),
        metadata.get("customer_whatsapp"),
    )
    for candidate in candidates:
        normalized = normalize_phone_number(candidate)
        if normalized:
            return normalized
    return ""


class InfinitePayAdapter(PaymentProviderProtocol):
    """Checkout hospedado InfinitePay.

    Args:
        handle: Handle padrão da conta InfinitePay
        webhook_url: URL que a InfinitePay chama com o resultado
        redirect_url: URL de retorno do comprador
        checkout_url: Endpoint de criação de links
        timeout_seconds: Timeout por chamada
        http_client: Cliente HTTP alternativo (testes)
    """

    name = PROVIDER_NAME

    def __init__(
        self,
        handle: str = "",
        webhook_url: str = "",
        redirect_url: str = "",
        checkout_url: str = DEFAULT_CHECKOUT_URL,
        timeout_seconds: float = 10.0,
        http_client: HttpClient | None = None,
    ) -> None:
        self._handle = handle
        self._webhook_url = webhook_url
        self._redirect_url = redirect_url
        self._checkout_url = checkout_url
        self._http = http_client or HttpClient(
            HttpClientConfig(timeout_seconds=timeout_seconds),
            provider=PROVIDER_NAME,
        )

    def build_payload(self, request: ChargeRequest) -> dict[str, Any]:
        metadata = request.metadata
        customer = request.customer or {}
        address = metadata.get("address") if isinstance(metadata.get("address"), dict) else {}
        return {
            "handle": metadata.get("handle") or self._handle,
            "order_nsu": request.transaction_id,
            "redirect_url": metadata.get("redirect_url")
            or metadata.get("return_url")
            or self._redirect_url,
            "webhook_url": metadata.get("webhook_url") or self._webhook_url,
            "items": [
                {
                    "quantity": 1,
                    "price": request.amount_cents,
                    "description": f"Pedido {request.transaction_id}",
                },
            ],
            "customer": {
                "name": customer.get("name") or "Cliente",
                "email": customer.get("email") or "",
                "phone_number": pick_customer_phone(customer, metadata),
            },
            "address": {
                key: address.get(key) or ""
                for key in ("cep", "street", "neighborhood", "number", "complement")
            },
        }

    def _failure(self, error: Any) -> ProviderResult:
        return ProviderResult(
            success=False,
            status=TransactionStatus.FAILED,
            provider=self.name,
            error=error,
        )

    async def charge(self, request: ChargeRequest) -> ProviderResult:
        if request.method != "card":
            return self._failure("InfinitePay processa apenas cartão")

        payload = self.build_payload(request)
        if not payload["customer"]["phone_number"]:
            return self._failure(
                "InfinitePay exige customer.phone_number (ou customer.whatsapp)"
            )
        if not payload["handle"]:
            return self._failure("InfinitePay sem handle configurado")

        logger.info(
            "infinitepay_checkout_request",
            extra={"transaction_id": request.transaction_id, "amount_cents": request.amount_cents},
        )
        response = await self._http.post(self._checkout_url, json=payload)
        data = response_json(response)
        if response.is_error:
            logger.warning(
                "infinitepay_checkout_declined",
                extra={"status_code": response.status_code},
            )
            return self._failure(redact(data) or f"http_{response.status_code}")

        data = data if isinstance(data, dict) else {}
        reference = data.get("id") or data.get("slug") or request.transaction_id
        return ProviderResult(
            success=True,
            status=TransactionStatus.PENDING,
            provider=self.name,
            provider_reference=str(reference),
            raw=redact(data),
        )

    async def confirm(self, provider_reference: str) -> ProviderResult:
        return ProviderResult(
            success=False,
            status=TransactionStatus.FAILED,
            provider=self.name,
            provider_reference=provider_reference,
            error="InfinitePay não suporta confirmação PIX",
        )
