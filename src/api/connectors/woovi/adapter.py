"""Adapter Woovi — cobranças PIX (e cartão quando habilitado na conta).

Paths são configuráveis porque variam por conta/contrato:
- WOOVI_PIX_PATH (default /api/v1/charge)
- WOOVI_CARD_PATH (vazio = cartão desabilitado)
- WOOVI_PIX_CONFIRM_PATH (vazio = confirmação desabilitada)
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

PROVIDER_NAME = "woovi"
DEFAULT_BASE_URL = "https://api.woovi-sandbox.com"
DEFAULT_PIX_PATH = "/api/v1/charge"


def extract_reference(data: dict[str, Any]) -> str | None:
    """Primeiro identificador disponível na resposta/webhook Woovi."""
    charge = data.get("charge") if isinstance(data.get("charge"), dict) else {}
    transaction = data.get("transaction") if isinstance(data.get("transaction"), dict) else {}
    pix = data.get("pix") if isinstance(data.get("pix"), dict) else {}
    candidates = (
        data.get("id"),
        charge.get("id"),
        transaction.get("id"),
        data.get("correlationID"),
        data.get("correlationId"),
        charge.get("correlationID"),
        charge.get("correlationId"),
        pix.get("id"),
    )
    for candidate in candidates:
        if candidate:
            return str(candidate)
    return None


def extract_status(data: dict[str, Any]) -> Any:
    for container in (data, data.get("charge"), data.get("transaction")):
        if isinstance(container, dict) and container.get("status"):
            return container["status"]
    return None


class WooviAdapter(PaymentProviderProtocol):
    """Gateway Woovi.

    Args:
        api_key: Chave da API (enviada em Authorization)
        base_url: URL base
        pix_path: Endpoint de cobrança PIX
        card_path: Endpoint de cartão (vazio desabilita)
        pix_confirm_path: Endpoint de confirmação (vazio desabilita)
        auth_header: Valor explícito para Authorization (sobrepõe api_key)
        timeout_seconds: Timeout por chamada
        http_client: Cliente HTTP alternativo (testes)
    """

    name = PROVIDER_NAME

    def __init__(
        self,
        api_key: str,
        base_url: str = DEFAULT_BASE_URL,
        pix_path: str = DEFAULT_PIX_PATH,
        card_path: str = "",
        pix_confirm_path: str = "",
        auth_header: str = "",
        timeout_seconds: float = 10.0,
        http_client: HttpClient | None = None,
    ) -> None:
        self._authorization = auth_header or api_key
        self._pix_path = pix_path
        self._card_path = card_path
        self._pix_confirm_path = pix_confirm_path
        self._http = http_client or HttpClient(
            HttpClientConfig(base_url=base_url, timeout_seconds=timeout_seconds),
            provider=PROVIDER_NAME,
        )

    def _headers(self) -> dict[str, str]:
        return {"Authorization": self._authorization, "Content-Type": "application/json"}

    def _failure(self, error: Any, reference: str | None = None) -> ProviderResult:
        return ProviderResult(
            success=False,
            status=TransactionStatus.FAILED,
            provider=self.name,
            provider_reference=reference,
            error=error,
        )

    def build_pix_payload(self, request: ChargeRequest) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "value": request.amount_cents,
            "correlationID": request.transaction_id,
            "metadata": {"transactionId": request.transaction_id},
        }
        comment = request.metadata.get("comment") or request.metadata.get("description")
        if comment:
            payload["comment"] = str(comment)
        if request.customer:
            payload["customer"] = request.customer
        return payload

    def build_card_payload(self, request: ChargeRequest) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "amount": request.amount_cents,
            "currency": request.currency,
            "payment_method": "credit_card",
            "capture": request.capture,
            "metadata": {"transactionId": request.transaction_id},
        }
        if request.card_hash:
            payload["card_hash"] = request.card_hash
        elif request.card:
            card = request.card
            month = str(card.get("exp_month", "")).zfill(2)
            year = str(card.get("exp_year", ""))[-2:]
            payload["card_number"] = card.get("number")
            payload["card_holder_name"] = card.get("holder_name")
            payload["card_expiration_date"] = f"{month}{year}"
            payload["card_cvv"] = card.get("cvv")
        return payload

    async def charge(self, request: ChargeRequest) -> ProviderResult:
        if not self._authorization:
            logger.warning("woovi_not_configured")
            return self._failure("Woovi não configurada")

        if request.method == "card":
            if not self._card_path:
                return self._failure("Cartão não habilitado na Woovi")
            path, payload = self._card_path, self.build_card_payload(request)
            accepted = {TransactionStatus.PAID, TransactionStatus.AUTHORIZED}
        else:
            path, payload = self._pix_path, self.build_pix_payload(request)
            accepted = {TransactionStatus.PAID, TransactionStatus.AUTHORIZED, TransactionStatus.PENDING}

        logger.info(
            "woovi_charge_request",
            extra={"method": request.method, "amount_cents": request.amount_cents},
        )
        response = await self._http.post(path, json=payload, headers=self._headers())
        data = response_json(response)
        if response.is_error:
            logger.warning("woovi_charge_declined", extra={"status_code": response.status_code})
            return self._failure(redact(data) or f"http_{response.status_code}")

        data = data if isinstance(data, dict) else {}
        status = lookup_provider_status(self.name, extract_status(data)) or TransactionStatus.PENDING
        success = status in accepted
        return ProviderResult(
            success=success,
            status=status if success else TransactionStatus.FAILED,
            provider=self.name,
            provider_reference=extract_reference(data),
            raw=redact(data),
            error=None if success else f"Status inesperado: {extract_status(data)}",
        )

    async def confirm(self, provider_reference: str) -> ProviderResult:
        if not self._authorization or not self._pix_confirm_path:
            return self._failure("Confirmação PIX não configurada na Woovi", provider_reference)

        response = await self._http.post(
            self._pix_confirm_path,
            json={"providerReference": provider_reference},
            headers=self._headers(),
        )
        data = response_json(response)
        if response.is_error:
            return self._failure(redact(data) or f"http_{response.status_code}", provider_reference)

        data = data if isinstance(data, dict) else {}
        status = lookup_provider_status(self.name, extract_status(data)) or TransactionStatus.PENDING
        success = status in {TransactionStatus.PAID, TransactionStatus.AUTHORIZED}
        return ProviderResult(
            success=success,
            status=status,
            provider=self.name,
            provider_reference=extract_reference(data) or provider_reference,
            raw=redact(data),
            error=None if success else f"Status inesperado: {extract_status(data)}",
        )
