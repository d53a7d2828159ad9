"""Adapter de PIX estático (BR Code local, sem rede).

Toda cobrança nasce `pending`; a confirmação é manual (operador atesta o
recebimento), pois não há provedor a consultar.
"""

from __future__ import annotations

import logging

from api.payload_builders.pix import BrCodeError, build_br_code
from app.domain.transaction import utcnow
from app.protocols.models import ChargeRequest, ProviderResult
from app.protocols.payment_provider import PaymentProviderProtocol
from fsm.states import TransactionStatus

logger = logging.getLogger(__name__)

PROVIDER_NAME = "static_pix"


class StaticPixAdapter(PaymentProviderProtocol):
    """Gera BR Code estático com a chave PIX configurada."""

    name = PROVIDER_NAME

    def __init__(
        self,
        pix_key: str,
        merchant_name: str = "",
        merchant_city: str = "",
        description: str = "",
    ) -> None:
        self._pix_key = pix_key
        self._merchant_name = merchant_name
        self._merchant_city = merchant_city
        self._description = description

    async def charge(self, request: ChargeRequest) -> ProviderResult:
        if request.method != "pix":
            return ProviderResult(
                success=False,
                status=TransactionStatus.FAILED,
                provider=self.name,
                error="PIX estático não processa cartão",
            )

        description = request.metadata.get("description") or self._description
        try:
            br_code = build_br_code(
                self._pix_key,
                merchant_name=self._merchant_name,
                merchant_city=self._merchant_city,
                amount=request.amount_decimal,
                txid=request.transaction_id,
                description=str(description) if description else None,
            )
        except BrCodeError as exc:
            logger.error("static_pix_config_error", extra={"error": str(exc)})
            return ProviderResult(
                success=False,
                status=TransactionStatus.FAILED,
                provider=self.name,
                error=str(exc),
            )

        logger.info(
            "static_pix_generated",
            extra={"transaction_id": request.transaction_id, "amount_cents": request.amount_cents},
        )
        return ProviderResult(
            success=True,
            status=TransactionStatus.PENDING,
            provider=self.name,
            provider_reference=f"pix-{br_code.txid}",
            raw={
                "qr_code": br_code.payload,
                "qr_code_base64": br_code.base64,
                "txid": br_code.txid,
                "merchant_name": br_code.merchant_name,
                "merchant_city": br_code.merchant_city,
                "amount": request.amount_decimal,
            },
        )

    async def confirm(self, provider_reference: str) -> ProviderResult:
        return ProviderResult(
            success=True,
            status=TransactionStatus.PAID,
            provider=self.name,
            provider_reference=provider_reference,
            raw={"confirmation": "manual", "confirmed_at": utcnow().isoformat()},
        )
