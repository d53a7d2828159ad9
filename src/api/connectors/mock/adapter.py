"""Adapter sandbox — respostas sintéticas, sem rede.

Cartão: `paid` com captura, `authorized` sem captura.
PIX: `pending` com BR Code de sandbox.
Referência sintética: mock-<método>-<id da transação>.
"""

from __future__ import annotations

from api.payload_builders.pix import build_br_code
from app.domain.transaction import utcnow
from app.protocols.models import ChargeRequest, ProviderResult
from app.protocols.payment_provider import PaymentProviderProtocol
from fsm.states import TransactionStatus

PROVIDER_NAME = "mock"

SANDBOX_PIX_KEY = "sandbox@axionpay.dev"
SANDBOX_MERCHANT_NAME = "AXIONPAY SANDBOX"
SANDBOX_MERCHANT_CITY = "SAO PAULO"


class MockPaymentAdapter(PaymentProviderProtocol):
    """Provedor sandbox usado em ambientes de teste."""

    name = PROVIDER_NAME

    async def charge(self, request: ChargeRequest) -> ProviderResult:
        reference = f"mock-{request.method}-{request.transaction_id}"

        if request.method == "card":
            status = TransactionStatus.PAID if request.capture else TransactionStatus.AUTHORIZED
            return ProviderResult(
                success=True,
                status=status,
                provider=self.name,
                provider_reference=reference,
                raw={"amount_cents": request.amount_cents, "capture": request.capture},
            )

        br_code = build_br_code(
            SANDBOX_PIX_KEY,
            merchant_name=SANDBOX_MERCHANT_NAME,
            merchant_city=SANDBOX_MERCHANT_CITY,
            amount=request.amount_decimal,
            txid=request.transaction_id,
        )
        return ProviderResult(
            success=True,
            status=TransactionStatus.PENDING,
            provider=self.name,
            provider_reference=reference,
            raw={
                "qr_code": br_code.payload,
                "qr_code_base64": br_code.base64,
                "sandbox": True,
            },
        )

    async def confirm(self, provider_reference: str) -> ProviderResult:
        return ProviderResult(
            success=True,
            status=TransactionStatus.PAID,
            provider=self.name,
            provider_reference=provider_reference,
            raw={"confirmed_at": utcnow().isoformat(), "sandbox": True},
        )
