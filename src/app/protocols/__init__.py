"""Protocolos e contratos do core da aplicação."""

from .dedupe import AsyncDedupeProtocol
from .idempotency import IdempotencyStoreProtocol
from .models import (
    ChargeRequest,
    ProviderResult,
    Reservation,
    TransactionFilter,
    WebhookUpdate,
)
from .payment_provider import PaymentProviderProtocol
from .transaction_ledger import TransactionLedgerProtocol

__all__ = [
    "AsyncDedupeProtocol",
    "ChargeRequest",
    "IdempotencyStoreProtocol",
    "PaymentProviderProtocol",
    "ProviderResult",
    "Reservation",
    "TransactionFilter",
    "TransactionLedgerProtocol",
    "WebhookUpdate",
]
