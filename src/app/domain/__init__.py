"""Modelos de dominio do core de pagamentos."""

from .status_vocabulary import get_status_table, map_provider_status
from .transaction import (
    IdempotencyRecord,
    PaymentMethod,
    Transaction,
    TransactionEvent,
    cents_to_amount,
    new_transaction_id,
)

__all__ = [
    "IdempotencyRecord",
    "PaymentMethod",
    "Transaction",
    "TransactionEvent",
    "cents_to_amount",
    "get_status_table",
    "map_provider_status",
    "new_transaction_id",
]
