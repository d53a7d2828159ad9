"""Validators HTTP — validação de payloads antes dos use cases.

- payments: criação, reembolso e patch de metadata
"""

from api.validators.payments import (
    MetadataPatchRequest,
    PaymentCreateRequest,
    RefundRequest,
    parse_metadata_patch,
    parse_payment_request,
    parse_refund_request,
)

__all__ = [
    "MetadataPatchRequest",
    "PaymentCreateRequest",
    "RefundRequest",
    "parse_metadata_patch",
    "parse_payment_request",
    "parse_refund_request",
]
