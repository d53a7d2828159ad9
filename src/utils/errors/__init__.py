"""Exceções utilitárias compartilhadas."""

from .exceptions import (
    FirestoreUnavailableError,
    IdempotencyInProgressError,
    InfrastructureError,
    InsufficientAmountError,
    InternalError,
    InvalidMethodError,
    InvalidRequestError,
    InvalidSignatureError,
    InvalidStatusError,
    NotFoundError,
    PaymentError,
    ProviderTransportError,
    RedisConnectionError,
    StatusConflictError,
)

__all__ = [
    "FirestoreUnavailableError",
    "IdempotencyInProgressError",
    "InfrastructureError",
    "InsufficientAmountError",
    "InternalError",
    "InvalidMethodError",
    "InvalidRequestError",
    "InvalidSignatureError",
    "InvalidStatusError",
    "NotFoundError",
    "PaymentError",
    "ProviderTransportError",
    "RedisConnectionError",
    "StatusConflictError",
]
