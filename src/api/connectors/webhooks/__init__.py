"""Webhooks de provedores: assinatura HMAC e parsing seguro."""

from .receive import (
    TIMESTAMP_HEADERS,
    InvalidJsonError,
    InvalidSignatureError,
    WebhookRequestError,
    first_header,
    parse_webhook_request,
)
from .signature import SignatureResult, parse_signature_header, parse_timestamp, verify_signature

__all__ = [
    "TIMESTAMP_HEADERS",
    "InvalidJsonError",
    "InvalidSignatureError",
    "SignatureResult",
    "WebhookRequestError",
    "first_header",
    "parse_signature_header",
    "parse_timestamp",
    "parse_webhook_request",
    "verify_signature",
]
