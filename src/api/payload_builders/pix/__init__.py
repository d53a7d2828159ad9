"""Builders de payload PIX (BR Code estático)."""

from .br_code import (
    DEFAULT_MERCHANT_CITY,
    DEFAULT_MERCHANT_NAME,
    BrCode,
    BrCodeError,
    build_br_code,
    crc16_ccitt,
    generate_br_code,
    to_base64,
    verify_br_code,
)

__all__ = [
    "DEFAULT_MERCHANT_CITY",
    "DEFAULT_MERCHANT_NAME",
    "BrCode",
    "BrCodeError",
    "build_br_code",
    "crc16_ccitt",
    "generate_br_code",
    "to_base64",
    "verify_br_code",
]
