"""Resumo de cartão persistido em method_details (nunca PAN/CVV)."""

from __future__ import annotations

import re
from typing import Any

_NON_DIGIT_RE = re.compile(r"\D")


def detect_card_brand(number: str) -> str | None:
    """Bandeira pelo prefixo (IIN); None quando não reconhecida."""
    if number.startswith("4"):
        return "visa"
    if number[:2] in {"34", "37"}:
        return "amex"
    if number[:2].isdigit() and 51 <= int(number[:2]) <= 55:
        return "mastercard"
    if number[:4].isdigit() and 2221 <= int(number[:4]) <= 2720:
        return "mastercard"
    return None


def build_card_summary(card: dict[str, Any] | None) -> dict[str, Any] | None:
    """Monta {brand?, last4, exp_month, exp_year, holder} a partir do cartão."""
    if not card:
        return None
    digits = _NON_DIGIT_RE.sub("", str(card.get("number") or ""))
    summary: dict[str, Any] = {
        "last4": digits[-4:] if len(digits) >= 4 else "****",
        "exp_month": card.get("exp_month"),
        "exp_year": card.get("exp_year"),
        "holder": card.get("holder_name") or card.get("holder"),
    }
    brand = card.get("brand") or (detect_card_brand(digits) if digits else None)
    if brand:
        summary["brand"] = str(brand).lower()
    return summary
