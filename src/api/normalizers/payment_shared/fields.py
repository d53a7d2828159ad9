"""Leitura tolerante de campos em payloads de provedores."""

from __future__ import annotations

from typing import Any


def as_dict(value: Any) -> dict[str, Any]:
    """Retorna o valor se for dict; caso contrário, dict vazio."""
    return value if isinstance(value, dict) else {}


def first_present(*candidates: Any) -> Any:
    """Primeiro candidato truthy (ou None)."""
    for candidate in candidates:
        if candidate:
            return candidate
    return None


def optional_str(value: Any) -> str | None:
    if value is None or value == "":
        return None
    return str(value)
