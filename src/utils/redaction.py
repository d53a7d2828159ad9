"""Redação de campos sensíveis de cartão.

Aplicada em metadata antes do merge, em respostas/erros de provedores
antes de persistir, em payloads de webhook e nos registros de log.
"""

from __future__ import annotations

from typing import Any

REDACTED = "***"
SENSITIVE_KEYS: frozenset[str] = frozenset({"card_hash", "cvv"})


def redact(value: Any) -> Any:
    """Retorna cópia com card_hash/cvv mascarados em qualquer nível.

    Só substitui valores truthy; chaves com valor vazio/None ficam como
    estão. Primitivos são devolvidos sem alteração.

    Example:
        >>> redact({"card": {"number": "4111", "cvv": "123"}, "card_hash": "h"})
        {'card': {'number': '4111', 'cvv': '***'}, 'card_hash': '***'}
    """
    if isinstance(value, dict):
        redacted: dict[Any, Any] = {}
        for key, item in value.items():
            if key in SENSITIVE_KEYS and item:
                redacted[key] = REDACTED
            else:
                redacted[key] = redact(item)
        return redacted
    if isinstance(value, list):
        return [redact(item) for item in value]
    if isinstance(value, tuple):
        return tuple(redact(item) for item in value)
    return value
