"""Gerenciamento de correlation_id para rastreamento de requisições.

O correlation_id chega no header X-Correlation-Id (ou é gerado) e é
injetado em todos os logs da requisição via CorrelationIdFilter.
Usa ContextVar para ser async-safe.

Uso:
    token = set_correlation_id(request.headers.get(CORRELATION_HEADER))
    try:
        ...
    finally:
        reset_correlation_id(token)
"""

from __future__ import annotations

import re
import uuid
from contextvars import ContextVar, Token

CORRELATION_HEADER = "X-Correlation-Id"

_MAX_CORRELATION_ID_LENGTH = 128
_SAFE_CORRELATION_ID_RE = re.compile(r"^[A-Za-z0-9._:-]+$")

_correlation_id: ContextVar[str] = ContextVar("correlation_id", default="")


def get_correlation_id() -> str:
    """correlation_id do contexto atual (vazio fora de requisição)."""
    return _correlation_id.get()


def generate_correlation_id() -> str:
    return str(uuid.uuid4())


def sanitize_correlation_id(value: str | None) -> str | None:
    """Aceita apenas ids curtos e sem caracteres de controle.

    Valores fora do padrão são descartados (um novo id é gerado).
    """
    if not value:
        return None
    candidate = value.strip()
    if len(candidate) > _MAX_CORRELATION_ID_LENGTH:
        return None
    if not _SAFE_CORRELATION_ID_RE.match(candidate):
        return None
    return candidate


def set_correlation_id(correlation_id: str | None = None) -> Token[str]:
    """Define o correlation_id no contexto atual.

    Args:
        correlation_id: ID recebido. Inválido ou None gera um UUID novo.

    Returns:
        Token para reset posterior via reset_correlation_id().
    """
    value = sanitize_correlation_id(correlation_id) or generate_correlation_id()
    return _correlation_id.set(value)


def reset_correlation_id(token: Token[str]) -> None:
    _correlation_id.reset(token)
