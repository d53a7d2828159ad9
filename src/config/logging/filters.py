"""Filters de logging para injeção de contexto e redação.

Campos injetados:
- correlation_id: ID de rastreamento da requisição
- service: Nome do serviço (ex: axionpay-core)

SensitiveDataFilter aplica a redação de cartão (card_hash, cvv) em
todo valor dict/list passado via `extra`.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from utils.redaction import redact

if TYPE_CHECKING:
    from collections.abc import Callable

# Atributos padrão de LogRecord; tudo além disso veio de `extra`
_STANDARD_RECORD_ATTRS = frozenset(vars(logging.LogRecord("", 0, "", 0, "", (), None))) | {
    "message",
    "asctime",
}


class CorrelationIdFilter(logging.Filter):
    """Injeta correlation_id e service em cada record de log.

    Args:
        service_name: Nome do serviço para identificação nos logs.
        correlation_id_getter: Função que retorna o correlation_id atual.
            Se não fornecida, usa string vazia como fallback.
    """

    def __init__(
        self,
        service_name: str,
        correlation_id_getter: Callable[[], str] | None = None,
    ) -> None:
        super().__init__()
        self._service_name = service_name
        self._get_correlation_id = correlation_id_getter or (lambda: "")

    def filter(self, record: logging.LogRecord) -> bool:
        """Adiciona correlation_id e service ao record.

        Se correlation_id já foi passado via `extra`, preserva o valor.
        """
        existing = getattr(record, "correlation_id", None)
        record.correlation_id = existing if existing else self._get_correlation_id()
        record.service = self._service_name
        return True


class SensitiveDataFilter(logging.Filter):
    """Redige card_hash/cvv em campos estruturados do record.

    Não altera a mensagem formatada; mensagens são nomes de evento e
    nunca carregam payloads.
    """

    def filter(self, record: logging.LogRecord) -> bool:
        for key, value in list(vars(record).items()):
            if key in _STANDARD_RECORD_ATTRS:
                continue
            if isinstance(value, dict | list | tuple):
                setattr(record, key, redact(value))
        return True
