"""Vocabularios de status por provedor.

Cada provedor reporta status com nomes proprios; as tabelas abaixo
traduzem esses nomes (case-insensitive) para TransactionStatus. Valor
desconhecido nunca vira erro: o status atual da transacao e mantido.
"""

from __future__ import annotations

from collections.abc import Mapping
from types import MappingProxyType
from typing import Any

from fsm.states import TransactionStatus

_S = TransactionStatus

StatusTable = Mapping[str, TransactionStatus]

CANONICAL_STATUS_MAP: StatusTable = MappingProxyType({s.value: s for s in TransactionStatus})

WOOVI_STATUS_MAP: StatusTable = MappingProxyType({
    "paid": _S.PAID,
    "completed": _S.PAID,
    "approved": _S.PAID,
    "confirmed": _S.PAID,
    "settled": _S.PAID,
    "authorized": _S.AUTHORIZED,
    "auth": _S.AUTHORIZED,
    "pre_authorized": _S.AUTHORIZED,
    "refused": _S.FAILED,
    "failed": _S.FAILED,
    "error": _S.FAILED,
    "refunded": _S.REFUNDED,
    "chargeback": _S.REFUNDED,
    "pending": _S.PENDING,
    "created": _S.PENDING,
    "waiting": _S.PENDING,
    "active": _S.PENDING,
    "canceled": _S.CANCELED,
    "cancelled": _S.CANCELED,
    "expired": _S.EXPIRED,
    "expired_out": _S.EXPIRED,
})

INFINITEPAY_STATUS_MAP: StatusTable = MappingProxyType({
    "paid": _S.PAID,
    "approved": _S.PAID,
    "settled": _S.PAID,
    "refused": _S.FAILED,
    "failed": _S.FAILED,
    "denied": _S.FAILED,
    "canceled": _S.CANCELED,
    "voided": _S.CANCELED,
})

MERCADOPAGO_STATUS_MAP: StatusTable = MappingProxyType({
    "approved": _S.PAID,
    "authorized": _S.AUTHORIZED,
    "pending": _S.PENDING,
    "in_process": _S.PENDING,
    "in_mediation": _S.PENDING,
    "rejected": _S.FAILED,
    "cancelled": _S.CANCELED,
    "refunded": _S.REFUNDED,
    "charged_back": _S.REFUNDED,
})

# Eventos do webhook PIX generico
PIX_EVENT_MAP: StatusTable = MappingProxyType({
    "pix_confirmed": _S.PAID,
    "pix_failed": _S.FAILED,
    "pix_expired": _S.EXPIRED,
})

PROVIDER_STATUS_TABLES: dict[str, StatusTable] = {
    "woovi": WOOVI_STATUS_MAP,
    "infinitepay": INFINITEPAY_STATUS_MAP,
    "mercadopago": MERCADOPAGO_STATUS_MAP,
    "pix": PIX_EVENT_MAP,
    "static_pix": CANONICAL_STATUS_MAP,
    "mock": CANONICAL_STATUS_MAP,
}


def normalize_raw_status(raw_status: Any) -> str:
    """Normaliza status bruto: str, trim e lowercase."""
    if raw_status is None:
        return ""
    return str(raw_status).strip().lower()


def get_status_table(provider: str) -> StatusTable:
    """Tabela do provedor (canonica quando o nome e desconhecido)."""
    return PROVIDER_STATUS_TABLES.get(provider.strip().lower(), CANONICAL_STATUS_MAP)


def lookup_provider_status(provider: str, raw_status: Any) -> TransactionStatus | None:
    """Retorna o status canonico ou None quando o valor nao esta na tabela."""
    return get_status_table(provider).get(normalize_raw_status(raw_status))


def map_provider_status(
    provider: str,
    raw_status: Any,
    current: TransactionStatus,
) -> TransactionStatus:
    """Mapeia status bruto do provedor; desconhecido mantem `current`.

    Args:
        provider: Nome do provedor (woovi, infinitepay, mercadopago, pix, ...)
        raw_status: Valor reportado pelo provedor
        current: Status atual da transacao

    Returns:
        TransactionStatus canonico
    """
    mapped = lookup_provider_status(provider, raw_status)
    return mapped if mapped is not None else current


__all__ = [
    "CANONICAL_STATUS_MAP",
    "INFINITEPAY_STATUS_MAP",
    "MERCADOPAGO_STATUS_MAP",
    "PIX_EVENT_MAP",
    "PROVIDER_STATUS_TABLES",
    "WOOVI_STATUS_MAP",
    "get_status_table",
    "lookup_provider_status",
    "map_provider_status",
    "normalize_raw_status",
]
