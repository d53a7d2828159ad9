"""Testes dos vocabulários de status por provedor."""

from __future__ import annotations

import pytest

from app.domain.status_vocabulary import (
    CANONICAL_STATUS_MAP,
    MERCADOPAGO_STATUS_MAP,
    PROVIDER_STATUS_TABLES,
    WOOVI_STATUS_MAP,
    get_status_table,
    lookup_provider_status,
    map_provider_status,
    normalize_raw_status,
)
from fsm import TransactionStatus


@pytest.mark.parametrize("provider", sorted(PROVIDER_STATUS_TABLES))
def test_every_known_string_maps_to_one_canonical_status(provider: str) -> None:
    table = PROVIDER_STATUS_TABLES[provider]
    for raw, status in table.items():
        assert raw == normalize_raw_status(raw)
        assert isinstance(status, TransactionStatus)
        assert map_provider_status(provider, raw.upper(), TransactionStatus.PENDING) is status


def test_canonical_table_covers_every_status() -> None:
    assert set(CANONICAL_STATUS_MAP.values()) == set(TransactionStatus)


def test_unknown_status_keeps_current() -> None:
    assert map_provider_status("woovi", "weird", TransactionStatus.AUTHORIZED) is TransactionStatus.AUTHORIZED
    assert map_provider_status("woovi", None, TransactionStatus.PAID) is TransactionStatus.PAID
    assert lookup_provider_status("woovi", "weird") is None


def test_case_and_whitespace_insensitive() -> None:
    assert map_provider_status("woovi", "  COMPLETED ", TransactionStatus.PENDING) is TransactionStatus.PAID
    assert map_provider_status(" MercadoPago ", "approved", TransactionStatus.PENDING) is TransactionStatus.PAID


def test_unknown_provider_uses_canonical_table() -> None:
    assert get_status_table("desconhecido") is CANONICAL_STATUS_MAP
    assert map_provider_status("desconhecido", "refunded", TransactionStatus.PAID) is TransactionStatus.REFUNDED


def test_spot_checks() -> None:
    assert WOOVI_STATUS_MAP["chargeback"] is TransactionStatus.REFUNDED
    assert MERCADOPAGO_STATUS_MAP["in_process"] is TransactionStatus.PENDING
    assert map_provider_status("pix", "PIX_EXPIRED", TransactionStatus.PENDING) is TransactionStatus.EXPIRED
    assert map_provider_status("infinitepay", "voided", TransactionStatus.PAID) is TransactionStatus.CANCELED
