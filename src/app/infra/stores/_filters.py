"""Helpers de filtro/ordenação compartilhados pelos ledgers."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from app.domain.transaction import Transaction
    from app.protocols.models import TransactionFilter


def matches_filter(transaction: Transaction, filters: TransactionFilter | None) -> bool:
    """Aplica os filtros de listagem (AND) em memória."""
    if filters is None:
        return True
    if filters.status and transaction.status != filters.status:
        return False
    if filters.method and transaction.method != filters.method:
        return False
    if filters.provider and transaction.provider != filters.provider:
        return False
    if filters.customer_id and transaction.customer_id != filters.customer_id:
        return False
    if filters.created_from and transaction.created_at < filters.created_from:
        return False
    return not (filters.created_to and transaction.created_at > filters.created_to)


def paginate(items: list[Transaction], limit: int | None, offset: int) -> list[Transaction]:
    start = max(offset, 0)
    if limit is None:
        return items[start:]
    return items[start : start + limit]
