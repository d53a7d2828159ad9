"""
Exports públicos do módulo fsm/states.

Status canônicos de transações de pagamento.
"""

from fsm.states.transaction import (
    DEFAULT_INITIAL_STATUS,
    FINAL_STATUSES,
    TransactionStatus,
    is_final,
    is_valid_status,
    parse_status,
)

__all__ = [
    "DEFAULT_INITIAL_STATUS",
    "FINAL_STATUSES",
    "TransactionStatus",
    "is_final",
    "is_valid_status",
    "parse_status",
]
