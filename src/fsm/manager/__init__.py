"""
Exports públicos do módulo fsm/manager.

Máquina de estados (TransactionStateMachine) de transações.
"""

from fsm.manager.machine import (
    INITIAL_STATES,
    TransactionStateMachine,
    create_machine,
)

__all__ = [
    "INITIAL_STATES",
    "TransactionStateMachine",
    "create_machine",
]
