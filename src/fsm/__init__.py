"""
Módulo FSM — Máquina de estados de transações de pagamento.

Este módulo implementa a FSM determinística que governa os status
de uma transação (pending, authorized, paid, failed, canceled,
refunded, expired).

Estrutura:
    - states/: Status canônicos (TransactionStatus enum)
    - transitions/: Tabelas de provedor e de ciclo de vida
    - rules/: Guards
    - manager/: Máquina de estados (TransactionStateMachine)
    - types/: Tipos de dados (StateTransition, TransitionResult)
"""

# Manager
from fsm.manager import (
    INITIAL_STATES,
    TransactionStateMachine,
    create_machine,
)

# Guards/Rules
from fsm.rules import (
    GuardResult,
    evaluate_guards,
    evaluate_operation_guards,
)

# Status
from fsm.states import (
    DEFAULT_INITIAL_STATUS,
    FINAL_STATUSES,
    TransactionStatus,
    is_final,
    is_valid_status,
    parse_status,
)

# Transições
from fsm.transitions import (
    LIFECYCLE_RULES,
    PROVIDER_TRANSITIONS,
    LifecycleOperation,
    get_operation_rule,
    get_valid_targets,
    is_operation_allowed,
    is_transition_valid,
    validate_transition_map,
)

# Types
from fsm.types import (
    StateTransition,
    TransitionResult,
)

__all__ = [
    "DEFAULT_INITIAL_STATUS",
    "FINAL_STATUSES",
    "INITIAL_STATES",
    "LIFECYCLE_RULES",
    "PROVIDER_TRANSITIONS",
    "GuardResult",
    "LifecycleOperation",
    "StateTransition",
    "TransactionStateMachine",
    "TransactionStatus",
    "TransitionResult",
    "create_machine",
    "evaluate_guards",
    "evaluate_operation_guards",
    "get_operation_rule",
    "get_valid_targets",
    "is_final",
    "is_operation_allowed",
    "is_transition_valid",
    "is_valid_status",
    "parse_status",
    "validate_transition_map",
]
