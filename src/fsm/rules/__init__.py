"""
Exports públicos do módulo fsm/rules.

Guards para transições de status.
"""

from fsm.rules.guards import (
    DEFAULT_GUARDS,
    OPERATION_GUARDS,
    GuardResult,
    evaluate_guards,
    evaluate_operation_guards,
    guard_final_state,
    guard_operation_method,
    guard_operation_source,
    guard_valid_state,
)

__all__ = [
    "DEFAULT_GUARDS",
    "OPERATION_GUARDS",
    "GuardResult",
    "evaluate_guards",
    "evaluate_operation_guards",
    "guard_final_state",
    "guard_operation_method",
    "guard_operation_source",
    "guard_valid_state",
]
