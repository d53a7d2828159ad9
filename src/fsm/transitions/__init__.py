"""
Exports públicos do módulo fsm/transitions.

Tabelas de transição de provedor e de ciclo de vida.
"""

from fsm.transitions.rules import (
    LIFECYCLE_RULES,
    PROVIDER_TRANSITIONS,
    LifecycleOperation,
    OperationRule,
    TransitionMap,
    get_operation_rule,
    get_valid_targets,
    is_operation_allowed,
    is_transition_valid,
    validate_transition_map,
)

__all__ = [
    "LIFECYCLE_RULES",
    "PROVIDER_TRANSITIONS",
    "LifecycleOperation",
    "OperationRule",
    "TransitionMap",
    "get_operation_rule",
    "get_valid_targets",
    "is_operation_allowed",
    "is_transition_valid",
    "validate_transition_map",
]
