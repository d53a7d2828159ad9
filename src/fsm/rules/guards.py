"""
Guards para transições de status.

Guards são avaliados depois da tabela de transição e podem bloquear
uma mudança com um motivo explícito. Guards de provedor recebem
(from_status, to_status); guards de operação recebem também a regra
e o método da transação.
"""

from collections.abc import Callable

from fsm.states.transaction import FINAL_STATUSES, TransactionStatus
from fsm.transitions.rules import OperationRule


class GuardResult:
    """
    Resultado da avaliação de um guard.

    Attributes:
        allowed: Se a transição é permitida
        reason: Motivo do bloqueio (se allowed=False)
    """

    __slots__ = ("allowed", "reason")

    def __init__(self, allowed: bool, reason: str | None = None) -> None:
        self.allowed = allowed
        self.reason = reason

    @classmethod
    def allow(cls) -> "GuardResult":
        """Cria resultado permitindo a transição."""
        return cls(allowed=True)

    @classmethod
    def deny(cls, reason: str) -> "GuardResult":
        """Cria resultado negando a transição."""
        return cls(allowed=False, reason=reason)


ProviderGuard = Callable[[TransactionStatus, TransactionStatus], GuardResult]
OperationGuard = Callable[[OperationRule, TransactionStatus, str | None], GuardResult]


def guard_valid_state(
    from_status: TransactionStatus,
    to_status: TransactionStatus,
) -> GuardResult:
    """Guard: ambos os status precisam ser membros do enum."""
    if not isinstance(from_status, TransactionStatus):
        return GuardResult.deny(f"Status de origem inválido: {from_status}")

    if not isinstance(to_status, TransactionStatus):
        return GuardResult.deny(f"Status de destino inválido: {to_status}")

    return GuardResult.allow()


def guard_final_state(
    from_status: TransactionStatus,
    to_status: TransactionStatus,
) -> GuardResult:
    """
    Guard: status finais não permitem saída.

    Reaplicar o próprio status final continua permitido.
    """
    if from_status in FINAL_STATUSES and from_status != to_status:
        return GuardResult.deny(
            f"Status {from_status.name} é final, não permite transição"
        )
    return GuardResult.allow()


DEFAULT_GUARDS: list[ProviderGuard] = [
    guard_valid_state,
    guard_final_state,
]


def guard_operation_method(
    rule: OperationRule,
    status: TransactionStatus,
    method: str | None,
) -> GuardResult:
    """Guard: operação restrita a um método (confirm → pix, capture → card)."""
    del status
    if rule.method is not None and method != rule.method:
        return GuardResult.deny(
            f"Operação exige método {rule.method}, transação é {method}"
        )
    return GuardResult.allow()


def guard_operation_source(
    rule: OperationRule,
    status: TransactionStatus,
    method: str | None,
) -> GuardResult:
    """Guard: status atual precisa ser origem válida da operação."""
    del method
    if status in rule.sources or status in rule.idempotent_from:
        return GuardResult.allow()
    return GuardResult.deny(
        f"Transição inválida: {status.name} → {rule.target.name}"
    )


OPERATION_GUARDS: list[OperationGuard] = [
    guard_operation_method,
    guard_operation_source,
]


def evaluate_guards(
    from_status: TransactionStatus,
    to_status: TransactionStatus,
    guards: list[ProviderGuard] | None = None,
) -> GuardResult:
    """
    Avalia os guards de uma atualização vinda de provedor.

    Returns:
        GuardResult do primeiro guard que negar, ou allow() se todos passarem
    """
    guards_to_apply = guards if guards is not None else DEFAULT_GUARDS

    for guard in guards_to_apply:
        result = guard(from_status, to_status)
        if not result.allowed:
            return result

    return GuardResult.allow()


def evaluate_operation_guards(
    rule: OperationRule,
    status: TransactionStatus,
    method: str | None,
    guards: list[OperationGuard] | None = None,
) -> GuardResult:
    """Avalia os guards de uma operação de ciclo de vida."""
    guards_to_apply = guards if guards is not None else OPERATION_GUARDS

    for guard in guards_to_apply:
        result = guard(rule, status, method)
        if not result.allowed:
            return result

    return GuardResult.allow()
