"""
Máquina de estados (TransactionStateMachine) de uma transação.

A máquina é montada a partir do status persistido, decide se uma
operação de ciclo de vida ou uma atualização de provedor é aceita e
mantém o histórico da avaliação. A persistência (compare-and-set no
ledger) fica com o caller.
"""

from typing import Any

from fsm.rules.guards import (
    GuardResult,
    evaluate_guards,
    evaluate_operation_guards,
)
from fsm.states.transaction import (
    DEFAULT_INITIAL_STATUS,
    TransactionStatus,
    is_final,
)
from fsm.transitions.rules import (
    LifecycleOperation,
    get_operation_rule,
    get_valid_targets,
    is_transition_valid,
)
from fsm.types.transition import StateTransition, TransitionResult


class TransactionStateMachine:
    """
    Máquina de estados de uma transação de pagamento.

    Attributes:
        current_state: Status atual
        method: Método da transação ("pix" ou "card")
        history: Transições aceitas nesta instância
    """

    __slots__ = ("_current_state", "_history", "_method", "_transaction_id")

    def __init__(
        self,
        initial_state: TransactionStatus | None = None,
        transaction_id: str = "",
        method: str | None = None,
    ) -> None:
        self._current_state = initial_state or DEFAULT_INITIAL_STATUS
        self._history: list[StateTransition] = []
        self._transaction_id = transaction_id
        self._method = method

    @property
    def current_state(self) -> TransactionStatus:
        """Status atual da máquina."""
        return self._current_state

    @property
    def history(self) -> list[StateTransition]:
        """Histórico de transições (cópia para evitar mutação externa)."""
        return list(self._history)

    @property
    def transaction_id(self) -> str:
        return self._transaction_id

    @property
    def method(self) -> str | None:
        return self._method

    @property
    def is_final(self) -> bool:
        """Verifica se está em status final."""
        return is_final(self._current_state)

    def get_valid_targets(self) -> frozenset[TransactionStatus]:
        """Destinos aceitos de um provedor a partir do status atual."""
        return get_valid_targets(self._current_state)

    def can_apply_provider_status(self, target: TransactionStatus) -> bool:
        """Verifica se um provedor pode mover a transação para target."""
        if not is_transition_valid(self._current_state, target):
            return False
        return evaluate_guards(self._current_state, target).allowed

    def can_apply_operation(self, operation: LifecycleOperation) -> bool:
        """Verifica se a operação de ciclo de vida é aceita agora."""
        rule = get_operation_rule(operation)
        return evaluate_operation_guards(rule, self._current_state, self._method).allowed

    def apply_provider_status(
        self,
        target: TransactionStatus,
        trigger: str,
        metadata: dict[str, Any] | None = None,
    ) -> TransitionResult:
        """
        Aplica um status reportado por provedor (charge, confirm ou webhook).

        Reaplicar o status atual é aceito sem mudança. Status fora da
        tabela de provedor retornam falha e o estado permanece intacto.

        Args:
            target: Status canônico reportado
            trigger: Origem da atualização (ex: 'provider_webhook')
            metadata: Dados adicionais para auditoria

        Returns:
            TransitionResult com sucesso/falha e dados da transição
        """
        if not is_transition_valid(self._current_state, target):
            return TransitionResult(
                success=False,
                error_reason=(
                    f"Transição inválida: {self._current_state.name} → {target.name}"
                ),
            )

        guard_result: GuardResult = evaluate_guards(self._current_state, target)
        if not guard_result.allowed:
            return TransitionResult(success=False, error_reason=guard_result.reason)

        return self._commit(target, trigger, metadata)

    def apply_operation(
        self,
        operation: LifecycleOperation,
        metadata: dict[str, Any] | None = None,
    ) -> TransitionResult:
        """
        Aplica uma operação de ciclo de vida (confirm, capture, cancel, refund).

        Quando o status atual está em idempotent_from da regra (ex: confirm
        de um PIX já pago), retorna sucesso sem mudança de status.
        """
        rule = get_operation_rule(operation)
        guard_result = evaluate_operation_guards(rule, self._current_state, self._method)
        if not guard_result.allowed:
            return TransitionResult(success=False, error_reason=guard_result.reason)

        target = rule.target
        if self._current_state in rule.idempotent_from:
            target = self._current_state

        return self._commit(target, str(operation), metadata)

    def _commit(
        self,
        target: TransactionStatus,
        trigger: str,
        metadata: dict[str, Any] | None,
    ) -> TransitionResult:
        transition = StateTransition(
            from_state=self._current_state,
            to_state=target,
            trigger=trigger,
            metadata=metadata or {},
        )
        self._current_state = target
        self._history.append(transition)
        return TransitionResult(success=True, transition=transition)

    def get_state_summary(self) -> dict[str, Any]:
        """Resumo do estado atual para logs."""
        return {
            "transaction_id": self._transaction_id,
            "current_state": self._current_state.value,
            "method": self._method,
            "is_final": self.is_final,
            "transition_count": len(self._history),
            "valid_targets": sorted(s.value for s in self.get_valid_targets()),
        }

    def get_history_summary(self) -> list[dict[str, Any]]:
        """Histórico em formato seguro para logs."""
        return [t.to_log_dict() for t in self._history]


def create_machine(
    transaction_id: str,
    status: TransactionStatus | str | None = None,
    method: str | None = None,
) -> TransactionStateMachine:
    """
    Factory para montar a máquina a partir do status persistido.

    Args:
        transaction_id: Identificador da transação
        status: Status atual (enum ou string de wire)
        method: Método da transação

    Returns:
        TransactionStateMachine configurada
    """
    initial = TransactionStatus(status) if status is not None else None
    return TransactionStateMachine(
        initial_state=initial,
        transaction_id=transaction_id,
        method=method,
    )


INITIAL_STATES = frozenset({DEFAULT_INITIAL_STATUS, TransactionStatus.FAILED})
