"""
Regras de transição entre status de transação.

Duas tabelas independentes:
- PROVIDER_TRANSITIONS: atualizações vindas de provedores (resposta de
  charge, confirmação, webhooks). Reaplicar o status atual é sempre válido.
- LIFECYCLE_RULES: operações disparadas pelo cliente (confirm, capture,
  cancel, refund), cada uma com origem, destino e método exigido.
"""

from dataclasses import dataclass, field
from enum import StrEnum

from fsm.states.transaction import FINAL_STATUSES, TransactionStatus

TransitionMap = dict[TransactionStatus, frozenset[TransactionStatus]]

_S = TransactionStatus

# Chave: status de origem / Valor: destinos aceitos de um provedor
PROVIDER_TRANSITIONS: TransitionMap = {
    _S.PENDING: frozenset({
        _S.AUTHORIZED,
        _S.PAID,
        _S.FAILED,
        _S.CANCELED,
        _S.EXPIRED,
    }),
    _S.AUTHORIZED: frozenset({
        _S.PAID,
        _S.FAILED,
        _S.CANCELED,
        _S.EXPIRED,
    }),
    _S.PAID: frozenset({_S.REFUNDED}),
    # Confirmação tardia após falha de transporte
    _S.FAILED: frozenset({_S.AUTHORIZED, _S.PAID}),
    _S.CANCELED: frozenset(),
    _S.REFUNDED: frozenset(),
    _S.EXPIRED: frozenset(),
}


class LifecycleOperation(StrEnum):
    """Operações de ciclo de vida expostas ao cliente."""

    CONFIRM = "confirm"
    CAPTURE = "capture"
    CANCEL = "cancel"
    REFUND = "refund"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True, slots=True)
class OperationRule:
    """
    Regra de uma operação de ciclo de vida.

    Attributes:
        sources: Status a partir dos quais a operação é permitida
        target: Status resultante
        method: Método exigido ("pix"/"card"), None para qualquer
        idempotent_from: Status em que a operação retorna sem alterar nada
        event_type: Tipo do evento gravado no ledger
    """

    sources: frozenset[TransactionStatus]
    target: TransactionStatus
    method: str | None = None
    idempotent_from: frozenset[TransactionStatus] = field(default_factory=frozenset)
    event_type: str = ""


LIFECYCLE_RULES: dict[LifecycleOperation, OperationRule] = {
    LifecycleOperation.CONFIRM: OperationRule(
        sources=frozenset({_S.PENDING}),
        target=_S.PAID,
        method="pix",
        idempotent_from=frozenset({_S.PAID}),
        event_type="pix_confirmed",
    ),
    LifecycleOperation.CAPTURE: OperationRule(
        sources=frozenset({_S.AUTHORIZED}),
        target=_S.PAID,
        method="card",
        event_type="card_captured",
    ),
    LifecycleOperation.CANCEL: OperationRule(
        sources=frozenset({_S.PENDING, _S.AUTHORIZED}),
        target=_S.CANCELED,
        event_type="payment_canceled",
    ),
    LifecycleOperation.REFUND: OperationRule(
        sources=frozenset({_S.PAID}),
        target=_S.REFUNDED,
        event_type="payment_refunded",
    ),
}


def get_valid_targets(status: TransactionStatus) -> frozenset[TransactionStatus]:
    """
    Retorna os destinos aceitos de um provedor a partir do status.

    Args:
        status: Status de origem

    Returns:
        Conjunto de destinos (vazio se final)
    """
    return PROVIDER_TRANSITIONS.get(status, frozenset())


def is_transition_valid(
    from_status: TransactionStatus,
    to_status: TransactionStatus,
) -> bool:
    """
    Verifica se um provedor pode mover a transação de from_status para to_status.

    Reaplicar o status atual é sempre válido (idempotente por valor).
    """
    if from_status == to_status:
        return True
    return to_status in get_valid_targets(from_status)


def get_operation_rule(operation: LifecycleOperation) -> OperationRule:
    """Retorna a regra da operação de ciclo de vida."""
    return LIFECYCLE_RULES[operation]


def is_operation_allowed(
    operation: LifecycleOperation,
    status: TransactionStatus,
) -> bool:
    """Verifica se a operação pode partir do status informado."""
    rule = get_operation_rule(operation)
    return status in rule.sources or status in rule.idempotent_from


def validate_transition_map() -> list[str]:
    """
    Valida a integridade das tabelas de transição.

    Verifica:
    - Todos os status do enum estão em PROVIDER_TRANSITIONS
    - Status finais não têm saída
    - Toda operação de ciclo de vida cobre uma aresta da tabela de provedor
    - Toda operação tem event_type

    Returns:
        Lista de erros encontrados (vazia se válido)
    """
    errors: list[str] = []

    for status in TransactionStatus:
        if status not in PROVIDER_TRANSITIONS:
            errors.append(f"Status {status.name} ausente em PROVIDER_TRANSITIONS")

    for status in FINAL_STATUSES:
        targets = PROVIDER_TRANSITIONS.get(status, frozenset())
        if targets:
            errors.append(f"Status final {status.name} não deveria ter saída: {targets}")

    for from_status, targets in PROVIDER_TRANSITIONS.items():
        for target in targets:
            if not isinstance(target, TransactionStatus):
                errors.append(f"Transição {from_status.name} → {target}: destino inválido")

    for operation, rule in LIFECYCLE_RULES.items():
        if not rule.event_type:
            errors.append(f"Operação {operation} sem event_type")
        for source in rule.sources:
            if rule.target not in PROVIDER_TRANSITIONS.get(source, frozenset()):
                errors.append(
                    f"Operação {operation}: {source.name} → {rule.target.name} "
                    "fora de PROVIDER_TRANSITIONS"
                )

    return errors
