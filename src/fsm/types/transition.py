"""
Tipos para representar transições de status.

Os registros são imutáveis e seguros para log (metadata nunca carrega
dados de cartão).
"""

from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any

from fsm.states.transaction import TransactionStatus


@dataclass(frozen=True, slots=True)
class StateTransition:
    """
    Registro imutável de uma mudança de status.

    Attributes:
        from_state: Status de origem
        to_state: Status de destino (igual à origem quando reaplicado)
        trigger: Gatilho (ex: 'capture', 'provider_webhook', 'provider_charge')
        metadata: Dados adicionais para auditoria (nunca PAN/CVV)
        timestamp: Momento da transição (UTC)
    """

    from_state: TransactionStatus
    to_state: TransactionStatus
    trigger: str
    metadata: dict[str, Any] = field(default_factory=dict)
    timestamp: datetime = field(
        default_factory=lambda: datetime.now(UTC)
    )

    def __post_init__(self) -> None:
        """Valida invariantes do objeto após inicialização."""
        if not self.trigger or not self.trigger.strip():
            raise ValueError("trigger não pode ser vazio")

    @property
    def changed(self) -> bool:
        """True se o status efetivamente mudou."""
        return self.from_state != self.to_state

    def to_log_dict(self) -> dict[str, Any]:
        """Retorna representação segura para logs."""
        return {
            "from_state": self.from_state.value,
            "to_state": self.to_state.value,
            "trigger": self.trigger,
            "timestamp": self.timestamp.isoformat(),
            "changed": self.changed,
            "metadata": self.metadata,
        }


@dataclass(frozen=True, slots=True)
class TransitionResult:
    """
    Resultado de uma tentativa de transição.

    Attributes:
        success: Se a transição foi aceita
        transition: Dados da transição (se success=True)
        error_reason: Motivo da recusa (se success=False)
    """

    success: bool
    transition: StateTransition | None = None
    error_reason: str | None = None

    def __post_init__(self) -> None:
        """Valida consistência do resultado."""
        if self.success and self.transition is None:
            raise ValueError("Transição bem-sucedida deve incluir transition")
        if not self.success and self.error_reason is None:
            raise ValueError("Transição falha deve incluir error_reason")

    @property
    def changed(self) -> bool:
        """True se a transição foi aceita e alterou o status."""
        return self.transition is not None and self.transition.changed
