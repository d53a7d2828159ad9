"""Registros de mudança de status de transação.

StateTransition guarda origem, destino e gatilho (provider_charge,
provider_webhook, capture, refund...) de cada status aplicado no ledger;
TransitionResult é o retorno da TransactionStateMachine, com a transição
aplicada ou o motivo da rejeição.
"""

from fsm.types.transition import StateTransition, TransitionResult

__all__ = ["StateTransition", "TransitionResult"]
