"""Modelos trocados entre use cases, adapters de provedor e stores."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from fsm.states import TransactionStatus


@dataclass(frozen=True, slots=True)
class ChargeRequest:
    """Intenção de cobrança enviada a um adapter.

    `card`/`card_hash` só existem em memória durante a chamada ao
    provedor; nunca são persistidos.
    """

    transaction_id: str
    method: str
    amount_cents: int
    currency: str = "BRL"
    capture: bool = True
    customer: dict[str, Any] | None = None
    card: dict[str, Any] | None = None
    card_hash: str | None = None
    metadata: dict[str, Any] = field(default_factory=dict)

    @property
    def amount_decimal(self) -> str:
        """Valor formatado com 2 casas (ex: '12.34')."""
        return f"{self.amount_cents / 100:.2f}"


@dataclass(frozen=True, slots=True)
class ProviderResult:
    """Resultado normalizado de uma chamada a provedor.

    success=False representa recusa de negócio; falhas de transporte
    levantam ProviderTransportError e nunca chegam aqui.
    """

    success: bool
    status: TransactionStatus
    provider: str
    provider_reference: str | None = None
    raw: Any = None
    error: Any = None


@dataclass(frozen=True, slots=True)
class WebhookUpdate:
    """Atualização extraída de um webhook de provedor.

    requires_lookup=True indica notificação sem status (ex: MercadoPago);
    o status é buscado no provedor via confirm(provider_reference).
    """

    provider: str
    raw_status: str | None = None
    transaction_id: str | None = None
    provider_reference: str | None = None
    payload: Any = None
    requires_lookup: bool = False


@dataclass(frozen=True, slots=True)
class Reservation:
    """Resultado da reserva de uma chave de idempotência."""

    transaction_id: str
    replayed: bool


@dataclass(frozen=True, slots=True)
class TransactionFilter:
    """Filtros de listagem (todos opcionais, combinados com AND)."""

    status: str | None = None
    method: str | None = None
    provider: str | None = None
    customer_id: str | None = None
    created_from: datetime | None = None
    created_to: datetime | None = None
