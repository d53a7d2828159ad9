"""Modelos de dominio do ledger de pagamentos.

Transaction e a raiz; TransactionEvent e IdempotencyRecord referenciam
a transacao por id. Os modelos sao serializados como dict simples para
os stores (memoria e Firestore).
"""

from __future__ import annotations

import uuid
from datetime import UTC, datetime
from enum import StrEnum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from fsm.states import TransactionStatus


class PaymentMethod(StrEnum):
    """Metodos de pagamento aceitos."""

    PIX = "pix"
    CARD = "card"

    def __str__(self) -> str:
        return self.value


def utcnow() -> datetime:
    return datetime.now(UTC)


def new_transaction_id() -> str:
    """Gera id opaco de transacao (nunca reutilizado)."""
    return f"tx_{uuid.uuid4().hex}"


def new_event_id() -> str:
    return f"evt_{uuid.uuid4().hex}"


# Teto por transação: R$ 1 bilhão
MAX_AMOUNT_CENTS = 100_000_000_000


def cents_to_amount(amount_cents: int) -> float:
    """Converte centavos no valor decimal exibido (2 casas)."""
    return round(amount_cents / 100, 2)


class Transaction(BaseModel):
    """Registro canonico de uma transacao de pagamento."""

    model_config = ConfigDict(extra="ignore")

    id: str = Field(..., description="Identificador opaco da transacao.")
    amount: float = Field(..., description="Valor em unidades decimais (exibicao).")
    amount_cents: int = Field(..., gt=0, le=MAX_AMOUNT_CENTS, description="Valor autoritativo em centavos.")
    currency: str = Field(default="BRL", description="Moeda ISO 4217.")
    method: PaymentMethod
    status: TransactionStatus = TransactionStatus.PENDING
    capture: bool = Field(default=True, description="Captura imediata (somente cartao).")
    customer: dict[str, Any] | None = None
    customer_id: str | None = None
    provider: str | None = None
    provider_reference: str | None = None
    method_details: dict[str, Any] | None = None
    metadata: dict[str, Any] = Field(default_factory=dict)
    idempotency_key: str | None = None
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)

    def to_dict(self) -> dict[str, Any]:
        """Representacao JSON-safe (wire da API e documento do store)."""
        return self.model_dump(mode="json")

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Transaction:
        return cls.model_validate(data)


class TransactionEvent(BaseModel):
    """Evento append-only associado a uma transacao."""

    model_config = ConfigDict(extra="ignore")

    id: str = Field(default_factory=new_event_id)
    transaction_id: str
    type: str
    payload: Any = None
    created_at: datetime = Field(default_factory=utcnow)

    def to_dict(self) -> dict[str, Any]:
        return self.model_dump(mode="json")

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> TransactionEvent:
        return cls.model_validate(data)


class IdempotencyRecord(BaseModel):
    """Vinculo imutavel chave de idempotencia → transacao."""

    model_config = ConfigDict(extra="ignore")

    key: str
    transaction_id: str
    created_at: datetime = Field(default_factory=utcnow)

    def to_dict(self) -> dict[str, Any]:
        return self.model_dump(mode="json")


__all__ = [
    "IdempotencyRecord",
    "PaymentMethod",
    "Transaction",
    "TransactionEvent",
    "cents_to_amount",
    "new_event_id",
    "new_transaction_id",
    "utcnow",
]
