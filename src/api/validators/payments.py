"""Validação dos payloads HTTP de pagamento.

Modelos pydantic com coerção tolerante (strings numéricas, aliases de
booleano) e mensagens estáveis em pt-BR. Qualquer falha vira
`InvalidRequestError` (400) antes de qualquer efeito colateral.
"""

from __future__ import annotations

import re
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator, model_validator

from app.domain.transaction import MAX_AMOUNT_CENTS
from app.use_cases.payments import PaymentIntent
from utils.errors import InvalidMethodError, InvalidRequestError

_CURRENCY_RE = re.compile(r"^[A-Z]{3}$")
_TRUE_VALUES = frozenset({"true", "1", "yes", "y", "on"})
_FALSE_VALUES = frozenset({"false", "0", "no", "n", "off"})
_REQUIRED_CARD_FIELDS = ("number", "exp_month", "exp_year", "cvv")
SUPPORTED_METHODS = ("pix", "card")


def _is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def parse_amount_cents(value: Any) -> int:
    """Centavos como inteiro positivo (aceita string numérica)."""
    if isinstance(value, bool):
        raise ValueError('Campo "amount_cents" deve ser inteiro positivo.')
    try:
        cents = Decimal(str(value).strip())
    except InvalidOperation as exc:
        raise ValueError('Campo "amount_cents" deve ser inteiro positivo.') from exc
    if not cents.is_finite() or cents <= 0 or cents != cents.to_integral_value():
        raise ValueError('Campo "amount_cents" deve ser inteiro positivo.')
    if cents > MAX_AMOUNT_CENTS:
        raise ValueError('Campo "amount_cents" excede o valor máximo permitido.')
    return int(cents)


def parse_amount(value: Any) -> int:
    """Valor decimal positivo convertido em centavos (arredondado)."""
    if isinstance(value, bool) or _is_blank(value):
        raise ValueError('Campo "amount" deve ser numero positivo.')
    try:
        amount = Decimal(str(value).strip())
    except InvalidOperation as exc:
        raise ValueError('Campo "amount" deve ser numero positivo.') from exc
    if not amount.is_finite() or amount <= 0:
        raise ValueError('Campo "amount" deve ser numero positivo.')
    if amount * 100 > MAX_AMOUNT_CENTS:
        raise ValueError('Campo "amount" excede o valor máximo permitido.')
    cents = int((amount * 100).quantize(Decimal("1"), rounding=ROUND_HALF_UP))
    if cents <= 0:
        raise ValueError('Campo "amount" deve ser numero positivo.')
    return cents


def resolve_amount_cents(amount: Any, amount_cents: Any) -> int:
    """`amount_cents` tem precedência sobre `amount`."""
    if not _is_blank(amount_cents):
        return parse_amount_cents(amount_cents)
    return parse_amount(amount)


def parse_capture(value: Any) -> bool:
    if _is_blank(value):
        return True
    if isinstance(value, bool):
        return value
    normalized = str(value).strip().lower()
    if normalized in _TRUE_VALUES:
        return True
    if normalized in _FALSE_VALUES:
        return False
    raise ValueError('Campo "capture" deve ser booleano.')


def _first_error_message(exc: ValidationError) -> str:
    errors = exc.errors()
    if not errors:
        return "Payload inválido."
    error = errors[0]
    ctx_error = (error.get("ctx") or {}).get("error")
    if isinstance(ctx_error, ValueError):
        return str(ctx_error)
    location = ".".join(str(part) for part in error.get("loc", ()))
    message = str(error.get("msg", "valor inválido"))
    return f'Campo "{location}": {message}' if location else message


class PaymentCreateRequest(BaseModel):
    """Corpo de POST /payments (e variantes por método)."""

    model_config = ConfigDict(extra="ignore")

    method: str
    amount_cents: int
    currency: str = "BRL"
    capture: bool = True
    customer: dict[str, Any] | None = None
    card: dict[str, Any] | None = None
    card_hash: str | None = None
    metadata: dict[str, Any] = Field(default_factory=dict)
    provider: str | None = None

    @model_validator(mode="before")
    @classmethod
    def _coerce(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            raise ValueError("Corpo da requisição deve ser um objeto JSON.")
        values = dict(data)

        method = str(values.get("method") or "").strip().lower()
        if not method:
            raise ValueError('Campo "method" e obrigatorio.')
        values["method"] = method

        values["amount_cents"] = resolve_amount_cents(values.get("amount"), values.get("amount_cents"))
        values.pop("amount", None)

        values["capture"] = parse_capture(values.get("capture"))

        for name in ("metadata", "customer"):
            raw = values.get(name)
            if raw is not None and not isinstance(raw, dict):
                raise ValueError(f'Campo "{name}" deve ser um objeto.')
        if values.get("metadata") is None:
            values["metadata"] = {}
        if _is_blank(values.get("card_hash")):
            values["card_hash"] = None
        if _is_blank(values.get("provider")):
            values["provider"] = None
        return values

    @field_validator("currency", mode="before")
    @classmethod
    def _normalize_currency(cls, value: Any) -> str:
        if _is_blank(value):
            return "BRL"
        currency = str(value).strip().upper()
        if not _CURRENCY_RE.match(currency):
            raise ValueError('Campo "currency" deve seguir o padrao ISO 4217 (ex: BRL).')
        return currency

    @field_validator("customer")
    @classmethod
    def _normalize_customer(cls, value: dict[str, Any] | None) -> dict[str, Any] | None:
        if not value:
            return None
        customer = dict(value)
        if customer.get("id"):
            customer["id"] = str(customer["id"]).strip()
        if customer.get("email"):
            customer["email"] = str(customer["email"]).strip().lower()
        return customer

    @model_validator(mode="after")
    def _check_card(self) -> PaymentCreateRequest:
        if self.method != "card" or self.card_hash:
            return self
        if not isinstance(self.card, dict):
            raise ValueError('Campo "card" obrigatorio quando "card_hash" nao informado.')
        if any(not self.card.get(name) for name in _REQUIRED_CARD_FIELDS):
            raise ValueError('Campos obrigatorios do cartao: "number", "exp_month", "exp_year", "cvv".')
        return self

    def to_intent(
        self,
        idempotency_key: str | None = None,
        *,
        operation_mode: str | None = None,
    ) -> PaymentIntent:
        """Converte em PaymentIntent; `operation_mode` só preenche metadata ausente."""
        metadata = dict(self.metadata)
        if operation_mode and operation_mode.strip() and not metadata.get("operation_mode"):
            metadata["operation_mode"] = operation_mode.strip()
        return PaymentIntent(
            method=self.method,
            amount_cents=self.amount_cents,
            currency=self.currency,
            capture=self.capture,
            customer=self.customer,
            card=self.card,
            card_hash=self.card_hash,
            metadata=metadata,
            provider=self.provider.strip().lower() if self.provider else None,
            idempotency_key=idempotency_key,
        )


class RefundRequest(BaseModel):
    """Corpo opcional de POST /payments/{id}/refund."""

    model_config = ConfigDict(extra="ignore")

    amount_cents: int | None = None

    @model_validator(mode="before")
    @classmethod
    def _coerce(cls, data: Any) -> Any:
        if data is None:
            return {}
        if not isinstance(data, dict):
            raise ValueError("Corpo da requisição deve ser um objeto JSON.")
        amount, amount_cents = data.get("amount"), data.get("amount_cents")
        if _is_blank(amount) and _is_blank(amount_cents):
            return {"amount_cents": None}
        return {"amount_cents": resolve_amount_cents(amount, amount_cents)}


class MetadataPatchRequest(BaseModel):
    """Corpo de PATCH /payments/{id}/metadata."""

    model_config = ConfigDict(extra="ignore")

    metadata: dict[str, Any]

    @model_validator(mode="before")
    @classmethod
    def _check_object(cls, data: Any) -> Any:
        if not isinstance(data, dict) or not isinstance(data.get("metadata"), dict):
            raise ValueError('Campo "metadata" deve ser um objeto.')
        return data


# ──────────────────────────────────────────────────────────────────────────────
# Entrypoints usados pelas rotas
# ──────────────────────────────────────────────────────────────────────────────


def parse_payment_request(body: Any, method_override: str | None = None) -> PaymentCreateRequest:
    """Valida o corpo de criação; `method_override` vem da rota /pix ou /card.

    Raises:
        InvalidMethodError: método diferente de pix/card
        InvalidRequestError: qualquer outro campo inválido
    """
    if method_override is not None:
        body = {**body, "method": method_override} if isinstance(body, dict) else body
    if isinstance(body, dict):
        method = str(body.get("method") or "").strip().lower()
        if method and method not in SUPPORTED_METHODS:
            msg = 'Metodo invalido. Use "pix" ou "card".'
            raise InvalidMethodError(msg)
    try:
        return PaymentCreateRequest.model_validate(body)
    except ValidationError as exc:
        raise InvalidRequestError(_first_error_message(exc)) from exc


def parse_refund_request(body: Any) -> RefundRequest:
    try:
        return RefundRequest.model_validate(body)
    except ValidationError as exc:
        raise InvalidRequestError(_first_error_message(exc)) from exc


def parse_metadata_patch(body: Any) -> MetadataPatchRequest:
    try:
        return MetadataPatchRequest.model_validate(body)
    except ValidationError as exc:
        raise InvalidRequestError(_first_error_message(exc)) from exc
