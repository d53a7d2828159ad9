"""Settings de roteamento e execução de pagamentos."""

from __future__ import annotations

import os
import re
from dataclasses import dataclass, field
from functools import lru_cache

DEFAULT_HOSTED_CHECKOUT_PAY_TAGS: tuple[str, ...] = ("anne-tom", "annetom", "axion-pdv", "axionpdv")
KNOWN_CARD_PROVIDERS = frozenset({"woovi", "mercadopago", "infinitepay", "mock"})

_CURRENCY_RE = re.compile(r"^[A-Z]{3}$")


@dataclass(frozen=True)
class PaymentSettings:
    """Configurações de pagamentos.

    Attributes:
        sandbox: Ambiente sandbox (roteia para o mock)
        default_card_provider: Provedor de cartão em modo white
        hosted_checkout_pay_tags: Pay tags roteadas ao checkout hospedado
        provider_timeout_seconds: Timeout de cada chamada a provedor
        default_currency: Moeda padrão (ISO 4217)
    """

    sandbox: bool = False
    default_card_provider: str = "woovi"
    hosted_checkout_pay_tags: tuple[str, ...] = field(default=DEFAULT_HOSTED_CHECKOUT_PAY_TAGS)
    provider_timeout_seconds: float = 10.0
    default_currency: str = "BRL"

    def validate(self) -> list[str]:
        errors: list[str] = []

        if self.default_card_provider not in KNOWN_CARD_PROVIDERS:
            errors.append(f"DEFAULT_CARD_PROVIDER inválido: {self.default_card_provider}")

        if self.provider_timeout_seconds <= 0:
            errors.append("PROVIDER_TIMEOUT_SECONDS deve ser > 0")

        if not _CURRENCY_RE.match(self.default_currency):
            errors.append(f"DEFAULT_CURRENCY inválida: {self.default_currency}")

        return errors


def _parse_bool(value: str) -> bool:
    return value.strip().lower() in {"1", "true", "yes", "on"}


def _parse_csv(value: str | None, default: tuple[str, ...]) -> tuple[str, ...]:
    if value is None or not value.strip():
        return default
    return tuple(item.strip() for item in value.split(",") if item.strip())


def _load_payments_from_env() -> PaymentSettings:
    """Carrega PaymentSettings de variáveis de ambiente.

    Sem PAYMENTS_SANDBOX explícito, ENVIRONMENT=test liga o sandbox.
    """
    environment = os.getenv("ENVIRONMENT", "development").strip().lower()
    sandbox_default = "true" if environment in ("test", "testing") else "false"
    return PaymentSettings(
        sandbox=_parse_bool(os.getenv("PAYMENTS_SANDBOX", sandbox_default)),
        default_card_provider=os.getenv("DEFAULT_CARD_PROVIDER", "woovi").strip().lower(),
        hosted_checkout_pay_tags=_parse_csv(
            os.getenv("HOSTED_CHECKOUT_PAY_TAGS"),
            DEFAULT_HOSTED_CHECKOUT_PAY_TAGS,
        ),
        provider_timeout_seconds=float(os.getenv("PROVIDER_TIMEOUT_SECONDS", "10")),
        default_currency=os.getenv("DEFAULT_CURRENCY", "BRL").strip().upper(),
    )


@lru_cache(maxsize=1)
def get_payment_settings() -> PaymentSettings:
    """Retorna instância cacheada de PaymentSettings."""
    return _load_payments_from_env()


__all__ = ["DEFAULT_HOSTED_CHECKOUT_PAY_TAGS", "PaymentSettings", "get_payment_settings"]
