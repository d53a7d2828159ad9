"""Agregador de settings do core de pagamentos.

Re-exporta todas as settings e funções de cada módulo.
Organização por domínio para isolamento de mudanças.
"""

from __future__ import annotations

# Base settings
from config.settings.base import (
    DEFAULT_SERVICE_NAME,
    BaseSettings,
    Environment,
    IdempotencyBackend,
    IdempotencySettings,
    get_base_settings,
    get_idempotency_settings,
)

# Ledger
from config.settings.ledger import (
    LedgerBackend,
    LedgerSettings,
    get_ledger_settings,
)

# Pagamentos e provedores
from config.settings.payments import (
    DEFAULT_HOSTED_CHECKOUT_PAY_TAGS,
    PaymentSettings,
    get_payment_settings,
)
from config.settings.pix import PixSettings, get_pix_settings
from config.settings.providers import ProviderSettings, get_provider_settings

# Webhooks
from config.settings.webhooks import (
    WebhookDedupeBackend,
    WebhookSettings,
    get_webhook_settings,
)

ALL_SETTINGS_GETTERS = (
    get_base_settings,
    get_idempotency_settings,
    get_ledger_settings,
    get_payment_settings,
    get_pix_settings,
    get_provider_settings,
    get_webhook_settings,
)


def clear_settings_cache() -> None:
    """Limpa o cache de todas as settings (testes com monkeypatch de env)."""
    for getter in ALL_SETTINGS_GETTERS:
        getter.cache_clear()


__all__ = [
    # Constants
    "DEFAULT_HOSTED_CHECKOUT_PAY_TAGS",
    "DEFAULT_SERVICE_NAME",
    # Types
    "BaseSettings",
    "Environment",
    "IdempotencyBackend",
    "IdempotencySettings",
    "LedgerBackend",
    "LedgerSettings",
    "PaymentSettings",
    "PixSettings",
    "ProviderSettings",
    "WebhookDedupeBackend",
    "WebhookSettings",
    # Getters
    "clear_settings_cache",
    "get_base_settings",
    "get_idempotency_settings",
    "get_ledger_settings",
    "get_payment_settings",
    "get_pix_settings",
    "get_provider_settings",
    "get_webhook_settings",
]
