"""Settings de webhooks de provedores.

Secrets vazios desativam a verificação de assinatura daquele provedor
(aceito apenas em development/test; logado como warning).
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from typing import TYPE_CHECKING, Literal

if TYPE_CHECKING:
    from config.settings.base.core import BaseSettings

WebhookDedupeBackend = Literal["memory", "redis"]


@dataclass(frozen=True)
class WebhookSettings:
    """Configurações de webhooks.

    Attributes:
        pix_secret: Secret HMAC do webhook PIX genérico
        woovi_secret: Secret HMAC da Woovi
        mercadopago_secret: Secret HMAC do MercadoPago
        infinitepay_secret: Secret HMAC da InfinitePay
        require_timestamp: Exige header de timestamp
        tolerance_seconds: Janela aceita para o timestamp
        dedupe_deliveries: Descarta reentregas pelo id da entrega
        dedupe_backend: Backend do dedupe (memory|redis)
        dedupe_ttl_seconds: TTL das chaves de entrega
    """

    pix_secret: str = ""
    woovi_secret: str = ""
    mercadopago_secret: str = ""
    infinitepay_secret: str = ""
    require_timestamp: bool = False
    tolerance_seconds: int = 300
    dedupe_deliveries: bool = False
    dedupe_backend: WebhookDedupeBackend = "memory"
    dedupe_ttl_seconds: int = 86400

    def secret_for(self, provider: str) -> str:
        return {
            "pix": self.pix_secret,
            "woovi": self.woovi_secret,
            "mercadopago": self.mercadopago_secret,
            "infinitepay": self.infinitepay_secret,
        }.get(provider, "")

    def validate(self, base: BaseSettings) -> list[str]:
        errors: list[str] = []

        if self.tolerance_seconds < 0:
            errors.append("WEBHOOK_TOLERANCE_SECONDS deve ser >= 0")

        if self.dedupe_backend not in {"memory", "redis"}:
            errors.append(f"WEBHOOK_DEDUPE_BACKEND inválido: {self.dedupe_backend}")

        if self.dedupe_deliveries and self.dedupe_backend == "redis" and not base.redis_url:
            errors.append("WEBHOOK_DEDUPE_BACKEND=redis requer REDIS_URL configurado")

        if self.dedupe_deliveries and self.dedupe_backend == "memory" and not base.is_local:
            errors.append("WEBHOOK_DEDUPE_BACKEND=memory proibido em staging/production")

        if self.dedupe_ttl_seconds <= 0:
            errors.append("WEBHOOK_DEDUPE_TTL_SECONDS deve ser > 0")

        if not base.is_local and not (self.pix_secret and self.woovi_secret):
            errors.append("PIX_WEBHOOK_SECRET e WOOVI_WEBHOOK_SECRET são obrigatórios fora de dev/test")

        return errors


def _parse_bool(value: str) -> bool:
    return value.strip().lower() in {"1", "true", "yes", "on"}


def _load_webhooks_from_env() -> WebhookSettings:
    """Carrega WebhookSettings de variáveis de ambiente."""
    backend_str = os.getenv("WEBHOOK_DEDUPE_BACKEND", "memory").lower()
    backend: WebhookDedupeBackend = backend_str if backend_str in ("memory", "redis") else "memory"
    return WebhookSettings(
        pix_secret=os.getenv("PIX_WEBHOOK_SECRET", ""),
        woovi_secret=os.getenv("WOOVI_WEBHOOK_SECRET", ""),
        mercadopago_secret=os.getenv("MERCADOPAGO_WEBHOOK_SECRET", ""),
        infinitepay_secret=os.getenv("INFINITEPAY_WEBHOOK_SECRET", ""),
        require_timestamp=_parse_bool(os.getenv("WEBHOOK_REQUIRE_TIMESTAMP", "false")),
        tolerance_seconds=int(os.getenv("WEBHOOK_TOLERANCE_SECONDS", "300")),
        dedupe_deliveries=_parse_bool(os.getenv("WEBHOOK_DEDUPE_DELIVERIES", "false")),
        dedupe_backend=backend,
        dedupe_ttl_seconds=int(os.getenv("WEBHOOK_DEDUPE_TTL_SECONDS", "86400")),
    )


@lru_cache(maxsize=1)
def get_webhook_settings() -> WebhookSettings:
    """Retorna instância cacheada de WebhookSettings."""
    return _load_webhooks_from_env()


__all__ = ["WebhookDedupeBackend", "WebhookSettings", "get_webhook_settings"]
