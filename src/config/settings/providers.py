"""Settings dos provedores de pagamento (credenciais e URLs).

Credenciais vêm de env (Secret Manager no Cloud Run). Adapter sem
credencial continua registrado e reporta falha de negócio ao ser usado.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache

MERCADOPAGO_BASE_URL = "https://api.mercadopago.com"
WOOVI_BASE_URL = "https://api.woovi-sandbox.com"
INFINITEPAY_CHECKOUT_URL = "https://api.infinitepay.io/invoices/public/checkout/links"


@dataclass(frozen=True)
class ProviderSettings:
    """Configurações dos gateways.

    Attributes:
        mercadopago_access_token: Token Bearer do MercadoPago
        mercadopago_base_url: URL base do MercadoPago
        infinitepay_handle: Handle (InfiniteTag) do merchant
        infinitepay_checkout_url: Endpoint de criação de links de checkout
        infinitepay_webhook_url: URL pública do webhook enviada no link
        infinitepay_redirect_url: URL de retorno após o pagamento
        woovi_api_key: Chave da API Woovi (AppID)
        woovi_base_url: URL base da Woovi
        woovi_pix_path: Endpoint de cobrança PIX
        woovi_card_path: Endpoint de cartão (vazio desabilita)
        woovi_pix_confirm_path: Endpoint de confirmação PIX (vazio desabilita)
        woovi_auth_header: Authorization explícito (sobrepõe a api key)
    """

    mercadopago_access_token: str = ""
    mercadopago_base_url: str = MERCADOPAGO_BASE_URL

    infinitepay_handle: str = ""
    infinitepay_checkout_url: str = INFINITEPAY_CHECKOUT_URL
    infinitepay_webhook_url: str = ""
    infinitepay_redirect_url: str = ""

    woovi_api_key: str = ""
    woovi_base_url: str = WOOVI_BASE_URL
    woovi_pix_path: str = "/api/v1/charge"
    woovi_card_path: str = ""
    woovi_pix_confirm_path: str = ""
    woovi_auth_header: str = ""

    def validate(self, default_card_provider: str, *, sandbox: bool) -> list[str]:
        """Exige credencial do provedor de cartão padrão fora do sandbox."""
        errors: list[str] = []
        if sandbox:
            return errors

        if default_card_provider == "woovi" and not (self.woovi_api_key or self.woovi_auth_header):
            errors.append("DEFAULT_CARD_PROVIDER=woovi requer WOOVI_API_KEY")
        if default_card_provider == "mercadopago" and not self.mercadopago_access_token:
            errors.append("DEFAULT_CARD_PROVIDER=mercadopago requer MERCADOPAGO_ACCESS_TOKEN")
        if default_card_provider == "infinitepay" and not self.infinitepay_handle:
            errors.append("DEFAULT_CARD_PROVIDER=infinitepay requer INFINITEPAY_HANDLE")

        return errors


def _load_providers_from_env() -> ProviderSettings:
    """Carrega ProviderSettings de variáveis de ambiente."""
    return ProviderSettings(
        mercadopago_access_token=os.getenv("MERCADOPAGO_ACCESS_TOKEN", ""),
        mercadopago_base_url=os.getenv("MERCADOPAGO_BASE_URL", MERCADOPAGO_BASE_URL),
        infinitepay_handle=os.getenv("INFINITEPAY_HANDLE", ""),
        infinitepay_checkout_url=os.getenv("INFINITEPAY_CHECKOUT_URL", INFINITEPAY_CHECKOUT_URL),
        infinitepay_webhook_url=os.getenv("INFINITEPAY_WEBHOOK_URL", ""),
        infinitepay_redirect_url=os.getenv("INFINITEPAY_REDIRECT_URL", ""),
        woovi_api_key=os.getenv("WOOVI_API_KEY", ""),
        woovi_base_url=os.getenv("WOOVI_BASE_URL", WOOVI_BASE_URL),
        woovi_pix_path=os.getenv("WOOVI_PIX_PATH", "/api/v1/charge"),
        woovi_card_path=os.getenv("WOOVI_CARD_PATH", ""),
        woovi_pix_confirm_path=os.getenv("WOOVI_PIX_CONFIRM_PATH", ""),
        woovi_auth_header=os.getenv("WOOVI_AUTH_HEADER", ""),
    )


@lru_cache(maxsize=1)
def get_provider_settings() -> ProviderSettings:
    """Retorna instância cacheada de ProviderSettings."""
    return _load_providers_from_env()


__all__ = ["ProviderSettings", "get_provider_settings"]
