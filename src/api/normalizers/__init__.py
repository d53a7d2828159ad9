"""Normalizers por provedor: conversão de webhooks externos para WebhookUpdate.

Estrutura:
- payment_shared/: leitura tolerante de campos comum aos provedores
- woovi/, infinitepay/, mercadopago/: webhooks dos gateways
- pix/: webhook PIX genérico ({providerReference, event})

Cada provedor tem seu próprio extractor; o mapeamento de status fica
em app.domain.status_vocabulary.
"""

from .infinitepay import extract_infinitepay_update
from .mercadopago import extract_mercadopago_update
from .pix import PIX_EVENTS, extract_pix_update
from .woovi import extract_woovi_update

WEBHOOK_EXTRACTORS = {
    "woovi": extract_woovi_update,
    "infinitepay": extract_infinitepay_update,
    "mercadopago": extract_mercadopago_update,
    "pix": extract_pix_update,
}

__all__ = [
    "PIX_EVENTS",
    "WEBHOOK_EXTRACTORS",
    "extract_infinitepay_update",
    "extract_mercadopago_update",
    "extract_pix_update",
    "extract_woovi_update",
]
