"""Normalizer MercadoPago — extrai notificação de pagamento."""

from .extractor import extract_mercadopago_update

__all__ = ["extract_mercadopago_update"]
