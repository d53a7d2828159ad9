"""Connector MercadoPago."""

from .adapter import MercadoPagoAdapter

__all__ = ["MercadoPagoAdapter"]
