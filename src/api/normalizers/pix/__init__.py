"""Normalizer do webhook PIX genérico."""

from .extractor import PIX_EVENTS, extract_pix_update

__all__ = ["PIX_EVENTS", "extract_pix_update"]
