"""Normalizer InfinitePay — extrai atualização do webhook do checkout."""

from .extractor import extract_infinitepay_update

__all__ = ["extract_infinitepay_update"]
