"""Normalizer Woovi — extrai atualização de status do webhook."""

from .extractor import extract_woovi_update

__all__ = ["extract_woovi_update"]
