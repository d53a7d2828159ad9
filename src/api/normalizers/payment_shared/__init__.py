"""Utilitários comuns aos extractors de webhooks de pagamento."""

from .fields import as_dict, first_present, optional_str

__all__ = ["as_dict", "first_present", "optional_str"]
