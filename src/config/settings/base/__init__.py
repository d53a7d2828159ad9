"""Agregador de settings base.

Re-exporta todas as settings base para uso externo.
"""

from __future__ import annotations

from config.settings.base.core import (
    DEFAULT_SERVICE_NAME,
    BaseSettings,
    Environment,
    get_base_settings,
)
from config.settings.base.idempotency import (
    IdempotencyBackend,
    IdempotencySettings,
    get_idempotency_settings,
)

__all__ = [
    "DEFAULT_SERVICE_NAME",
    # Core
    "BaseSettings",
    "Environment",
    # Idempotency
    "IdempotencyBackend",
    "IdempotencySettings",
    "get_base_settings",
    "get_idempotency_settings",
]
