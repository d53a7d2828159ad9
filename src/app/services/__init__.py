"""Serviços de aplicação.

Unidades reutilizáveis de orquestração (sem IO direto).
Implementações concretas de IO ficam em app/infra/ e api/connectors/.
"""

from app.services.idempotency_guard import IdempotencyGuard
from app.services.provider_registry import ProviderRegistry
from app.services.provider_router import ProviderRouter, RoutingDecision

__all__ = [
    "IdempotencyGuard",
    "ProviderRegistry",
    "ProviderRouter",
    "RoutingDecision",
]
