"""Registro de métricas via structured logging.

As métricas são logs estruturados (`metric_type` no extra) agregados
depois pelo coletor de logs. Sem dependência de backend de métricas.

Métricas suportadas:
- Latência: tempo de execução por componente/operação
- Chamada de provedor: outcome e latência de charge/confirm por provedor
- Webhook: resultado da reconciliação por provedor

Uso:
    start = time.perf_counter()
    result = await adapter.charge(request)
    record_provider_call("mercadopago", "charge", "success", elapsed_ms(start))
"""

from __future__ import annotations

import logging
import time

from app.observability.correlation import get_correlation_id

logger = logging.getLogger(__name__)


def elapsed_ms(started: float) -> float:
    """Milissegundos desde `started` (time.perf_counter)."""
    return (time.perf_counter() - started) * 1000


def record_latency(
    component: str,
    operation: str,
    latency_ms: float,
    correlation_id: str | None = None,
) -> None:
    """Registra latência de operação.

    Args:
        component: Nome do componente (ex: "create_payment", "reconcile_webhook")
        operation: Nome da operação (ex: "execute", "charge")
        latency_ms: Latência em milissegundos
        correlation_id: ID de correlação (default: contexto atual)
    """
    logger.info(
        "metric_latency",
        extra={
            "metric_type": "latency",
            "component": component,
            "operation": operation,
            "latency_ms": round(latency_ms, 2),
            "correlation_id": correlation_id or get_correlation_id(),
        },
    )


def record_provider_call(
    provider: str,
    operation: str,
    outcome: str,
    latency_ms: float,
) -> None:
    """Registra chamada a provedor.

    Args:
        provider: Nome do adapter (ex: "woovi")
        operation: "charge" ou "confirm"
        outcome: "success", "declined", "transport_error" ou "timeout"
        latency_ms: Latência em milissegundos
    """
    logger.info(
        "metric_provider_call",
        extra={
            "metric_type": "provider_call",
            "provider": provider,
            "operation": operation,
            "outcome": outcome,
            "latency_ms": round(latency_ms, 2),
        },
    )


def record_webhook_outcome(provider: str, outcome: str) -> None:
    """Registra resultado de webhook (applied, ignored, not_found, duplicate, rejected)."""
    logger.info(
        "metric_webhook_outcome",
        extra={
            "metric_type": "webhook_outcome",
            "provider": provider,
            "outcome": outcome,
        },
    )
