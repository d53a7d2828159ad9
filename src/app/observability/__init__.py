"""Observabilidade — correlation_id e métricas como logs estruturados.

Uso:
    from app.observability import get_correlation_id, set_correlation_id
    from app.observability import record_latency, record_provider_call
"""

from app.observability.correlation import (
    CORRELATION_HEADER,
    generate_correlation_id,
    get_correlation_id,
    reset_correlation_id,
    sanitize_correlation_id,
    set_correlation_id,
)
from app.observability.metrics import (
    elapsed_ms,
    record_latency,
    record_provider_call,
    record_webhook_outcome,
)

__all__ = [
    "CORRELATION_HEADER",
    "elapsed_ms",
    "generate_correlation_id",
    "get_correlation_id",
    "record_latency",
    "record_provider_call",
    "record_webhook_outcome",
    "reset_correlation_id",
    "sanitize_correlation_id",
    "set_correlation_id",
]
