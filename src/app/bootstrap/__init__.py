"""Bootstrap da aplicação — inicialização e wiring.

Este módulo é o composition root: configura logging, valida settings e
conecta implementações concretas (stores, adapters) aos protocolos.

Uso:
    from app.bootstrap import initialize_app, get_payment_services

    # Na inicialização do serviço
    initialize_app()

    services = get_payment_services()
"""

from __future__ import annotations

import logging
import os
from functools import lru_cache
from typing import TYPE_CHECKING

from app.observability import get_correlation_id
from config.logging import configure_logging
from config.settings import (
    get_base_settings,
    get_idempotency_settings,
    get_ledger_settings,
    get_payment_settings,
    get_pix_settings,
    get_provider_settings,
    get_webhook_settings,
)

if TYPE_CHECKING:
    from app.bootstrap.dependencies_services import PaymentServices

DEFAULT_LOG_LEVEL = "INFO"
STRICT_VALIDATION_ENVS = {"staging", "production"}

logger = logging.getLogger(__name__)


def initialize_app() -> None:
    """Configura logging JSON estruturado com correlation_id.

    Deve ser chamada uma vez no início do serviço.
    """
    log_level = os.getenv("LOG_LEVEL", DEFAULT_LOG_LEVEL).upper()

    configure_logging(
        level=log_level,
        service_name=get_base_settings().service_name,
        correlation_id_getter=get_correlation_id,
    )


def collect_settings_errors() -> list[str]:
    """Erros de validação de todas as settings, prefixados pelo grupo."""
    base = get_base_settings()
    payments = get_payment_settings()
    errors: list[str] = []
    errors.extend(f"base: {error}" for error in base.validate())
    errors.extend(f"idempotency: {error}" for error in get_idempotency_settings().validate(base))
    errors.extend(f"ledger: {error}" for error in get_ledger_settings().validate(base))
    errors.extend(f"payments: {error}" for error in payments.validate())
    if not payments.sandbox:
        errors.extend(f"pix: {error}" for error in get_pix_settings().validate())
    errors.extend(
        f"providers: {error}"
        for error in get_provider_settings().validate(
            payments.default_card_provider,
            sandbox=payments.sandbox,
        )
    )
    errors.extend(f"webhooks: {error}" for error in get_webhook_settings().validate(base))
    return errors


def validate_runtime_settings() -> None:
    """Valida settings obrigatórias no startup.

    Em `staging`/`production` falha rápido para impedir boot inválido.
    Em `development`/`test` mantém alerta sem bloquear execução local.

    Raises:
        RuntimeError: configuração inválida em ambiente estrito
    """
    environment = get_base_settings().environment
    strict_mode = environment in STRICT_VALIDATION_ENVS
    errors = collect_settings_errors()

    if not errors:
        logger.info(
            "settings_validated",
            extra={"component": "bootstrap", "result": "ok", "environment": environment},
        )
        return

    logger.warning(
        "settings_validation_failed",
        extra={
            "component": "bootstrap",
            "result": "failed",
            "environment": environment,
            "error_count": len(errors),
            "errors": errors,
        },
    )
    if strict_mode:
        details = "\n".join(f"- {error}" for error in errors)
        raise RuntimeError(f"Configuração inválida para {environment}:\n{details}")


# ──────────────────────────────────────────────────────────────────────────────
# Service Getters (lazy initialization com cache)
# ──────────────────────────────────────────────────────────────────────────────


@lru_cache(maxsize=1)
def get_payment_services() -> PaymentServices:
    """Obtém o container de use cases (singleton)."""
    from app.bootstrap.dependencies_services import create_payment_services

    return create_payment_services()
