"""Entrypoint da aplicação AxionPay Core.

Este módulo é o ponto de entrada principal do serviço.
Inicializa o bootstrap e expõe a aplicação ASGI (FastAPI).

Uso (produção):
    uvicorn app.app:app --host 0.0.0.0 --port 8080

Uso (desenvolvimento):
    uvicorn app.app:app --reload --host 0.0.0.0 --port 8080

Cloud Run:
    O container deve expor a porta 8080 (padrão do Cloud Run).
"""

from __future__ import annotations

import asyncio
from contextlib import asynccontextmanager
from datetime import UTC, datetime
from typing import TYPE_CHECKING

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from api.routes import create_api_router
from app.bootstrap import initialize_app, validate_runtime_settings
from app.bootstrap.clients import (
    create_async_redis_client,
    create_firestore_client,
    firestore_required,
    redis_required,
)
from app.observability import (
    CORRELATION_HEADER,
    get_correlation_id,
    reset_correlation_id,
    set_correlation_id,
)
from config.logging import get_logger
from config.settings import get_base_settings
from utils.errors import PaymentError

if TYPE_CHECKING:
    from collections.abc import AsyncGenerator, Awaitable, Callable

    from starlette.responses import Response

# Inicializar logging e dependências ANTES de qualquer import que use logger
initialize_app()

logger = get_logger(__name__)


async def _seed_firestore_health_doc(firestore_client: object, service_name: str) -> None:
    """Escreve documento mínimo de health para check de readiness."""

    def _write_doc() -> None:
        firestore_client.collection("_health").document("check").set(  # type: ignore[attr-defined]
            {
                "updated_at": datetime.now(UTC).isoformat(),
                "service": service_name,
            }
        )

    await asyncio.to_thread(_write_doc)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Gerencia ciclo de vida da aplicação.

    Startup:
    - Valida configurações
    - Inicializa conexões usadas pelos backends (Redis, Firestore)

    Shutdown:
    - Fecha conexões gracefully
    """
    service_name = get_base_settings().service_name
    logger.info("app_starting", extra={"service": service_name})
    validate_runtime_settings()
    app.state.redis_client = None
    app.state.firestore_client = None

    if redis_required():
        try:
            app.state.redis_client = create_async_redis_client()
        except Exception as exc:
            logger.warning("redis_client_not_ready", extra={"error_type": type(exc).__name__})

    if firestore_required():
        try:
            app.state.firestore_client = create_firestore_client()
            await _seed_firestore_health_doc(app.state.firestore_client, service_name)
        except Exception as exc:
            logger.warning("firestore_client_not_ready", extra={"error_type": type(exc).__name__})

    yield

    logger.info("app_shutting_down", extra={"service": service_name})
    redis_client = getattr(app.state, "redis_client", None)
    if redis_client is not None:
        close_async = getattr(redis_client, "aclose", None)
        close_sync = getattr(redis_client, "close", None)
        if callable(close_async):
            await close_async()
        elif callable(close_sync):
            await close_sync()


# ──────────────────────────────────────────────────────────────────────────────
# Middleware e exception handlers
# ──────────────────────────────────────────────────────────────────────────────


async def correlation_middleware(
    request: Request,
    call_next: Callable[[Request], Awaitable[Response]],
) -> Response:
    """Propaga X-Correlation-Id (recebido ou gerado) para logs e resposta."""
    token = set_correlation_id(request.headers.get(CORRELATION_HEADER))
    try:
        response = await call_next(request)
        response.headers[CORRELATION_HEADER] = get_correlation_id()
        return response
    finally:
        reset_correlation_id(token)


async def payment_error_handler(request: Request, exc: PaymentError) -> JSONResponse:
    logger.info(
        "request_rejected",
        extra={
            "path": request.url.path,
            "code": exc.code,
            "status_code": exc.status_code,
        },
    )
    return JSONResponse(content=exc.to_dict(), status_code=exc.status_code)


async def validation_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.info("request_validation_failed", extra={"path": request.url.path})
    return JSONResponse(
        content={"ok": False, "error": "Requisição inválida.", "code": "invalid_request"},
        status_code=400,
    )


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception(
        "request_failed",
        extra={"path": request.url.path, "error_type": type(exc).__name__},
    )
    return JSONResponse(
        content={"ok": False, "error": "Erro interno.", "code": "internal_error"},
        status_code=500,
    )


def create_app() -> FastAPI:
    """Cria e configura a aplicação FastAPI.

    Returns:
        Aplicação FastAPI configurada.
    """
    fastapi_app = FastAPI(
        title="AxionPay Core",
        description="Orquestração de pagamentos PIX e cartão",
        version="1.0.0",
        lifespan=lifespan,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
    )

    fastapi_app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["Location", "Idempotency-Status", CORRELATION_HEADER],
    )
    fastapi_app.middleware("http")(correlation_middleware)

    fastapi_app.add_exception_handler(PaymentError, payment_error_handler)
    fastapi_app.add_exception_handler(RequestValidationError, validation_error_handler)
    fastapi_app.add_exception_handler(Exception, unhandled_error_handler)

    # Registra todas as rotas
    fastapi_app.include_router(create_api_router())

    logger.info("app_configured", extra={"service": get_base_settings().service_name})

    return fastapi_app


# Aplicação ASGI exposta para uvicorn
app = create_app()


def main() -> None:
    """Entrypoint para execução direta (desenvolvimento)."""
    import uvicorn

    logger.info("Starting AxionPay Core in development mode")
    uvicorn.run(
        "app.app:app",
        host="0.0.0.0",
        port=8080,
        reload=True,
    )


if __name__ == "__main__":
    main()
