"""Endpoints de pagamentos.

Endpoints:
- POST /payments, /payments/pix, /payments/card: criação (Idempotency-Key opcional)
- GET /payments: listagem com filtros e paginação
- GET /payments/stats, /status/{status}, /method/{method}, /provider/{ref}
- GET /payments/{id}, /payments/{id}/events
- POST /payments/{id}/confirm|capture|cancel|refund
- PATCH /payments/{id}/metadata

Respostas seguem `{"ok": true, ...}`; erros são convertidos pelos
exception handlers registrados em `app.app`.
"""

from __future__ import annotations

import json
import logging
from datetime import UTC, datetime
from typing import Any

from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import JSONResponse

from api.validators import parse_metadata_patch, parse_payment_request, parse_refund_request
from app.bootstrap import get_payment_services
from app.bootstrap.dependencies_services import PaymentServices
from app.protocols.models import TransactionFilter
from app.use_cases.payments import MAX_PAGE_LIMIT
from utils.errors import InvalidRequestError

logger = logging.getLogger(__name__)

router = APIRouter()

IDEMPOTENCY_KEY_HEADER = "Idempotency-Key"
IDEMPOTENCY_STATUS_HEADER = "Idempotency-Status"
OPERATION_MODE_HEADER = "X-Axion-Mode"
DEFAULT_LIMIT = 50


# ──────────────────────────────────────────────────────────────────────────────
# Helpers HTTP
# ──────────────────────────────────────────────────────────────────────────────


async def _read_json(request: Request, *, optional: bool = False) -> Any:
    raw = await request.body()
    if not raw.strip():
        if optional:
            return None
        msg = "Corpo da requisição deve ser um objeto JSON."
        raise InvalidRequestError(msg)
    try:
        return json.loads(raw)
    except (json.JSONDecodeError, UnicodeDecodeError) as exc:
        msg = "JSON inválido no corpo da requisição."
        raise InvalidRequestError(msg) from exc


def get_idempotency_key(request: Request) -> str | None:
    value = request.headers.get(IDEMPOTENCY_KEY_HEADER)
    if value is None:
        return None
    value = value.strip()
    return value or None


def parse_pagination(limit: str | None, offset: str | None) -> tuple[int, int]:
    """Valores inválidos caem nos defaults (50, 0); limit é limitado a 200."""
    parsed_limit = _to_int(limit)
    if parsed_limit is None or parsed_limit <= 0:
        parsed_limit = DEFAULT_LIMIT
    parsed_offset = _to_int(offset)
    if parsed_offset is None or parsed_offset < 0:
        parsed_offset = 0
    return min(parsed_limit, MAX_PAGE_LIMIT), parsed_offset


def _to_int(value: str | None) -> int | None:
    if value is None:
        return None
    try:
        return int(float(value))
    except (TypeError, ValueError, OverflowError):
        return None


def _parse_datetime(value: str | None, field_name: str) -> datetime | None:
    if not value:
        return None
    try:
        parsed = datetime.fromisoformat(value.strip().replace("Z", "+00:00"))
    except ValueError as exc:
        msg = f'Campo "{field_name}" deve ser uma data ISO 8601.'
        raise InvalidRequestError(msg) from exc
    # Datas sem fuso são comparadas como UTC
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=UTC)
    return parsed


def _lower(value: str | None) -> str | None:
    return value.strip().lower() if value and value.strip() else None


def _transaction_response(
    transaction: Any,
    *,
    status_code: int = status.HTTP_200_OK,
    headers: dict[str, str] | None = None,
) -> JSONResponse:
    return JSONResponse(
        content={"ok": True, "transaction": transaction.to_dict()},
        status_code=status_code,
        headers=headers,
    )


async def _create(request: Request, services: PaymentServices, method_override: str | None) -> JSONResponse:
    body = await _read_json(request)
    payload = parse_payment_request(body, method_override)
    idempotency_key = get_idempotency_key(request)
    intent = payload.to_intent(
        idempotency_key,
        operation_mode=request.headers.get(OPERATION_MODE_HEADER),
    )

    result = await services.create_payment.execute(intent)
    transaction = result.transaction

    if result.replayed:
        logger.info(
            "payment_replayed",
            extra={"transaction_id": transaction.id, "method": str(transaction.method)},
        )
        return _transaction_response(transaction, headers={IDEMPOTENCY_STATUS_HEADER: "replayed"})

    headers = {"Location": f"/payments/{transaction.id}"}
    if idempotency_key:
        headers[IDEMPOTENCY_STATUS_HEADER] = "created"
    return _transaction_response(transaction, status_code=status.HTTP_201_CREATED, headers=headers)


# ──────────────────────────────────────────────────────────────────────────────
# Criação
# ──────────────────────────────────────────────────────────────────────────────


@router.post("")
async def create_payment(
    request: Request,
    services: PaymentServices = Depends(get_payment_services),
) -> JSONResponse:
    return await _create(request, services, None)


@router.post("/pix")
async def create_pix_payment(
    request: Request,
    services: PaymentServices = Depends(get_payment_services),
) -> JSONResponse:
    return await _create(request, services, "pix")


@router.post("/card")
async def create_card_payment(
    request: Request,
    services: PaymentServices = Depends(get_payment_services),
) -> JSONResponse:
    return await _create(request, services, "card")


# ──────────────────────────────────────────────────────────────────────────────
# Consultas (rotas estáticas antes de /{transaction_id})
# ──────────────────────────────────────────────────────────────────────────────


@router.get("")
async def list_payments(
    request: Request,
    services: PaymentServices = Depends(get_payment_services),
) -> dict[str, Any]:
    query = request.query_params
    limit, offset = parse_pagination(query.get("limit"), query.get("offset"))
    filters = TransactionFilter(
        status=_lower(query.get("status")),
        method=_lower(query.get("method")),
        provider=_lower(query.get("provider")),
        customer_id=(query.get("customer_id") or "").strip() or None,
        created_from=_parse_datetime(query.get("created_from"), "created_from"),
        created_to=_parse_datetime(query.get("created_to"), "created_to"),
    )
    page = await services.queries.list_transactions(filters, limit=limit, offset=offset)
    return {"ok": True, **page.to_dict()}


@router.get("/stats")
async def payment_stats(services: PaymentServices = Depends(get_payment_services)) -> dict[str, Any]:
    return {"ok": True, "stats": await services.queries.stats()}


@router.get("/status/{payment_status}")
async def list_payments_by_status(
    payment_status: str,
    request: Request,
    services: PaymentServices = Depends(get_payment_services),
) -> dict[str, Any]:
    limit, offset = parse_pagination(request.query_params.get("limit"), request.query_params.get("offset"))
    page = await services.queries.list_transactions(
        TransactionFilter(status=payment_status.strip().lower()),
        limit=limit,
        offset=offset,
    )
    return {"ok": True, **page.to_dict()}


@router.get("/method/{method}")
async def list_payments_by_method(
    method: str,
    request: Request,
    services: PaymentServices = Depends(get_payment_services),
) -> dict[str, Any]:
    limit, offset = parse_pagination(request.query_params.get("limit"), request.query_params.get("offset"))
    page = await services.queries.list_transactions(
        TransactionFilter(method=method.strip().lower()),
        limit=limit,
        offset=offset,
    )
    return {"ok": True, **page.to_dict()}


@router.get("/provider/{provider_reference}")
async def get_payment_by_provider_reference(
    provider_reference: str,
    services: PaymentServices = Depends(get_payment_services),
) -> JSONResponse:
    transaction = await services.queries.get_by_provider_reference(provider_reference)
    return _transaction_response(transaction)


@router.get("/{transaction_id}/events")
async def get_payment_events(
    transaction_id: str,
    services: PaymentServices = Depends(get_payment_services),
) -> dict[str, Any]:
    events = await services.queries.events(transaction_id)
    return {"ok": True, "events": [event.to_dict() for event in events]}


@router.get("/{transaction_id}")
async def get_payment(
    transaction_id: str,
    services: PaymentServices = Depends(get_payment_services),
) -> JSONResponse:
    transaction = await services.queries.get(transaction_id)
    return _transaction_response(transaction)


# ──────────────────────────────────────────────────────────────────────────────
# Ciclo de vida
# ──────────────────────────────────────────────────────────────────────────────


@router.post("/{transaction_id}/confirm")
async def confirm_payment(
    transaction_id: str,
    services: PaymentServices = Depends(get_payment_services),
) -> JSONResponse:
    return _transaction_response(await services.lifecycle.confirm(transaction_id))


@router.post("/{transaction_id}/capture")
async def capture_payment(
    transaction_id: str,
    services: PaymentServices = Depends(get_payment_services),
) -> JSONResponse:
    return _transaction_response(await services.lifecycle.capture(transaction_id))


@router.post("/{transaction_id}/cancel")
async def cancel_payment(
    transaction_id: str,
    services: PaymentServices = Depends(get_payment_services),
) -> JSONResponse:
    return _transaction_response(await services.lifecycle.cancel(transaction_id))


@router.post("/{transaction_id}/refund")
async def refund_payment(
    transaction_id: str,
    request: Request,
    services: PaymentServices = Depends(get_payment_services),
) -> JSONResponse:
    refund = parse_refund_request(await _read_json(request, optional=True))
    transaction = await services.lifecycle.refund(transaction_id, refund.amount_cents)
    return _transaction_response(transaction)


@router.patch("/{transaction_id}/metadata")
async def update_payment_metadata(
    transaction_id: str,
    request: Request,
    services: PaymentServices = Depends(get_payment_services),
) -> JSONResponse:
    patch = parse_metadata_patch(await _read_json(request, optional=True))
    transaction = await services.lifecycle.update_metadata(transaction_id, patch.metadata)
    return _transaction_response(transaction)
