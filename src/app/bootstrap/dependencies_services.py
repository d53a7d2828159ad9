"""Factories de serviços — registry de provedores, router e use cases."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from api.connectors.infinitepay import InfinitePayAdapter
from api.connectors.mercadopago import MercadoPagoAdapter
from api.connectors.mock import MockPaymentAdapter
from api.connectors.static_pix import StaticPixAdapter
from api.connectors.woovi import WooviAdapter
from app.bootstrap.dependencies import (
    create_idempotency_store,
    create_transaction_ledger,
    create_webhook_dedupe_store,
)
from app.services import IdempotencyGuard, ProviderRegistry, ProviderRouter
from app.use_cases.payments import (
    CreatePaymentUseCase,
    PaymentLifecycleUseCase,
    PaymentQueriesUseCase,
    ReconcileWebhookUseCase,
)
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
    from app.protocols.dedupe import AsyncDedupeProtocol
    from app.protocols.idempotency import IdempotencyStoreProtocol
    from app.protocols.transaction_ledger import TransactionLedgerProtocol
    from config.settings import PaymentSettings, PixSettings, ProviderSettings

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class PaymentServices:
    """Container dos use cases usados pelas rotas."""

    ledger: TransactionLedgerProtocol
    registry: ProviderRegistry
    router: ProviderRouter
    create_payment: CreatePaymentUseCase
    lifecycle: PaymentLifecycleUseCase
    queries: PaymentQueriesUseCase
    reconcile_webhook: ReconcileWebhookUseCase


def create_provider_registry(
    payments: PaymentSettings,
    pix: PixSettings,
    providers: ProviderSettings,
) -> ProviderRegistry:
    """Registra todos os adapters; sem credencial eles reportam falha ao uso."""
    timeout = payments.provider_timeout_seconds
    registry = ProviderRegistry([
        MockPaymentAdapter(),
        StaticPixAdapter(
            pix_key=pix.pix_key,
            merchant_name=pix.merchant_name,
            merchant_city=pix.merchant_city,
            description=pix.description,
        ),
        MercadoPagoAdapter(
            access_token=providers.mercadopago_access_token,
            base_url=providers.mercadopago_base_url,
            timeout_seconds=timeout,
        ),
        InfinitePayAdapter(
            handle=providers.infinitepay_handle,
            webhook_url=providers.infinitepay_webhook_url,
            redirect_url=providers.infinitepay_redirect_url,
            checkout_url=providers.infinitepay_checkout_url,
            timeout_seconds=timeout,
        ),
        WooviAdapter(
            api_key=providers.woovi_api_key,
            base_url=providers.woovi_base_url,
            pix_path=providers.woovi_pix_path,
            card_path=providers.woovi_card_path,
            pix_confirm_path=providers.woovi_pix_confirm_path,
            auth_header=providers.woovi_auth_header,
            timeout_seconds=timeout,
        ),
    ])
    logger.info("provider_registry_created", extra={"providers": registry.names()})
    return registry


def build_payment_services(
    *,
    ledger: TransactionLedgerProtocol,
    idempotency_store: IdempotencyStoreProtocol,
    registry: ProviderRegistry,
    payments: PaymentSettings,
    replay_wait_seconds: float = 2.0,
    dedupe_store: AsyncDedupeProtocol | None = None,
    dedupe_ttl_seconds: int = 86400,
) -> PaymentServices:
    """Monta os use cases a partir de dependências explícitas (usado em testes)."""
    router = ProviderRouter(
        registry,
        sandbox=payments.sandbox,
        default_card_provider=payments.default_card_provider,
        hosted_checkout_tags=payments.hosted_checkout_pay_tags,
    )
    guard = IdempotencyGuard(idempotency_store, ledger, replay_wait_seconds=replay_wait_seconds)
    timeout = payments.provider_timeout_seconds
    lifecycle = PaymentLifecycleUseCase(ledger, registry, provider_timeout_seconds=timeout)
    return PaymentServices(
        ledger=ledger,
        registry=registry,
        router=router,
        create_payment=CreatePaymentUseCase(
            ledger,
            registry,
            router,
            guard,
            provider_timeout_seconds=timeout,
        ),
        lifecycle=lifecycle,
        queries=PaymentQueriesUseCase(ledger),
        reconcile_webhook=ReconcileWebhookUseCase(
            ledger,
            lifecycle,
            dedupe=dedupe_store,
            dedupe_ttl_seconds=dedupe_ttl_seconds,
        ),
    )


def create_payment_services() -> PaymentServices:
    """Monta os use cases a partir das settings de ambiente."""
    base = get_base_settings()
    payments = get_payment_settings()
    idempotency = get_idempotency_settings()
    webhooks = get_webhook_settings()
    return build_payment_services(
        ledger=create_transaction_ledger(get_ledger_settings(), base),
        idempotency_store=create_idempotency_store(idempotency, base),
        registry=create_provider_registry(payments, get_pix_settings(), get_provider_settings()),
        payments=payments,
        replay_wait_seconds=idempotency.replay_wait_seconds,
        dedupe_store=create_webhook_dedupe_store(webhooks, base),
        dedupe_ttl_seconds=webhooks.dedupe_ttl_seconds,
    )
