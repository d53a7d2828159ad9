"""Testes do composition root (settings → stores → use cases)."""

from __future__ import annotations

import logging

import pytest

from app.bootstrap import collect_settings_errors, validate_runtime_settings
from app.bootstrap.clients import firestore_required, redis_required
from app.bootstrap.dependencies import (
    create_idempotency_store,
    create_transaction_ledger,
    create_webhook_dedupe_store,
)
from app.bootstrap.dependencies_services import create_payment_services
from app.infra.stores import MemoryDedupeStore, MemoryIdempotencyStore, MemoryTransactionLedger
from config.settings import (
    BaseSettings,
    IdempotencySettings,
    LedgerSettings,
    WebhookSettings,
    clear_settings_cache,
)

LOCAL = BaseSettings(environment="test")


class TestStoreFactories:
    def test_memory_backends(self) -> None:
        assert isinstance(create_transaction_ledger(LedgerSettings(), LOCAL), MemoryTransactionLedger)
        assert isinstance(create_idempotency_store(IdempotencySettings(), LOCAL), MemoryIdempotencyStore)

    def test_dedupe_disabled_by_default(self) -> None:
        assert create_webhook_dedupe_store(WebhookSettings(), LOCAL) is None

    def test_memory_dedupe_when_enabled(self) -> None:
        store = create_webhook_dedupe_store(WebhookSettings(dedupe_deliveries=True), LOCAL)
        assert isinstance(store, MemoryDedupeStore)

    def test_memory_outside_local_warns(self, caplog: pytest.LogCaptureFixture) -> None:
        with caplog.at_level(logging.WARNING):
            create_transaction_ledger(LedgerSettings(), BaseSettings(environment="staging"))
        assert "memory_store_in_non_dev" in caplog.text


class TestPaymentServices:
    def test_registry_has_every_provider(self) -> None:
        services = create_payment_services()

        assert services.registry.names() == ["infinitepay", "mercadopago", "mock", "static_pix", "woovi"]
        assert isinstance(services.ledger, MemoryTransactionLedger)

    def test_test_environment_routes_to_sandbox(self) -> None:
        services = create_payment_services()
        assert services.router.select("card").provider == "mock"


class TestDependencyUsage:
    def test_nothing_required_with_memory_backends(self) -> None:
        assert redis_required() is False
        assert firestore_required() is False

    def test_redis_required_by_dedupe(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("WEBHOOK_DEDUPE_DELIVERIES", "true")
        monkeypatch.setenv("WEBHOOK_DEDUPE_BACKEND", "redis")
        clear_settings_cache()
        assert redis_required() is True

    def test_firestore_required_by_ledger(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("LEDGER_BACKEND", "firestore")
        clear_settings_cache()
        assert firestore_required() is True


class TestRuntimeValidation:
    def test_local_environment_only_warns(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("IDEMPOTENCY_BACKEND", "redis")
        clear_settings_cache()

        assert "idempotency: IDEMPOTENCY_BACKEND=redis requer REDIS_URL configurado" in collect_settings_errors()
        validate_runtime_settings()

    def test_production_fails_fast(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("ENVIRONMENT", "production")
        clear_settings_cache()

        with pytest.raises(RuntimeError, match="Configuração inválida para production"):
            validate_runtime_settings()
