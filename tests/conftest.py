"""Configuração do pytest para o projeto AxionPay Core."""

import sys
from pathlib import Path

import pytest

# Adiciona src/ ao PYTHONPATH para permitir imports absolutos
src_path = Path(__file__).parent.parent / "src"
if str(src_path) not in sys.path:
    sys.path.insert(0, str(src_path))

from api.connectors.mock import MockPaymentAdapter  # noqa: E402
from api.connectors.static_pix import StaticPixAdapter  # noqa: E402
from app.bootstrap.dependencies_services import build_payment_services  # noqa: E402
from app.infra.stores import (  # noqa: E402
    MemoryIdempotencyStore,
    MemoryTransactionLedger,
)
from app.services import ProviderRegistry  # noqa: E402
from config.settings import PaymentSettings, clear_settings_cache  # noqa: E402

TEST_PIX_KEY = "financeiro@axionpay.dev"


@pytest.fixture(autouse=True)
def _isolated_settings(monkeypatch: pytest.MonkeyPatch):
    """Cada teste parte de settings limpas em ambiente `test`."""
    monkeypatch.setenv("ENVIRONMENT", "test")
    clear_settings_cache()
    yield
    clear_settings_cache()


@pytest.fixture
def ledger() -> MemoryTransactionLedger:
    return MemoryTransactionLedger()


@pytest.fixture
def idempotency_store() -> MemoryIdempotencyStore:
    return MemoryIdempotencyStore()


@pytest.fixture
def registry() -> ProviderRegistry:
    return ProviderRegistry([
        MockPaymentAdapter(),
        StaticPixAdapter(pix_key=TEST_PIX_KEY, merchant_name="Loja Teste", merchant_city="Curitiba"),
    ])


@pytest.fixture
def make_services(ledger, idempotency_store, registry):
    """Factory de PaymentServices sobre stores em memória."""

    def _make(*, sandbox: bool = False, dedupe_store=None, **settings_overrides):
        payments = PaymentSettings(sandbox=sandbox, **settings_overrides)
        return build_payment_services(
            ledger=ledger,
            idempotency_store=idempotency_store,
            registry=registry,
            payments=payments,
            replay_wait_seconds=0.2,
            dedupe_store=dedupe_store,
        )

    return _make
