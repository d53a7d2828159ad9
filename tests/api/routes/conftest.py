"""Fixtures de rotas: app FastAPI com PaymentServices em memória."""

from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from app.app import create_app
from app.bootstrap import get_payment_services


@pytest.fixture
def make_client(make_services):
    """Factory de TestClient com os use cases injetados via dependency_overrides."""

    def _make(*, raise_server_exceptions: bool = True, services=None, **service_kwargs) -> TestClient:
        fastapi_app = create_app()
        resolved = services or make_services(**service_kwargs)
        fastapi_app.dependency_overrides[get_payment_services] = lambda: resolved
        return TestClient(fastapi_app, raise_server_exceptions=raise_server_exceptions)

    return _make
