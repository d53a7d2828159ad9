"""Testes da política de roteamento de provedores."""

from __future__ import annotations

import pytest

from app.services import ProviderRegistry, ProviderRouter
from app.services.provider_router import (
    OperationMode,
    normalize_operation_mode,
    normalize_pay_tag,
)
from tests.fakes.fake_payment_provider import FakePaymentProvider
from utils.errors import InvalidMethodError, InvalidRequestError

PROVIDERS = ("mock", "static_pix", "mercadopago", "infinitepay", "woovi")


@pytest.fixture
def registry() -> ProviderRegistry:
    return ProviderRegistry([FakePaymentProvider(name=name) for name in PROVIDERS])


def _router(registry: ProviderRegistry, *, sandbox: bool, **kwargs) -> ProviderRouter:
    return ProviderRouter(registry, sandbox=sandbox, **kwargs)


class TestNormalization:
    @pytest.mark.parametrize(
        ("raw", "expected"),
        [(" Anne Tom ", "anne-tom"), ("AXION_PDV", "axion-pdv"), ("a  _b", "a-b"), (None, "")],
    )
    def test_pay_tag(self, raw: object, expected: str) -> None:
        assert normalize_pay_tag(raw) == expected

    @pytest.mark.parametrize(
        ("raw", "expected"),
        [
            ("dark", OperationMode.BLACK),
            (" BLACK ", OperationMode.BLACK),
            ("light", OperationMode.WHITE),
            ("white", OperationMode.WHITE),
            ("grey", None),
            (None, None),
        ],
    )
    def test_operation_mode(self, raw: object, expected: OperationMode | None) -> None:
        assert normalize_operation_mode(raw) is expected


class TestPrecedence:
    def test_hint_wins_over_everything(self, registry: ProviderRegistry) -> None:
        router = _router(registry, sandbox=True)
        decision = router.select("card", provider_hint=" WOOVI ", pay_tag="anne-tom", operation_mode="black")
        assert decision.provider == "woovi"
        assert decision.rule == "provider_hint"

    def test_unknown_hint_rejected(self, registry: ProviderRegistry) -> None:
        with pytest.raises(InvalidRequestError, match="pagseguro"):
            _router(registry, sandbox=False).select("pix", provider_hint="pagseguro")

    @pytest.mark.parametrize("sandbox", [True, False])
    @pytest.mark.parametrize("mode", [None, "white", "black"])
    def test_hosted_checkout_tag_in_sandbox_and_production(
        self,
        registry: ProviderRegistry,
        sandbox: bool,
        mode: str | None,
    ) -> None:
        decision = _router(registry, sandbox=sandbox).select("card", pay_tag="Anne Tom", operation_mode=mode)
        assert decision.provider == "infinitepay"
        assert decision.rule == "hosted_checkout_tag"

    def test_hosted_checkout_tag_ignored_for_pix(self, registry: ProviderRegistry) -> None:
        decision = _router(registry, sandbox=False).select("pix", pay_tag="anne-tom")
        assert decision.provider == "static_pix"

    def test_sandbox_routes_to_mock(self, registry: ProviderRegistry) -> None:
        router = _router(registry, sandbox=True)
        assert router.select("pix", operation_mode="black").provider == "mock"
        assert router.select("card").rule == "sandbox"

    def test_pix_white_is_static(self, registry: ProviderRegistry) -> None:
        decision = _router(registry, sandbox=False).select("pix", operation_mode="white")
        assert decision.provider == "static_pix"
        assert decision.rule == "pix_static_default"

    def test_pix_black_is_live_gateway(self, registry: ProviderRegistry) -> None:
        assert _router(registry, sandbox=False).select("pix", operation_mode="dark").provider == "mercadopago"

    def test_card_black_is_live_gateway(self, registry: ProviderRegistry) -> None:
        decision = _router(registry, sandbox=False).select("card", operation_mode="black")
        assert decision.provider == "mercadopago"
        assert decision.rule == "operation_mode_black"

    def test_card_white_uses_default_provider(self, registry: ProviderRegistry) -> None:
        router = _router(registry, sandbox=False, default_card_provider="InfinitePay")
        decision = router.select("card")
        assert decision.provider == "infinitepay"
        assert decision.rule == "card_default"

    def test_custom_hosted_checkout_tags(self, registry: ProviderRegistry) -> None:
        router = _router(registry, sandbox=False, hosted_checkout_tags=["Loja_Centro"])
        assert router.is_hosted_checkout_tag("loja centro")
        assert not router.is_hosted_checkout_tag("anne-tom")
        assert not router.is_hosted_checkout_tag("")

    def test_invalid_method(self, registry: ProviderRegistry) -> None:
        with pytest.raises(InvalidMethodError):
            _router(registry, sandbox=False).select("boleto")
