"""Política de roteamento de provedores.

Precedência (primeira regra que casar):
1. Hint explícito (campo `provider` ou metadata.provider), usado verbatim.
2. Cartão com pay tag na allow-list de checkout hospedado → InfinitePay,
   inclusive em sandbox e independente do modo de operação.
3. Sandbox/teste → mock.
4. PIX: modo black → gateway dinâmico; senão PIX estático.
5. Cartão: modo black → gateway dinâmico; senão provedor de cartão padrão.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from enum import StrEnum
from typing import TYPE_CHECKING, Any

from utils.errors import InvalidMethodError, InvalidRequestError

if TYPE_CHECKING:
    from collections.abc import Iterable

    from app.services.provider_registry import ProviderRegistry

logger = logging.getLogger(__name__)

DEFAULT_HOSTED_CHECKOUT_TAGS: frozenset[str] = frozenset({
    "anne-tom",
    "annetom",
    "axion-pdv",
    "axionpdv",
})

_PAY_TAG_SEPARATORS_RE = re.compile(r"[\s_]+")


class OperationMode(StrEnum):
    """Modo de operação do merchant."""

    WHITE = "white"
    BLACK = "black"


_MODE_ALIASES: dict[str, OperationMode] = {
    "white": OperationMode.WHITE,
    "light": OperationMode.WHITE,
    "black": OperationMode.BLACK,
    "dark": OperationMode.BLACK,
}


def normalize_provider_name(value: Any) -> str:
    if value is None:
        return ""
    return str(value).strip().lower()


def normalize_pay_tag(value: Any) -> str:
    """trim, lowercase, espaços/underscores → '-'."""
    return _PAY_TAG_SEPARATORS_RE.sub("-", str(value or "").strip().lower())


def normalize_operation_mode(value: Any) -> OperationMode | None:
    """Aceita aliases (dark → black, light → white); desconhecido → None."""
    return _MODE_ALIASES.get(str(value or "").strip().lower())


@dataclass(frozen=True, slots=True)
class RoutingDecision:
    """Provedor escolhido e a regra que decidiu."""

    provider: str
    rule: str


class ProviderRouter:
    """Seleciona o provedor de uma intenção de pagamento.

    Args:
        registry: Registry usado para validar hints
        sandbox: Ambiente de teste/sandbox
        default_card_provider: Provedor de cartão em modo white
        hosted_checkout_tags: Pay tags (normalizadas) do checkout hospedado
        hosted_checkout_provider: Adapter do checkout hospedado
        live_gateway: Gateway dinâmico usado em modo black
        static_pix_provider: Adapter de PIX estático
        mock_provider: Adapter sandbox
    """

    def __init__(
        self,
        registry: ProviderRegistry,
        *,
        sandbox: bool,
        default_card_provider: str = "woovi",
        hosted_checkout_tags: Iterable[str] = DEFAULT_HOSTED_CHECKOUT_TAGS,
        hosted_checkout_provider: str = "infinitepay",
        live_gateway: str = "mercadopago",
        static_pix_provider: str = "static_pix",
        mock_provider: str = "mock",
    ) -> None:
        self._registry = registry
        self._sandbox = sandbox
        self._default_card_provider = normalize_provider_name(default_card_provider)
        self._hosted_checkout_tags = frozenset(normalize_pay_tag(t) for t in hosted_checkout_tags)
        self._hosted_checkout_provider = hosted_checkout_provider
        self._live_gateway = live_gateway
        self._static_pix_provider = static_pix_provider
        self._mock_provider = mock_provider

    def is_hosted_checkout_tag(self, pay_tag: Any) -> bool:
        normalized = normalize_pay_tag(pay_tag)
        return bool(normalized) and normalized in self._hosted_checkout_tags

    def select(
        self,
        method: str,
        *,
        provider_hint: Any = None,
        pay_tag: Any = None,
        operation_mode: Any = None,
    ) -> RoutingDecision:
        """Escolhe o provedor sem efeitos colaterais.

        Raises:
            InvalidRequestError: hint com provedor desconhecido
            InvalidMethodError: método diferente de pix/card
        """
        if method not in ("pix", "card"):
            msg = "Método de pagamento não suportado"
            raise InvalidMethodError(msg)

        hint = normalize_provider_name(provider_hint)
        if hint:
            if hint not in self._registry:
                msg = f"Provedor desconhecido: {hint}"
                raise InvalidRequestError(msg)
            return self._decide(hint, "provider_hint", method)

        if method == "card" and self.is_hosted_checkout_tag(pay_tag):
            return self._decide(self._hosted_checkout_provider, "hosted_checkout_tag", method)

        if self._sandbox:
            return self._decide(self._mock_provider, "sandbox", method)

        mode = normalize_operation_mode(operation_mode) or OperationMode.WHITE
        if mode is OperationMode.BLACK:
            return self._decide(self._live_gateway, "operation_mode_black", method)

        if method == "pix":
            return self._decide(self._static_pix_provider, "pix_static_default", method)
        return self._decide(self._default_card_provider, "card_default", method)

    def _decide(self, provider: str, rule: str, method: str) -> RoutingDecision:
        logger.debug("provider_routed", extra={"provider": provider, "rule": rule, "method": method})
        return RoutingDecision(provider=provider, rule=rule)
