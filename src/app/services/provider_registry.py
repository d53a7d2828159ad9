"""Registro de adapters de provedor (nome → adapter).

O roteamento decide um nome; o registry entrega o adapter. Testes
registram fakes com o mesmo nome dos adapters reais.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from utils.errors import InvalidRequestError

if TYPE_CHECKING:
    from collections.abc import Iterable

    from app.protocols.payment_provider import PaymentProviderProtocol

logger = logging.getLogger(__name__)


class ProviderRegistry:
    """Mapa nome → PaymentProviderProtocol."""

    def __init__(self, adapters: Iterable[PaymentProviderProtocol] = ()) -> None:
        self._adapters: dict[str, PaymentProviderProtocol] = {}
        for adapter in adapters:
            self.register(adapter)

    def register(self, adapter: PaymentProviderProtocol, name: str | None = None) -> None:
        key = (name or adapter.name).strip().lower()
        if key in self._adapters:
            logger.warning("provider_adapter_replaced", extra={"provider": key})
        self._adapters[key] = adapter

    def get(self, name: str) -> PaymentProviderProtocol:
        """Retorna o adapter registrado.

        Raises:
            InvalidRequestError: nome desconhecido
        """
        adapter = self._adapters.get(name.strip().lower())
        if adapter is None:
            msg = f"Provedor desconhecido: {name}"
            raise InvalidRequestError(msg)
        return adapter

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and name.strip().lower() in self._adapters

    def names(self) -> list[str]:
        return sorted(self._adapters)
