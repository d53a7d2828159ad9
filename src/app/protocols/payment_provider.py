"""Protocolo de adapter de provedor de pagamento."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .models import ChargeRequest, ProviderResult


class PaymentProviderProtocol(ABC):
    """Contrato de um adapter de provedor.

    Cada adapter executa uma chamada de saída e devolve ProviderResult
    normalizado pelo vocabulário de status do provedor.
    """

    name: str

    @abstractmethod
    async def charge(self, request: ChargeRequest) -> ProviderResult:
        """Cria a cobrança (PIX ou cartão).

        Raises:
            ProviderTransportError: timeout, conexão ou 5xx.
        """

    @abstractmethod
    async def confirm(self, provider_reference: str) -> ProviderResult:
        """Confirma um PIX junto ao provedor.

        Adapters sem suporte retornam success=False.
        """
