"""Protocolo de store de dedupe para reentregas de webhook."""

from __future__ import annotations

from abc import ABC, abstractmethod


class AsyncDedupeProtocol(ABC):
    """Contrato mínimo assíncrono para deduplicação de entregas.

    Método canônico:
    - seen(key: str, ttl: int) -> bool
      Retorna True se a chave já foi vista (reentrega). Se não vista,
      marca-a com TTL e retorna False. Operação atômica.
    - forget(key: str) -> None
      Desfaz a marca para que a reentrega seja processada.
    """

    @abstractmethod
    async def seen(self, key: str, ttl: int = 86400) -> bool:
        """Verifica e marca a chave de forma atômica.

        Args:
            key: Id de entrega (header ou hash do corpo)
            ttl: TTL em segundos

        Returns:
            True se já foi vista (duplicado); False se foi marcada agora.
        """

    @abstractmethod
    async def forget(self, key: str) -> None:
        """Remove a marca da chave (entrega que falhou no processamento).

        A próxima reentrega com a mesma chave volta a ser processada.
        """
