"""Protocolo de store de idempotência (insert-if-absent atômico)."""

from __future__ import annotations

from abc import ABC, abstractmethod


class IdempotencyStoreProtocol(ABC):
    """Contrato mínimo para vincular chave → transação uma única vez.

    Método canônico:
    - claim(key, transaction_id) -> str
      Grava o vínculo se a chave for nova e retorna transaction_id;
      se a chave já existir, retorna o id vinculado anteriormente.
      O registro nunca é atualizado.
    - release(key, transaction_id) -> bool
      Remove o vínculo apenas se ele ainda apontar para transaction_id.
    """

    @abstractmethod
    async def claim(self, key: str, transaction_id: str) -> str:
        """Reserva a chave de forma atômica.

        Args:
            key: Chave de idempotência do cliente
            transaction_id: Id candidato para a nova transação

        Returns:
            Id vinculado à chave (o candidato se a reserva foi feita agora).
        """

    @abstractmethod
    async def get(self, key: str) -> str | None:
        """Retorna o id vinculado à chave ou None."""

    @abstractmethod
    async def release(self, key: str, transaction_id: str) -> bool:
        """Desfaz a reserva se a chave ainda estiver vinculada a transaction_id.

        Usado quando a transação reservada não chegou a ser gravada.

        Returns:
            True se o vínculo foi removido.
        """
