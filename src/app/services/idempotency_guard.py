"""Guard de idempotência da criação de pagamentos.

reserve() faz o insert-if-absent da chave; a segunda requisição com a
mesma chave recebe o mesmo transaction_id marcado como replay. Se a
transação vinculada ainda não estiver visível no ledger (primeira
requisição inserindo), o guard espera um pouco e então reporta
idempotency_in_progress. Se o insert da transação falhar, release() devolve
a chave para que o cliente possa repetir a requisição.
"""

from __future__ import annotations

import asyncio
import logging
import time
from typing import TYPE_CHECKING

from app.protocols.models import Reservation
from utils.errors import IdempotencyInProgressError

if TYPE_CHECKING:
    from app.domain.transaction import Transaction
    from app.protocols.idempotency import IdempotencyStoreProtocol
    from app.protocols.transaction_ledger import TransactionLedgerProtocol

logger = logging.getLogger(__name__)


class IdempotencyGuard:
    """Mapeia chave do cliente → transação, com replay.

    Args:
        store: Store com claim atômico
        ledger: Ledger para ler a transação vinculada
        replay_wait_seconds: Espera máxima pela transação vinculada
        poll_interval_seconds: Intervalo entre leituras durante a espera
    """

    def __init__(
        self,
        store: IdempotencyStoreProtocol,
        ledger: TransactionLedgerProtocol,
        *,
        replay_wait_seconds: float = 2.0,
        poll_interval_seconds: float = 0.05,
    ) -> None:
        self._store = store
        self._ledger = ledger
        self._replay_wait = replay_wait_seconds
        self._poll_interval = poll_interval_seconds

    async def reserve(self, key: str, candidate_transaction_id: str) -> Reservation:
        """Reserva a chave para o candidato ou devolve o vínculo existente."""
        bound_id = await self._store.claim(key, candidate_transaction_id)
        replayed = bound_id != candidate_transaction_id
        if replayed:
            logger.info("idempotency_replayed", extra={"transaction_id": bound_id})
        return Reservation(transaction_id=bound_id, replayed=replayed)

    async def release(self, key: str, transaction_id: str) -> None:
        """Libera a chave cuja transação reservada não foi gravada."""
        released = await self._store.release(key, transaction_id)
        logger.warning(
            "idempotency_reservation_released",
            extra={"transaction_id": transaction_id, "released": released},
        )

    async def replay(self, key: str) -> Transaction | None:
        """Transação vinculada à chave ou None se a chave é nova.

        Raises:
            IdempotencyInProgressError: chave reservada, transação invisível
        """
        bound_id = await self._store.get(key)
        if bound_id is None:
            return None
        return await self.wait_for_transaction(bound_id)

    async def wait_for_transaction(self, transaction_id: str) -> Transaction:
        """Espera a transação vinculada ficar visível no ledger.

        Raises:
            IdempotencyInProgressError: não apareceu dentro da janela
        """
        deadline = time.monotonic() + self._replay_wait
        while True:
            transaction = await self._ledger.get(transaction_id)
            if transaction is not None:
                return transaction
            if time.monotonic() >= deadline:
                break
            await asyncio.sleep(self._poll_interval)

        logger.warning("idempotency_in_progress", extra={"transaction_id": transaction_id})
        msg = "Requisição com esta Idempotency-Key ainda em processamento"
        raise IdempotencyInProgressError(msg)
