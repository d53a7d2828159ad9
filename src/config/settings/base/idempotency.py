"""Settings de idempotência da criação de pagamentos."""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from typing import TYPE_CHECKING, Literal

if TYPE_CHECKING:
    from config.settings.base.core import BaseSettings

IdempotencyBackend = Literal["memory", "redis", "firestore"]


@dataclass(frozen=True)
class IdempotencySettings:
    """Configurações de idempotência.

    Attributes:
        backend: Backend das chaves (memory|redis|firestore)
        ttl_seconds: TTL das chaves no Redis (0 = sem expiração)
        replay_wait_seconds: Espera máxima pela transação vinculada no replay
        collection: Collection Firestore das chaves
    """

    backend: IdempotencyBackend = "memory"
    ttl_seconds: int = 0
    replay_wait_seconds: float = 2.0
    collection: str = "idempotency_keys"

    def validate(self, base: BaseSettings) -> list[str]:
        """Valida configurações de idempotência.

        Args:
            base: BaseSettings para verificar ambiente.

        Returns:
            Lista de erros de validação.
        """
        errors: list[str] = []

        if self.backend not in {"memory", "redis", "firestore"}:
            errors.append(f"IDEMPOTENCY_BACKEND inválido: {self.backend}")

        if self.backend == "memory" and not base.is_local:
            errors.append(
                "IDEMPOTENCY_BACKEND=memory proibido em staging/production. "
                "Use Redis ou Firestore."
            )

        if self.backend == "redis" and not base.redis_url:
            errors.append("IDEMPOTENCY_BACKEND=redis requer REDIS_URL configurado")

        if self.backend == "firestore" and not base.gcp_project:
            errors.append("IDEMPOTENCY_BACKEND=firestore requer GCP_PROJECT configurado")

        if self.ttl_seconds < 0:
            errors.append("IDEMPOTENCY_TTL_SECONDS deve ser >= 0")

        if self.replay_wait_seconds < 0:
            errors.append("IDEMPOTENCY_REPLAY_WAIT_SECONDS deve ser >= 0")

        return errors


def _load_idempotency_from_env() -> IdempotencySettings:
    """Carrega IdempotencySettings de variáveis de ambiente."""
    backend_str = os.getenv("IDEMPOTENCY_BACKEND", "memory").lower()
    backend: IdempotencyBackend = (
        backend_str if backend_str in ("memory", "redis", "firestore") else "memory"
    )
    return IdempotencySettings(
        backend=backend,
        ttl_seconds=int(os.getenv("IDEMPOTENCY_TTL_SECONDS", "0")),
        replay_wait_seconds=float(os.getenv("IDEMPOTENCY_REPLAY_WAIT_SECONDS", "2.0")),
        collection=os.getenv("IDEMPOTENCY_COLLECTION", "idempotency_keys"),
    )


@lru_cache(maxsize=1)
def get_idempotency_settings() -> IdempotencySettings:
    """Retorna instância cacheada de IdempotencySettings."""
    return _load_idempotency_from_env()
