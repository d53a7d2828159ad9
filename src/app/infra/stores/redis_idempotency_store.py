"""Redis Idempotency Store — vínculo chave → transação com SET NX.

A primeira requisição grava o vínculo; as seguintes leem o id existente.
Nunca há check-then-insert: a reserva é um único SET NX.

Contrato de Keys:
    A chave de idempotência é opaca e vem do cliente. É logada apenas
    truncada.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from app.protocols.idempotency import IdempotencyStoreProtocol
from utils.errors import RedisConnectionError

if TYPE_CHECKING:
    from redis.asyncio import Redis as AsyncRedis

logger = logging.getLogger(__name__)

IDEMPOTENCY_PREFIX = "idempotency:"

_RELEASE_SCRIPT = """
if redis.call("GET", KEYS[1]) == ARGV[1] then
    return redis.call("DEL", KEYS[1])
end
return 0
"""


def _mask(key: str) -> str:
    return key[:8] + "..." if len(key) > 8 else key


def _decode(value: bytes | str | None) -> str | None:
    if value is None:
        return None
    if isinstance(value, bytes):
        return value.decode("utf-8")
    return value


class RedisIdempotencyStore(IdempotencyStoreProtocol):
    """Store de idempotência usando Redis (Upstash compatível).

    Args:
        async_redis_client: Cliente Redis assíncrono
        ttl_seconds: Retenção do vínculo (None = sem expiração)
    """

    def __init__(
        self,
        async_redis_client: AsyncRedis[bytes] | None,
        ttl_seconds: int | None = None,
    ) -> None:
        self._async_redis = async_redis_client
        self._ttl = ttl_seconds

    def _key(self, key: str) -> str:
        return f"{IDEMPOTENCY_PREFIX}{key}"

    def _client(self) -> AsyncRedis[bytes]:
        if self._async_redis is None:
            msg = "Async Redis client não configurado"
            raise RuntimeError(msg)
        return self._async_redis

    async def claim(self, key: str, transaction_id: str) -> str:
        client = self._client()
        redis_key = self._key(key)
        try:
            was_set = await client.set(redis_key, transaction_id, nx=True, ex=self._ttl)
            if was_set:
                return transaction_id
            existing = _decode(await client.get(redis_key))
        except Exception as exc:
            raise RedisConnectionError("Falha ao reservar idempotência no Redis") from exc

        if existing is None:
            # Vínculo expirou entre o SET NX e o GET; nova tentativa única
            logger.warning("idempotency_key_expired_during_claim", extra={"key": _mask(key)})
            try:
                was_set = await client.set(redis_key, transaction_id, nx=True, ex=self._ttl)
                existing = transaction_id if was_set else _decode(await client.get(redis_key))
            except Exception as exc:
                raise RedisConnectionError("Falha ao reservar idempotência no Redis") from exc

        logger.debug("idempotency_key_exists", extra={"key": _mask(key)})
        return existing or transaction_id

    async def get(self, key: str) -> str | None:
        client = self._client()
        try:
            value = await client.get(self._key(key))
        except Exception as exc:
            raise RedisConnectionError("Falha ao consultar idempotência no Redis") from exc
        return _decode(value)

    async def release(self, key: str, transaction_id: str) -> bool:
        client = self._client()
        redis_key = self._key(key)
        try:
            # Compare-and-delete atômico no servidor
            removed = await client.eval(_RELEASE_SCRIPT, 1, redis_key, transaction_id)
        except Exception as exc:
            raise RedisConnectionError("Falha ao liberar idempotência no Redis") from exc
        if removed:
            logger.info("idempotency_key_released", extra={"key": _mask(key)})
        return bool(removed)
