"""Redis Dedupe Store — descarte de reentregas de webhook.

Usa SET NX (set if not exists) com TTL para operação atômica.

Contrato de Keys:
    As keys devem ser IDs opacos ou hashes (ex.: X-Webhook-Id, SHA256 do
    corpo). NUNCA passar payloads ou dados de cliente como key.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from app.protocols.dedupe import AsyncDedupeProtocol
from utils.errors import RedisConnectionError

if TYPE_CHECKING:
    from redis.asyncio import Redis as AsyncRedis

logger = logging.getLogger(__name__)

# Prefixo para namespace de dedupe
DEDUPE_PREFIX = "webhook_dedupe:"


class RedisDedupeStore(AsyncDedupeProtocol):
    """Store de dedupe usando Redis (Upstash compatível).

    Args:
        async_redis_client: Cliente Redis assíncrono
    """

    def __init__(self, async_redis_client: AsyncRedis[bytes] | None) -> None:
        self._async_redis = async_redis_client

    def _key(self, key: str) -> str:
        """Gera chave Redis com namespace."""
        return f"{DEDUPE_PREFIX}{key}"

    async def seen(self, key: str, ttl: int = 86400) -> bool:
        """Verifica e marca chave atomicamente.

        SET NX EX:
        - Se chave não existe: cria com TTL e retorna False (nova entrega)
        - Se chave existe: retorna True (reentrega)
        """
        if self._async_redis is None:
            msg = "Async Redis client não configurado"
            raise RuntimeError(msg)

        try:
            was_set = await self._async_redis.set(self._key(key), "1", nx=True, ex=ttl)
        except Exception as exc:
            raise RedisConnectionError("Falha ao consultar dedupe no Redis") from exc

        is_duplicate = not was_set
        if is_duplicate:
            key_masked = key[:8] + "..." if len(key) > 8 else key
            logger.debug("dedupe_duplicate_detected", extra={"key": key_masked})
        return is_duplicate

    async def forget(self, key: str) -> None:
        if self._async_redis is None:
            msg = "Async Redis client não configurado"
            raise RuntimeError(msg)

        try:
            await self._async_redis.delete(self._key(key))
        except Exception as exc:
            raise RedisConnectionError("Falha ao remover dedupe no Redis") from exc
