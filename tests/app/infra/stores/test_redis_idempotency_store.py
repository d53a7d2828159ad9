"""Testes do RedisIdempotencyStore com mock."""

from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock

import pytest

from app.infra.stores.redis_idempotency_store import RedisIdempotencyStore
from utils.errors import RedisConnectionError


class TestRedisIdempotencyStore:
    """Testes do RedisIdempotencyStore."""

    @pytest.mark.asyncio
    async def test_claim_new_key(self) -> None:
        client = MagicMock()
        client.set = AsyncMock(return_value=True)
        client.get = AsyncMock()
        store = RedisIdempotencyStore(client, ttl_seconds=600)

        assert await store.claim("pedido-123", "tx_1") == "tx_1"
        client.set.assert_awaited_once_with("idempotency:pedido-123", "tx_1", nx=True, ex=600)
        client.get.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_claim_existing_key_returns_bound_id(self) -> None:
        client = MagicMock()
        client.set = AsyncMock(return_value=None)
        client.get = AsyncMock(return_value=b"tx_original")
        store = RedisIdempotencyStore(client)

        assert await store.claim("pedido-123", "tx_2") == "tx_original"

    @pytest.mark.asyncio
    async def test_claim_retries_when_key_expired_between_calls(self) -> None:
        client = MagicMock()
        client.set = AsyncMock(side_effect=[None, True])
        client.get = AsyncMock(return_value=None)
        store = RedisIdempotencyStore(client)

        assert await store.claim("pedido-123", "tx_2") == "tx_2"
        assert client.set.await_count == 2

    @pytest.mark.asyncio
    async def test_get_decodes_bytes(self) -> None:
        client = MagicMock()
        client.get = AsyncMock(return_value=b"tx_1")
        store = RedisIdempotencyStore(client)

        assert await store.get("pedido-123") == "tx_1"
        client.get.assert_awaited_once_with("idempotency:pedido-123")

    @pytest.mark.asyncio
    async def test_get_unknown_key(self) -> None:
        client = MagicMock()
        client.get = AsyncMock(return_value=None)
        assert await RedisIdempotencyStore(client).get("nova") is None

    @pytest.mark.asyncio
    async def test_failures_raise_connection_error(self) -> None:
        client = MagicMock()
        client.set = AsyncMock(side_effect=TimeoutError())
        client.get = AsyncMock(side_effect=TimeoutError())
        store = RedisIdempotencyStore(client)

        with pytest.raises(RedisConnectionError):
            await store.claim("k", "tx_1")
        with pytest.raises(RedisConnectionError):
            await store.get("k")

    @pytest.mark.asyncio
    async def test_release_runs_compare_and_delete(self) -> None:
        client = MagicMock()
        client.eval = AsyncMock(return_value=1)
        store = RedisIdempotencyStore(client)

        assert await store.release("pedido-123", "tx_1") is True
        args = client.eval.await_args.args
        assert args[1:] == (1, "idempotency:pedido-123", "tx_1")

    @pytest.mark.asyncio
    async def test_release_other_binding_is_noop(self) -> None:
        client = MagicMock()
        client.eval = AsyncMock(return_value=0)

        assert await RedisIdempotencyStore(client).release("pedido-123", "tx_2") is False

    @pytest.mark.asyncio
    async def test_release_failure_raises_connection_error(self) -> None:
        client = MagicMock()
        client.eval = AsyncMock(side_effect=ConnectionError())

        with pytest.raises(RedisConnectionError):
            await RedisIdempotencyStore(client).release("k", "tx_1")
