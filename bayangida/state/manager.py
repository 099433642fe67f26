"""Redis-based state manager shared by every request."""

import json
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator

import redis.asyncio as redis
from redis.asyncio.client import Pipeline

from bayangida.config import get_settings
from bayangida.utils.logging import get_logger

logger = get_logger(__name__)


def _decode(value: Any) -> Any:
    """Deserialize a stored JSON value, passing plain strings through."""
    if value is None:
        return None
    try:
        return json.loads(value)
    except (json.JSONDecodeError, TypeError):
        return value


class StateManager:
    """Centralized state access using Redis."""

    def __init__(self, redis_client: redis.Redis | None = None) -> None:
        settings = get_settings()
        self.redis_client: redis.Redis | None = redis_client
        self.redis_url = settings.redis_url
        self.prefix = settings.redis_key_prefix

    def key(self, *parts: str) -> str:
        """Build a namespaced key."""
        return ":".join((self.prefix, *parts))

    async def connect(self) -> None:
        """Establish Redis connection."""
        if self.redis_client is None:
            self.redis_client = await redis.from_url(
                self.redis_url,
                encoding="utf-8",
                decode_responses=True,
            )
            logger.info("redis_connected", url=self.redis_url)

    async def disconnect(self) -> None:
        """Close Redis connection."""
        if self.redis_client:
            await self.redis_client.aclose()
            self.redis_client = None
            logger.info("redis_disconnected")

    async def _client(self) -> redis.Redis:
        if not self.redis_client:
            await self.connect()
        return self.redis_client

    async def ping(self) -> bool:
        """Check the server answers."""
        client = await self._client()
        return bool(await client.ping())

    async def get(self, key: str) -> Any:
        """Get a value, deserializing JSON."""
        client = await self._client()
        return _decode(await client.get(key))

    async def mget(self, keys: list[str]) -> list[Any]:
        """Get several values in one round trip; missing keys yield None."""
        if not keys:
            return []
        client = await self._client()
        return [_decode(value) for value in await client.mget(keys)]

    async def delete(self, *keys: str) -> None:
        """Delete keys."""
        client = await self._client()
        await client.delete(*keys)
        logger.debug("state_deleted", keys=list(keys))

    async def smembers(self, key: str) -> set[str]:
        """Get all members of a set."""
        client = await self._client()
        return set(await client.smembers(key))

    async def scard(self, key: str) -> int:
        """Count members of a set."""
        client = await self._client()
        return int(await client.scard(key))

    async def scan_keys(self, pattern: str) -> list[str]:
        """Collect keys matching a pattern without blocking the server."""
        client = await self._client()
        return [key async for key in client.scan_iter(match=pattern)]

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator[Pipeline]:
        """Pipeline whose queued commands run atomically on execute()."""
        client = await self._client()
        async with client.pipeline(transaction=True) as pipe:
            yield pipe

    @asynccontextmanager
    async def watch(self, *keys: str) -> AsyncIterator[Pipeline]:
        """Pipeline watching keys for optimistic transactions.

        Reads on the yielded pipeline run immediately. Call ``multi()``
        before queuing writes; ``execute()`` raises ``WatchError`` if any
        watched key changed in the meantime.
        """
        client = await self._client()
        async with client.pipeline(transaction=True) as pipe:
            await pipe.watch(*keys)
            yield pipe


# Global state manager instance
_state_manager: StateManager | None = None


async def get_state_manager() -> StateManager:
    """Get the global state manager instance."""
    global _state_manager
    if _state_manager is None:
        _state_manager = StateManager()
        await _state_manager.connect()
    return _state_manager


async def close_state_manager() -> None:
    """Disconnect and forget the global state manager."""
    global _state_manager
    if _state_manager is not None:
        await _state_manager.disconnect()
        _state_manager = None
