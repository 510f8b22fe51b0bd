"""
Redis Storage Backend.

Production storage backend using Redis for persistence and cross-process
account locks. Requires redis-py package.
"""

from __future__ import annotations

import json
import math
import os
import uuid
from typing import Any

from nuvolock.storage.base import StorageBackend, register_storage_backend


class RedisStorage(StorageBackend):
    """
    Redis storage backend.

    Uses Redis for persistent storage. Suitable for production.
    Requires: pip install redis
    """

    # Only delete the lock if it still holds our token
    _RELEASE_LOCK_SCRIPT = """
    if redis.call("get", KEYS[1]) == ARGV[1] then
        return redis.call("del", KEYS[1])
    else
        return 0
    end
    """

    # Only reset the TTL if the lock still holds our token
    _EXTEND_LOCK_SCRIPT = """
    if redis.call("get", KEYS[1]) == ARGV[1] then
        return redis.call("pexpire", KEYS[1], ARGV[2])
    else
        return 0
    end
    """

    def __init__(
        self,
        redis_url: str | None = None,
        prefix: str = "nuvolock",
    ) -> None:
        """
        Initialize Redis storage.

        Args:
            redis_url: Redis connection URL (or from NUVOLOCK_REDIS_URL env)
            prefix: Key prefix for all storage keys
        """
        self._redis_url = redis_url or os.environ.get(
            "NUVOLOCK_REDIS_URL",
            "redis://localhost:6379/0",
        )
        self._prefix = prefix
        self._client = None

    def _get_client(self):
        """Lazy-load Redis client."""
        if self._client is None:
            try:
                import redis.asyncio as redis
            except ImportError:
                raise ImportError(
                    "redis package required for RedisStorage. Install with: pip install nuvolock[redis]"
                ) from None
            self._client = redis.from_url(self._redis_url, decode_responses=True)
        return self._client

    def _make_key(self, collection: str, key: str) -> str:
        """Create Redis key from collection and key."""
        return f"{self._prefix}:{collection}:{key}"

    def _index_key(self, collection: str) -> str:
        return f"{self._prefix}:{collection}:_index"

    def _counter_key(self, collection: str, key: str) -> str:
        return f"{self._prefix}:{collection}:_counter:{key}"

    def _counter_index_key(self, collection: str) -> str:
        return f"{self._prefix}:{collection}:_counters"

    @staticmethod
    def _ttl_ms(ttl: float) -> int:
        return max(1, math.ceil(ttl * 1000))

    async def save(
        self,
        collection: str,
        key: str,
        data: dict[str, Any],
    ) -> None:
        """Save data to Redis."""
        client = self._get_client()
        await client.set(self._make_key(collection, key), json.dumps(data))
        await client.sadd(self._index_key(collection), key)

    async def get(
        self,
        collection: str,
        key: str,
    ) -> dict[str, Any] | None:
        """Get data from Redis."""
        client = self._get_client()
        data = await client.get(self._make_key(collection, key))
        if data is None:
            return None
        return json.loads(data)

    async def delete(
        self,
        collection: str,
        key: str,
    ) -> bool:
        """Delete data from Redis."""
        client = self._get_client()
        result = await client.delete(self._make_key(collection, key))
        await client.srem(self._index_key(collection), key)
        return result > 0

    async def query(
        self,
        collection: str,
        filters: dict[str, Any] | None = None,
        limit: int | None = None,
        offset: int = 0,
    ) -> list[dict[str, Any]]:
        """Query data with optional filters."""
        client = self._get_client()
        keys = await client.smembers(self._index_key(collection))

        results = []
        for key in sorted(keys):
            data = await self.get(collection, key)
            if data is None:
                continue
            if filters and any(data.get(k) != v for k, v in filters.items()):
                continue

            data["_key"] = key
            results.append(data)

        results = results[offset:]
        if limit is not None:
            results = results[:limit]

        return results

    async def count(
        self,
        collection: str,
        filters: dict[str, Any] | None = None,
    ) -> int:
        """Count records in collection."""
        if filters:
            results = await self.query(collection, filters)
            return len(results)

        client = self._get_client()
        return await client.scard(self._index_key(collection))

    async def clear(self, collection: str) -> int:
        """Clear all records and counters from a collection."""
        client = self._get_client()
        keys = await client.smembers(self._index_key(collection))
        count = len(keys)

        for key in keys:
            await self.delete(collection, key)

        counters = await client.smembers(self._counter_index_key(collection))
        for key in counters:
            await client.delete(self._counter_key(collection, key))
        await client.delete(self._counter_index_key(collection))

        return count

    async def atomic_add(
        self,
        collection: str,
        key: str,
        amount: int,
    ) -> int:
        """Atomically add amount (INCRBY keeps integers exact)."""
        client = self._get_client()
        new_val = await client.incrby(self._counter_key(collection, key), int(amount))
        await client.sadd(self._counter_index_key(collection), key)
        return int(new_val)

    async def get_counter(self, collection: str, key: str) -> int:
        client = self._get_client()
        value = await client.get(self._counter_key(collection, key))
        return int(value) if value is not None else 0

    async def acquire_lock(
        self,
        key: str,
        ttl: float = 30,
    ) -> str | None:
        """
        Acquire a distributed lock with ownership token (Redis SET NX).

        Args:
            key: Lock key (e.g. "lock:account:0xabc")
            ttl: TTL in seconds

        Returns:
            Unique ownership token if acquired, None if already held
        """
        client = self._get_client()
        redis_key = f"{self._prefix}:locks:{key}"
        token = str(uuid.uuid4())

        result = await client.set(redis_key, token, nx=True, px=self._ttl_ms(ttl))
        if result:
            return token
        return None

    async def release_lock(
        self,
        key: str,
        token: str,
    ) -> bool:
        """Release a lock via an atomic check-and-delete Lua script."""
        client = self._get_client()
        redis_key = f"{self._prefix}:locks:{key}"
        result = await client.eval(self._RELEASE_LOCK_SCRIPT, 1, redis_key, token)
        return int(result) > 0

    async def extend_lock(
        self,
        key: str,
        token: str,
        ttl: float = 30,
    ) -> bool:
        """Reset the lock TTL via an atomic check-and-pexpire Lua script."""
        client = self._get_client()
        redis_key = f"{self._prefix}:locks:{key}"
        result = await client.eval(self._EXTEND_LOCK_SCRIPT, 1, redis_key, token, self._ttl_ms(ttl))
        return int(result) > 0

    async def close(self) -> None:
        """Close Redis connection."""
        if self._client:
            await self._client.aclose()
            self._client = None


# Register backend
register_storage_backend("redis", RedisStorage)
