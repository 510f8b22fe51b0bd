"""
In-Memory Storage Backend.

Default storage backend that keeps all data in memory.
Suitable for development and testing, but not for production.
"""

from __future__ import annotations

import time
import uuid
from copy import deepcopy
from typing import Any

from nuvolock.storage.base import StorageBackend, register_storage_backend


class InMemoryStorage(StorageBackend):
    """
    In-memory storage backend.

    Stores all data in Python dicts. Data is lost when process ends.
    Safe for concurrent asyncio tasks since no method awaits mid-update.
    """

    def __init__(self) -> None:
        self._data: dict[str, dict[str, dict[str, Any]]] = {}
        self._counters: dict[str, dict[str, int]] = {}
        # lock key -> (token, expiry)
        self._locks: dict[str, tuple[str, float]] = {}

    def _ensure_collection(self, collection: str) -> dict[str, dict[str, Any]]:
        """Ensure collection exists and return it."""
        if collection not in self._data:
            self._data[collection] = {}
        return self._data[collection]

    async def save(
        self,
        collection: str,
        key: str,
        data: dict[str, Any],
    ) -> None:
        """Save data to memory."""
        coll = self._ensure_collection(collection)
        coll[key] = deepcopy(data)

    async def get(
        self,
        collection: str,
        key: str,
    ) -> dict[str, Any] | None:
        """Get data from memory."""
        coll = self._ensure_collection(collection)
        data = coll.get(key)
        return deepcopy(data) if data is not None else None

    async def delete(
        self,
        collection: str,
        key: str,
    ) -> bool:
        """Delete data from memory."""
        coll = self._ensure_collection(collection)
        if key in coll:
            del coll[key]
            return True
        return False

    async def query(
        self,
        collection: str,
        filters: dict[str, Any] | None = None,
        limit: int | None = None,
        offset: int = 0,
    ) -> list[dict[str, Any]]:
        """Query data with optional filters."""
        coll = self._ensure_collection(collection)

        results = []
        for key, data in coll.items():
            if filters and any(data.get(k) != v for k, v in filters.items()):
                continue

            result = deepcopy(data)
            result["_key"] = key
            results.append(result)

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

        coll = self._ensure_collection(collection)
        return len(coll)

    async def clear(self, collection: str) -> int:
        """Clear all records from a collection."""
        coll = self._ensure_collection(collection)
        count = len(coll)
        coll.clear()
        self._counters.pop(collection, None)
        return count

    async def atomic_add(
        self,
        collection: str,
        key: str,
        amount: int,
    ) -> int:
        """Atomically add amount to a counter."""
        counters = self._counters.setdefault(collection, {})
        counters[key] = counters.get(key, 0) + int(amount)
        return counters[key]

    async def get_counter(self, collection: str, key: str) -> int:
        return self._counters.get(collection, {}).get(key, 0)

    async def acquire_lock(
        self,
        key: str,
        ttl: float = 30,
    ) -> str | None:
        """Acquire lock (simple in-memory implementation)."""
        now = time.monotonic()

        held = self._locks.get(key)
        if held is not None and now < held[1]:
            return None

        token = str(uuid.uuid4())
        self._locks[key] = (token, now + ttl)
        return token

    async def release_lock(
        self,
        key: str,
        token: str,
    ) -> bool:
        """Release lock if the token still owns it."""
        held = self._locks.get(key)
        if held is None or held[0] != token:
            return False
        del self._locks[key]
        return True

    async def extend_lock(
        self,
        key: str,
        token: str,
        ttl: float = 30,
    ) -> bool:
        """Push the lock's expiry out if the token still owns it."""
        now = time.monotonic()
        held = self._locks.get(key)
        if held is None or held[0] != token or now >= held[1]:
            return False
        self._locks[key] = (token, now + ttl)
        return True


# Register as default backend
register_storage_backend("memory", InMemoryStorage)
