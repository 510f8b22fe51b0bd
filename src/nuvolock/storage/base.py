"""
Abstract Storage Backend for NuvoLock.

Provides pluggable persistence for lock records, ledger counters, the event
log and the participant registry.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any


class StorageBackend(ABC):
    """
    Abstract base class for storage backends.

    Provides simple CRUD operations, atomic integer counters and
    ownership-token locks. Implementations can use any persistence layer
    (memory, Redis, SQLite, etc.)
    """

    @abstractmethod
    async def save(
        self,
        collection: str,
        key: str,
        data: dict[str, Any],
    ) -> None:
        """
        Save data to storage.

        Args:
            collection: Collection/table name
            key: Unique key for the record
            data: Data to store (must be JSON-serializable)
        """
        ...

    @abstractmethod
    async def get(
        self,
        collection: str,
        key: str,
    ) -> dict[str, Any] | None:
        """
        Get data from storage.

        Args:
            collection: Collection/table name
            key: Record key

        Returns:
            Data dict or None if not found
        """
        ...

    @abstractmethod
    async def delete(
        self,
        collection: str,
        key: str,
    ) -> bool:
        """
        Delete data from storage.

        Returns:
            True if deleted, False if not found
        """
        ...

    @abstractmethod
    async def query(
        self,
        collection: str,
        filters: dict[str, Any] | None = None,
        limit: int | None = None,
        offset: int = 0,
    ) -> list[dict[str, Any]]:
        """
        Query data with optional filters.

        Args:
            collection: Collection/table name
            filters: Key-value pairs to filter by (exact match)
            limit: Maximum records to return
            offset: Number of records to skip

        Returns:
            List of matching records, each with its key under "_key"
        """
        ...

    @abstractmethod
    async def count(
        self,
        collection: str,
        filters: dict[str, Any] | None = None,
    ) -> int:
        """Count records in collection."""
        ...

    @abstractmethod
    async def clear(self, collection: str) -> int:
        """
        Clear all records from a collection.

        Returns:
            Number of records deleted
        """
        ...

    @abstractmethod
    async def atomic_add(
        self,
        collection: str,
        key: str,
        amount: int,
    ) -> int:
        """
        Atomically add an integer to the counter stored at key.

        Args:
            collection: Collection/table name
            key: Counter key
            amount: Amount to add (may be negative)

        Returns:
            New counter value
        """
        ...

    @abstractmethod
    async def get_counter(self, collection: str, key: str) -> int:
        """Read a counter written by atomic_add (0 if missing)."""
        ...

    @abstractmethod
    async def acquire_lock(
        self,
        key: str,
        ttl: float = 30,
    ) -> str | None:
        """
        Acquire an expiring lock.

        Args:
            key: Lock key (e.g. "lock:account:0xabc")
            ttl: TTL in seconds

        Returns:
            Unique ownership token if acquired, None if already held
        """
        ...

    @abstractmethod
    async def release_lock(
        self,
        key: str,
        token: str,
    ) -> bool:
        """
        Release a lock only if it is still owned by token.

        Returns:
            True if released, False if not held or token mismatch
        """
        ...

    @abstractmethod
    async def extend_lock(
        self,
        key: str,
        token: str,
        ttl: float = 30,
    ) -> bool:
        """
        Reset a lock's TTL only if it is still owned by token.

        Returns:
            True if extended, False if token no longer holds the lock
        """
        ...

    async def close(self) -> None:
        """Release any connections held by the backend."""
        return None


# Storage backend registry for dependency injection
_STORAGE_BACKENDS: dict[str, type[StorageBackend]] = {}


def register_storage_backend(name: str, backend_class: type[StorageBackend]) -> None:
    """Register a storage backend by name."""
    _STORAGE_BACKENDS[name] = backend_class


def get_storage_backend(name: str) -> type[StorageBackend] | None:
    """Get a registered storage backend by name."""
    return _STORAGE_BACKENDS.get(name)


def list_storage_backends() -> list[str]:
    """List all registered storage backend names."""
    return list(_STORAGE_BACKENDS.keys())
