"""
Account Lock Service.

Serializes lock/unlock operations per account so that two operations never
interleave on the same LockRecord. Distinct accounts never contend.
"""

from __future__ import annotations

import asyncio
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING

from nuvolock.core.exceptions import AccountBusyError
from nuvolock.core.logging import get_logger

if TYPE_CHECKING:
    from nuvolock.storage.base import StorageBackend

logger = get_logger("ledger.lock")


class AccountLockService:
    """
    Per-account mutex on top of the storage backend.

    Uses the backend's ownership-token locks, so the Redis backend also
    serializes across processes.
    """

    DEFAULT_TTL = 30.0

    def __init__(
        self,
        storage: StorageBackend,
        ttl: float = DEFAULT_TTL,
        retry_count: int = 3,
        retry_delay: float = 0.05,
    ) -> None:
        """
        Initialize lock service.

        Args:
            storage: Storage backend (Redis/Memory)
            ttl: Lock time-to-live in seconds
            retry_count: Number of retries if the account is held
            retry_delay: Delay between retries in seconds
        """
        self._storage = storage
        self._ttl = ttl
        self._retry_count = retry_count
        self._retry_delay = retry_delay

    @staticmethod
    def _lock_key(account: str) -> str:
        return f"lock:account:{account}"

    async def acquire(self, account: str) -> str | None:
        """
        Acquire the mutex for an account.

        Returns:
            Ownership token if acquired, None if still held after all retries
        """
        lock_key = self._lock_key(account)

        for i in range(self._retry_count + 1):
            token = await self._storage.acquire_lock(lock_key, self._ttl)
            if token:
                logger.debug(f"Acquired mutex for account {account} (token: {token[:8]}...)")
                return token

            if i < self._retry_count:
                logger.debug(f"Account {account} busy, retrying in {self._retry_delay}s...")
                await asyncio.sleep(self._retry_delay)

        logger.warning(f"Failed to acquire mutex for account {account} after {self._retry_count} retries")
        return None

    async def release(self, account: str, token: str) -> bool:
        """
        Release a previously acquired mutex.

        Returns:
            True if released, False if not held or token mismatch
        """
        result = await self._storage.release_lock(self._lock_key(account), token)
        if result:
            logger.debug(f"Released mutex for account {account}")
        return result

    @property
    def ttl(self) -> float:
        return self._ttl

    async def refresh(self, account: str, token: str) -> bool:
        """
        Confirm the mutex is still ours and restart its TTL.

        Returns:
            True if still held by token, False if it expired or was taken over
        """
        held = await self._storage.extend_lock(self._lock_key(account), token, self._ttl)
        if not held:
            logger.warning(f"Mutex for account {account} expired before the operation finished")
        return held

    @asynccontextmanager
    async def hold(self, account: str) -> AsyncIterator[str]:
        """
        Hold the account's mutex for the duration of the block.

        Raises:
            AccountBusyError: If the mutex could not be acquired
        """
        token = await self.acquire(account)
        if token is None:
            raise AccountBusyError(account)
        try:
            yield token
        finally:
            await self.release(account, token)
