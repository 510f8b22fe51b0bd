"""
ParticipantRegistry - allow-list of accounts eligible to lock tokens.

A plain set-membership service; the ledger knows nothing about it. Gating
happens in the client facade.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from nuvolock.core.logging import get_logger
from nuvolock.core.types import normalize_account

if TYPE_CHECKING:
    from nuvolock.storage.base import StorageBackend

logger = get_logger("participants")


class ParticipantRegistry:
    """
    Storage-backed set of participant accounts.

    Accounts are matched case-insensitively.
    """

    COLLECTION = "participants"

    def __init__(self, storage: StorageBackend) -> None:
        self._storage = storage

    async def is_member(self, account: str) -> bool:
        """Check if account is on the allow-list."""
        data = await self._storage.get(self.COLLECTION, normalize_account(account))
        return data is not None

    async def add(self, account: str) -> bool:
        """
        Add an account.

        Returns:
            True if added, False if it was already a member
        """
        account = normalize_account(account)
        if await self.is_member(account):
            return False
        await self._storage.save(self.COLLECTION, account, {"account": account})
        logger.info(f"Added participant {account}")
        return True

    async def remove(self, account: str) -> bool:
        """
        Remove an account.

        Returns:
            True if removed, False if it was not a member
        """
        account = normalize_account(account)
        removed = await self._storage.delete(self.COLLECTION, account)
        if removed:
            logger.info(f"Removed participant {account}")
        return removed

    async def members(self) -> list[str]:
        """List all participant accounts, sorted."""
        raw = await self._storage.query(self.COLLECTION)
        return sorted(d["account"] for d in raw)
