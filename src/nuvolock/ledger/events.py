"""
Event log for the lock ledger.

Every successful lock or unlock records exactly one event; rejected
operations record nothing. An operation that fails after writing its event
removes it again."""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from nuvolock.storage.base import StorageBackend


class LockEventType(str, Enum):
    """Types of ledger events."""

    LOCKED = "locked"
    UNLOCKED = "unlocked"


@dataclass(frozen=True)
class LockEvent:
    """
    A single ledger event.

    Attributes:
        event_type: Locked or Unlocked
        account: Account the event concerns
        amount: Token units locked or released
        unlock_time: Unlock timestamp (Locked events only)
        timestamp: Ledger time at which the operation committed
        sequence: Position in the event log, starting at 1
        id: Unique event ID
    """

    event_type: LockEventType
    account: str
    amount: int
    unlock_time: int | None = None
    timestamp: int = 0
    sequence: int = 0
    id: str = field(default_factory=lambda: str(uuid.uuid4()))

    @property
    def args(self) -> tuple[Any, ...]:
        """Event arguments: (account, amount, unlock_time) or (account, amount)."""
        if self.event_type == LockEventType.LOCKED:
            return (self.account, self.amount, self.unlock_time)
        return (self.account, self.amount)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for storage."""
        return {
            "id": self.id,
            "event_type": self.event_type.value,
            "account": self.account,
            "amount": str(self.amount),
            "unlock_time": self.unlock_time,
            "timestamp": self.timestamp,
            "sequence": self.sequence,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> LockEvent:
        """Create LockEvent from dictionary."""
        return cls(
            id=data["id"],
            event_type=LockEventType(data["event_type"]),
            account=data["account"],
            amount=int(data["amount"]),
            unlock_time=data.get("unlock_time"),
            timestamp=int(data.get("timestamp", 0)),
            sequence=int(data.get("sequence", 0)),
        )


def locked_event(account: str, amount: int, unlock_time: int, timestamp: int) -> LockEvent:
    return LockEvent(LockEventType.LOCKED, account, amount, unlock_time, timestamp)


def unlocked_event(account: str, amount: int, timestamp: int) -> LockEvent:
    return LockEvent(LockEventType.UNLOCKED, account, amount, None, timestamp)


class EventLog:
    """
    Log of ledger events using StorageBackend.
    """

    COLLECTION = "lock_events"
    COUNTERS = "lock_event_counters"

    def __init__(self, storage: StorageBackend) -> None:
        self._storage = storage

    async def record(self, event: LockEvent) -> LockEvent:
        """
        Append an event and return it with its sequence number assigned.
        """
        sequence = await self._storage.atomic_add(self.COUNTERS, "sequence", 1)
        stored = LockEvent(
            event_type=event.event_type,
            account=event.account,
            amount=event.amount,
            unlock_time=event.unlock_time,
            timestamp=event.timestamp,
            sequence=sequence,
            id=event.id,
        )
        await self._storage.save(self.COLLECTION, stored.id, stored.to_dict())
        return stored

    async def remove(self, event_id: str) -> bool:
        """Drop the event of an operation that was rolled back."""
        return await self._storage.delete(self.COLLECTION, event_id)

    async def query(
        self,
        account: str | None = None,
        event_type: LockEventType | None = None,
        limit: int = 100,
    ) -> list[LockEvent]:
        """
        Query events, newest first.

        Args:
            account: Filter by account
            event_type: Filter by type
            limit: Maximum events to return
        """
        filters: dict[str, Any] = {}
        if account:
            filters["account"] = account
        if event_type:
            filters["event_type"] = event_type.value

        raw_results = await self._storage.query(self.COLLECTION, filters=filters)
        events = [LockEvent.from_dict(d) for d in raw_results]
        events.sort(key=lambda e: e.sequence, reverse=True)
        return events[:limit]
