"""
Type definitions for NuvoLock.

Lock records, reconciliation reports and account helpers shared by the
ledger, the custodians and the client facade.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any

from nuvolock.core.exceptions import InvalidAccountError

# One week, in seconds
MIN_LOCK_DURATION = 7 * 24 * 60 * 60


class LockStatus(str, Enum):
    """Lifecycle state of an account's lock record."""

    EMPTY = "empty"
    ACTIVE = "active"


def normalize_account(account: Any) -> str:
    """
    Normalize an account identifier.

    EVM addresses are case-insensitive, so identifiers are stripped and
    lower-cased before they key any record.

    Raises:
        InvalidAccountError: If the identifier is not a non-empty string
    """
    if not isinstance(account, str) or not account.strip():
        raise InvalidAccountError("Account identifier must be a non-empty string", account)
    return account.strip().lower()


@dataclass(frozen=True)
class LockRecord:
    """
    Lock state of a single account.

    Attributes:
        account: Normalized account identifier
        amount: Token units held in custody; 0 means no active lock
        unlock_time: Epoch seconds from which withdrawal is allowed
        original_lock_time: Duration in seconds requested at lock creation
    """

    account: str
    amount: int = 0
    unlock_time: int = 0
    original_lock_time: int = 0

    @property
    def is_active(self) -> bool:
        return self.amount > 0

    @property
    def status(self) -> LockStatus:
        return LockStatus.ACTIVE if self.is_active else LockStatus.EMPTY

    def is_unlockable(self, now: int) -> bool:
        """Check whether the lock exists and its unlock time has been reached."""
        return self.is_active and now >= self.unlock_time

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for storage."""
        # Token amounts can exceed 2**53, keep them as strings
        return {
            "account": self.account,
            "amount": str(self.amount),
            "unlock_time": self.unlock_time,
            "original_lock_time": self.original_lock_time,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> LockRecord:
        """Create LockRecord from dictionary."""
        return cls(
            account=data["account"],
            amount=int(data.get("amount", "0")),
            unlock_time=int(data.get("unlock_time", 0)),
            original_lock_time=int(data.get("original_lock_time", 0)),
        )


@dataclass(frozen=True)
class ReconciliationReport:
    """
    Snapshot comparing the ledger's custody accounting with the custodian.

    Attributes:
        total_pulled: Token units ever pulled into custody
        total_pushed: Token units ever pushed out of custody
        records_total: Sum of all lock records' amounts
        custodian_balance: Balance the custodian holds for the ledger
    """

    total_pulled: int
    total_pushed: int
    records_total: int
    custodian_balance: int

    @property
    def custodied(self) -> int:
        return self.total_pulled - self.total_pushed

    @property
    def is_balanced(self) -> bool:
        return self.custodied == self.records_total == self.custodian_balance

    def to_dict(self) -> dict[str, Any]:
        return {
            "total_pulled": str(self.total_pulled),
            "total_pushed": str(self.total_pushed),
            "custodied": str(self.custodied),
            "records_total": str(self.records_total),
            "custodian_balance": str(self.custodian_balance),
            "is_balanced": self.is_balanced,
        }
