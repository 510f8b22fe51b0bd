"""
Ledger module - token time-lock ledger for NuvoLock.

Provides the lock ledger, its event log and the per-account mutex.
"""

from nuvolock.ledger.events import EventLog, LockEvent, LockEventType
from nuvolock.ledger.ledger import LedgerConfig, LockLedger
from nuvolock.ledger.lock import AccountLockService

__all__ = [
    "LockLedger",
    "LedgerConfig",
    "EventLog",
    "LockEvent",
    "LockEventType",
    "AccountLockService",
]
