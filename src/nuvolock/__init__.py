"""
NuvoLock - Token time-lock ledger

Each account locks a quantity of tokens into custody for a chosen period;
once the period has passed the tokens can be withdrawn.

Usage:
    >>> from nuvolock import NuvoLock, Config, InMemoryTokenCustodian
    >>>
    >>> token = InMemoryTokenCustodian()
    >>> token.mint("0xabc", 1000)
    >>> token.approve("0xabc", 1000)
    >>>
    >>> nuvo = NuvoLock(Config(owner="0xowner"), custodian=token)
    >>> await nuvo.lock("0xabc", 100, 7 * 24 * 3600)
    >>> await nuvo.get_lock_info("0xabc")
"""

from nuvolock.client import NuvoLock
from nuvolock.core.config import Config
from nuvolock.core.exceptions import (
    AccountBusyError,
    AlreadyLockedError,
    AmountMustBePositiveError,
    ConfigurationError,
    CustodyTransferFailedError,
    InsufficientAllowanceError,
    InsufficientBalanceError,
    InvalidAccountError,
    LockPeriodTooShortError,
    LockStateError,
    NotParticipantError,
    NothingToUnlockError,
    NuvoLockError,
    StillLockedError,
    UnauthorizedError,
    ValidationError,
)
from nuvolock.core.types import (
    MIN_LOCK_DURATION,
    LockRecord,
    LockStatus,
    ReconciliationReport,
)
from nuvolock.custody import HttpTokenCustodian, InMemoryTokenCustodian, TokenCustodian
from nuvolock.ledger import LedgerConfig, LockEvent, LockEventType, LockLedger
from nuvolock.participants import ParticipantRegistry
from nuvolock.utils.clock import Clock, FixedClock, SystemClock

__version__ = "0.1.0"
__all__ = [
    # Main Client
    "NuvoLock",
    "Config",
    # Ledger
    "LockLedger",
    "LedgerConfig",
    "LockRecord",
    "LockStatus",
    "LockEvent",
    "LockEventType",
    "ReconciliationReport",
    "MIN_LOCK_DURATION",
    # Custody
    "TokenCustodian",
    "InMemoryTokenCustodian",
    "HttpTokenCustodian",
    # Participants
    "ParticipantRegistry",
    # Clocks
    "Clock",
    "SystemClock",
    "FixedClock",
    # Exceptions
    "NuvoLockError",
    "ConfigurationError",
    "ValidationError",
    "InvalidAccountError",
    "AmountMustBePositiveError",
    "LockPeriodTooShortError",
    "LockStateError",
    "AlreadyLockedError",
    "NothingToUnlockError",
    "StillLockedError",
    "AccountBusyError",
    "CustodyTransferFailedError",
    "InsufficientBalanceError",
    "InsufficientAllowanceError",
    "NotParticipantError",
    "UnauthorizedError",
]
