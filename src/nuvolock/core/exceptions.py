"""
Exception hierarchy for NuvoLock.

All NuvoLock exceptions inherit from NuvoLockError for easy catching.
Every rejected operation leaves lock records and custody balances untouched.
"""

from __future__ import annotations

from typing import Any


class NuvoLockError(Exception):
    """
    Base exception for all NuvoLock errors.

    Example:
        >>> try:
        ...     await ledger.lock("0xabc", 100, 7 * 24 * 3600)
        ... except NuvoLockError as e:
        ...     print(f"Lock rejected: {e}")
    """

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        if self.details:
            return f"{self.message} | Details: {self.details}"
        return self.message


class ConfigurationError(NuvoLockError):
    """
    Configuration is missing or invalid.

    Raised when:
    - Required configuration values are not provided
    - Configuration values fail validation
    - Environment variables cannot be parsed
    """

    pass


# ==================== Validation ====================


class ValidationError(NuvoLockError):
    """
    Caller input was rejected before any side effect.
    """

    pass


class InvalidAccountError(ValidationError):
    """Account identifier is empty or not a string."""

    def __init__(self, message: str, account: Any = None) -> None:
        super().__init__(message, details={"account": account})
        self.account = account


class AmountMustBePositiveError(ValidationError):
    """Lock amount is zero, negative or not an integer."""

    def __init__(self, amount: Any) -> None:
        super().__init__("Amount must be greater than 0", details={"amount": amount})
        self.amount = amount


class LockPeriodTooShortError(ValidationError):
    """Requested lock duration is below the configured minimum or not an integer."""

    def __init__(self, duration: Any, minimum: int) -> None:
        super().__init__(
            "Lock period is too short",
            details={"duration": duration, "minimum": minimum},
        )
        self.duration = duration
        self.minimum = minimum


# ==================== State conflicts ====================


class LockStateError(NuvoLockError):
    """
    Operation conflicts with the account's current lock record.
    """

    def __init__(
        self,
        message: str,
        account: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, details)
        self.account = account


class AlreadyLockedError(LockStateError):
    """The account already holds an active lock."""

    def __init__(self, account: str, amount: int, unlock_time: int) -> None:
        super().__init__(
            "Already locked",
            account,
            details={"amount": amount, "unlock_time": unlock_time},
        )
        self.amount = amount
        self.unlock_time = unlock_time


class NothingToUnlockError(LockStateError):
    """
    The account has no active lock.

    Covers both "never locked" and "already unlocked".
    """

    def __init__(self, account: str) -> None:
        super().__init__("Nothing to unlock", account)


class StillLockedError(LockStateError):
    """The lock's unlock time has not been reached."""

    def __init__(self, account: str, unlock_time: int, now: int) -> None:
        super().__init__(
            "Tokens are still locked",
            account,
            details={"unlock_time": unlock_time, "remaining": unlock_time - now},
        )
        self.unlock_time = unlock_time
        self.remaining = unlock_time - now


class AccountBusyError(LockStateError):
    """Another operation currently holds the account's mutex."""

    def __init__(self, account: str) -> None:
        super().__init__("Account is busy, retry later", account)


# ==================== Custody ====================


class CustodyTransferFailedError(NuvoLockError):
    """
    The token custodian refused or failed a transfer.

    Raised when:
    - pull: the account's balance or allowance is insufficient
    - push: custody does not hold enough tokens
    - the remote token service is unreachable or answers with an error
    """

    def __init__(
        self,
        message: str,
        operation: str,  # "pull" or "push"
        account: str | None = None,
        amount: int | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, details)
        self.operation = operation
        self.account = account
        self.amount = amount

    def __str__(self) -> str:
        return f"[custody:{self.operation}] {self.message}"


class InsufficientBalanceError(CustodyTransferFailedError):
    """Holder does not have enough token units for the transfer."""

    def __init__(
        self,
        operation: str,
        account: str,
        amount: int,
        current_balance: int,
    ) -> None:
        super().__init__(
            "Insufficient balance",
            operation,
            account=account,
            amount=amount,
            details={"balance": current_balance},
        )
        self.current_balance = current_balance
        self.shortfall = amount - current_balance

    def __str__(self) -> str:
        return (
            f"[custody:{self.operation}] {self.message} | "
            f"Balance: {self.current_balance}, Required: {self.amount}, "
            f"Shortfall: {self.shortfall}"
        )


class InsufficientAllowanceError(CustodyTransferFailedError):
    """Account has not approved enough token units for the ledger."""

    def __init__(self, account: str, amount: int, allowance: int) -> None:
        super().__init__(
            "Insufficient allowance",
            "pull",
            account=account,
            amount=amount,
            details={"allowance": allowance},
        )
        self.allowance = allowance


# ==================== Outer-layer gates ====================


class NotParticipantError(NuvoLockError):
    """Account is not on the participant allow-list."""

    def __init__(self, account: str) -> None:
        super().__init__(f"Account {account} is not a participant", details={"account": account})
        self.account = account


class UnauthorizedError(NuvoLockError):
    """Caller is not allowed to perform an administrative action."""

    def __init__(self, caller: str, action: str) -> None:
        super().__init__(
            f"Caller {caller} is not authorized to {action}",
            details={"caller": caller, "action": action},
        )
        self.caller = caller
        self.action = action
