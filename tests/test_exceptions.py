"""Unit tests for exceptions module."""

import pytest

from nuvolock.core.exceptions import (
    AccountBusyError,
    AlreadyLockedError,
    AmountMustBePositiveError,
    ConfigurationError,
    CustodyTransferFailedError,
    InsufficientAllowanceError,
    InsufficientBalanceError,
    LockPeriodTooShortError,
    LockStateError,
    NothingToUnlockError,
    NotParticipantError,
    NuvoLockError,
    StillLockedError,
    UnauthorizedError,
    ValidationError,
)


class TestNuvoLockError:
    """Tests for base exception."""

    def test_basic_error(self) -> None:
        error = NuvoLockError("Something went wrong")

        assert str(error) == "Something went wrong"
        assert error.message == "Something went wrong"
        assert error.details == {}

    def test_error_with_details(self) -> None:
        error = NuvoLockError("Storage failed", details={"collection": "lock_records"})

        assert "Storage failed" in str(error)
        assert "Details:" in str(error)
        assert error.details["collection"] == "lock_records"

    @pytest.mark.parametrize(
        "error",
        [
            ConfigurationError("bad"),
            AmountMustBePositiveError(0),
            LockPeriodTooShortError(10, 20),
            AlreadyLockedError("0xabc", 1, 2),
            NothingToUnlockError("0xabc"),
            StillLockedError("0xabc", 100, 40),
            AccountBusyError("0xabc"),
            CustodyTransferFailedError("down", "pull"),
            NotParticipantError("0xabc"),
            UnauthorizedError("0xabc", "add participants"),
        ],
    )
    def test_is_catchable_as_base_type(self, error) -> None:
        assert isinstance(error, NuvoLockError)


class TestValidationErrors:
    def test_amount_must_be_positive(self) -> None:
        error = AmountMustBePositiveError(0)
        assert isinstance(error, ValidationError)
        assert error.message == "Amount must be greater than 0"
        assert error.amount == 0

    def test_lock_period_too_short(self) -> None:
        error = LockPeriodTooShortError(259200, 604800)
        assert isinstance(error, ValidationError)
        assert error.message == "Lock period is too short"
        assert error.details == {"duration": 259200, "minimum": 604800}


class TestLockStateErrors:
    def test_already_locked(self) -> None:
        error = AlreadyLockedError("0xabc", 100, 5000)
        assert isinstance(error, LockStateError)
        assert error.account == "0xabc"
        assert error.message == "Already locked"

    def test_still_locked_remaining(self) -> None:
        error = StillLockedError("0xabc", unlock_time=1000, now=400)
        assert error.message == "Tokens are still locked"
        assert error.remaining == 600
        assert error.details["remaining"] == 600

    def test_nothing_to_unlock(self) -> None:
        error = NothingToUnlockError("0xabc")
        assert isinstance(error, LockStateError)
        assert str(error) == "Nothing to unlock"


class TestCustodyErrors:
    def test_transfer_failed_str(self) -> None:
        error = CustodyTransferFailedError("token service down", "push", account="0xabc", amount=5)
        assert str(error) == "[custody:push] token service down"
        assert error.account == "0xabc"
        assert error.amount == 5

    def test_insufficient_balance(self) -> None:
        error = InsufficientBalanceError("pull", "0xabc", amount=150, current_balance=100)
        assert isinstance(error, CustodyTransferFailedError)
        assert error.shortfall == 50
        assert "Balance: 100, Required: 150, Shortfall: 50" in str(error)

    def test_insufficient_allowance(self) -> None:
        error = InsufficientAllowanceError("0xabc", amount=150, allowance=10)
        assert isinstance(error, CustodyTransferFailedError)
        assert error.operation == "pull"
        assert error.allowance == 10
