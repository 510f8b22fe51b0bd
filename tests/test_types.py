"""Unit tests for core types, events and clocks."""

import pytest

from nuvolock.core.exceptions import InvalidAccountError
from nuvolock.core.types import (
    MIN_LOCK_DURATION,
    LockRecord,
    LockStatus,
    ReconciliationReport,
    normalize_account,
)
from nuvolock.ledger.events import EventLog, LockEvent, LockEventType, locked_event, unlocked_event
from nuvolock.storage.memory import InMemoryStorage
from nuvolock.utils.clock import Clock, FixedClock, SystemClock


class TestNormalizeAccount:
    def test_lowercases_and_strips(self):
        assert normalize_account("  0xABCdef ") == "0xabcdef"

    @pytest.mark.parametrize("account", ["", "   ", None, 123])
    def test_invalid_accounts(self, account):
        with pytest.raises(InvalidAccountError):
            normalize_account(account)


class TestLockRecord:
    """Tests for LockRecord dataclass."""

    def test_default_values(self):
        record = LockRecord(account="0xabc")
        assert record.amount == 0
        assert record.unlock_time == 0
        assert record.original_lock_time == 0
        assert record.status == LockStatus.EMPTY
        assert not record.is_active

    def test_is_unlockable(self):
        record = LockRecord(account="0xabc", amount=5, unlock_time=100, original_lock_time=50)
        assert record.status == LockStatus.ACTIVE
        assert not record.is_unlockable(99)
        assert record.is_unlockable(100)
        assert record.is_unlockable(101)

    def test_empty_record_never_unlockable(self):
        assert not LockRecord(account="0xabc", unlock_time=10).is_unlockable(1000)

    def test_dict_keeps_large_amounts_exact(self):
        amount = 123_456_789 * 10**18 + 1
        record = LockRecord(account="0xabc", amount=amount, unlock_time=10, original_lock_time=5)

        data = record.to_dict()
        assert data["amount"] == str(amount)
        assert LockRecord.from_dict(data) == record

    def test_min_lock_duration_is_one_week(self):
        assert MIN_LOCK_DURATION == 604800


class TestReconciliationReport:
    def test_balanced(self):
        report = ReconciliationReport(
            total_pulled=300, total_pushed=100, records_total=200, custodian_balance=200
        )
        assert report.custodied == 200
        assert report.is_balanced
        assert report.to_dict()["is_balanced"] is True

    def test_unbalanced(self):
        report = ReconciliationReport(
            total_pulled=300, total_pushed=100, records_total=200, custodian_balance=150
        )
        assert not report.is_balanced


class TestLockEvent:
    def test_locked_args(self):
        event = locked_event("0xabc", 100, 500, timestamp=400)
        assert event.event_type == LockEventType.LOCKED
        assert event.args == ("0xabc", 100, 500)

    def test_unlocked_args(self):
        event = unlocked_event("0xabc", 100, timestamp=600)
        assert event.event_type == LockEventType.UNLOCKED
        assert event.args == ("0xabc", 100)
        assert event.unlock_time is None

    def test_dict_round_trip(self):
        event = locked_event("0xabc", 10**20, 500, timestamp=400)
        assert LockEvent.from_dict(event.to_dict()) == event


class TestEventLog:
    """Tests for the persisted event log."""

    @pytest.fixture
    def log(self) -> EventLog:
        return EventLog(InMemoryStorage())

    @pytest.mark.asyncio
    async def test_record_assigns_sequence(self, log):
        first = await log.record(locked_event("0xabc", 1, 10, 0))
        second = await log.record(unlocked_event("0xabc", 1, 10))

        assert first.sequence == 1
        assert second.sequence == 2
        assert await log.query() == [second, first]

    @pytest.mark.asyncio
    async def test_remove(self, log):
        kept = await log.record(locked_event("0xabc", 1, 10, 0))
        dropped = await log.record(unlocked_event("0xabc", 1, 10))

        assert await log.remove(dropped.id) is True
        assert await log.remove(dropped.id) is False
        assert await log.query() == [kept]

    @pytest.mark.asyncio
    async def test_query_newest_first_and_filters(self, log):
        await log.record(locked_event("0xabc", 1, 10, 0))
        await log.record(locked_event("0xdef", 2, 10, 0))
        await log.record(unlocked_event("0xabc", 1, 10))

        events = await log.query(account="0xabc")
        assert [e.event_type for e in events] == [LockEventType.UNLOCKED, LockEventType.LOCKED]

        locked = await log.query(event_type=LockEventType.LOCKED)
        assert {e.account for e in locked} == {"0xabc", "0xdef"}

        assert len(await log.query(limit=1)) == 1
        assert len(await log.query(account="0xdef")) == 1


class TestClocks:
    def test_system_clock(self):
        clock = SystemClock()
        assert isinstance(clock, Clock)
        assert clock.now() > 1_600_000_000

    def test_fixed_clock_advance(self):
        clock = FixedClock(1000)
        assert clock.advance(50) == 1050
        assert clock.now() == 1050

        clock.set(10)
        assert clock.now() == 10

    def test_fixed_clock_cannot_go_back(self):
        with pytest.raises(ValueError):
            FixedClock(1000).advance(-1)
