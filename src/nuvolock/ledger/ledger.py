"""
Token time-lock ledger.

Each account may hold at most one lock: a quantity of token units taken
into custody until a chosen duration has elapsed. The ledger owns the
per-account LockRecords; only lock() and unlock() write them.

State machine per account:

    Empty --lock--> Active --unlock (time elapsed)--> Empty

Every other attempt is rejected without touching records or balances.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from dataclasses import dataclass, replace
from typing import TYPE_CHECKING, Any

from nuvolock.core.exceptions import (
    AccountBusyError,
    AlreadyLockedError,
    AmountMustBePositiveError,
    ConfigurationError,
    LockPeriodTooShortError,
    NothingToUnlockError,
    StillLockedError,
)
from nuvolock.core.logging import get_logger
from nuvolock.core.types import (
    MIN_LOCK_DURATION,
    LockRecord,
    ReconciliationReport,
    normalize_account,
)
from nuvolock.ledger.events import (
    EventLog,
    LockEvent,
    LockEventType,
    locked_event,
    unlocked_event,
)
from nuvolock.ledger.lock import AccountLockService
from nuvolock.storage.memory import InMemoryStorage
from nuvolock.utils.clock import Clock, SystemClock

if TYPE_CHECKING:
    from nuvolock.custody.base import TokenCustodian
    from nuvolock.storage.base import StorageBackend

logger = get_logger("ledger")

# Slack on top of the custodian's transfer bound for the ledger's own writes
MUTEX_TTL_MARGIN = 10.0


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def mutex_ttl_for(custodian: TokenCustodian) -> float:
    """
    Account mutex TTL that outlives the transfers made while holding it.

    A lock may need a pull and a refund push before it releases the mutex.
    """
    bound = custodian.transfer_timeout
    if bound is None:
        return AccountLockService.DEFAULT_TTL
    return max(AccountLockService.DEFAULT_TTL, 2 * bound + MUTEX_TTL_MARGIN)


@dataclass(frozen=True)
class LedgerConfig:
    """
    Immutable construction parameters for a LockLedger.

    Attributes:
        custodian: Token custodian that performs every transfer
        owner: Administrator identity of this ledger
        min_lock_duration: Shortest accepted lock duration in seconds
    """

    custodian: TokenCustodian
    owner: str
    min_lock_duration: int = MIN_LOCK_DURATION

    def __post_init__(self) -> None:
        if self.custodian is None:
            raise ConfigurationError("custodian is required")
        if not isinstance(self.owner, str) or not self.owner.strip():
            raise ConfigurationError("owner is required")
        if not _is_int(self.min_lock_duration) or self.min_lock_duration <= 0:
            raise ConfigurationError(
                "min_lock_duration must be a positive integer",
                details={"min_lock_duration": self.min_lock_duration},
            )


class LockLedger:
    """
    Single-lock-per-account token time-lock ledger.

    Example:
        >>> token = InMemoryTokenCustodian()
        >>> ledger = LockLedger(LedgerConfig(custodian=token, owner="0xowner"))
        >>> event = await ledger.lock("0xabc", 100, 7 * 24 * 3600)
        >>> event.args
        ('0xabc', 100, 1700604800)
    """

    RECORDS = "lock_records"
    COUNTERS = "lock_ledger_counters"

    def __init__(
        self,
        config: LedgerConfig,
        storage: StorageBackend | None = None,
        clock: Clock | None = None,
        account_locks: AccountLockService | None = None,
    ) -> None:
        """
        Initialize the ledger.

        Args:
            config: Immutable ledger configuration
            storage: Storage backend for records, counters and events
            clock: Time source, read once per operation
            account_locks: Per-account mutex (defaults to one over storage
                with a TTL sized by mutex_ttl_for)
        """
        self._config = config
        self._custodian = config.custodian
        self._storage = storage if storage is not None else InMemoryStorage()
        self._clock = clock or SystemClock()
        self._account_locks = account_locks or AccountLockService(
            self._storage, ttl=mutex_ttl_for(self._custodian)
        )
        self._events = EventLog(self._storage)

    @property
    def config(self) -> LedgerConfig:
        return self._config

    @property
    def owner(self) -> str:
        return self._config.owner

    @property
    def min_lock_duration(self) -> int:
        return self._config.min_lock_duration

    @property
    def custodian(self) -> TokenCustodian:
        return self._custodian

    # ==================== Records ====================

    async def _load(self, account: str) -> LockRecord:
        data = await self._storage.get(self.RECORDS, account)
        if not data:
            return LockRecord(account=account)
        return LockRecord.from_dict(data)

    async def _store(self, record: LockRecord) -> None:
        await self._storage.save(self.RECORDS, record.account, record.to_dict())

    async def _restore(self, previous: LockRecord) -> None:
        """Put back a record as it was before an aborted operation."""
        if previous.original_lock_time == 0:
            # never locked: leave no record behind
            await self._storage.delete(self.RECORDS, previous.account)
        else:
            await self._store(previous)

    async def get_lock_info(self, account: str) -> LockRecord:
        """
        Return the account's current lock record.

        Accounts that never locked get a zero-valued record.
        """
        return await self._load(normalize_account(account))

    # ==================== Operations ====================

    def _validate_lock_request(self, amount: Any, duration: Any) -> None:
        if not _is_int(amount) or amount <= 0:
            raise AmountMustBePositiveError(amount)
        if not _is_int(duration) or duration < self._config.min_lock_duration:
            raise LockPeriodTooShortError(duration, self._config.min_lock_duration)

    async def _rollback(self, undo: list[Callable[[], Awaitable[Any]]]) -> None:
        """Run compensating writes, newest first."""
        for step in reversed(undo):
            try:
                await step()
            except Exception:
                logger.exception("Compensating write failed, run reconcile() to inspect custody")

    async def lock(self, account: str, amount: int, duration: int) -> LockEvent:
        """
        Take amount token units from the account into custody for duration seconds.

        Args:
            account: Account locking its tokens
            amount: Token units to lock, an integer > 0
            duration: Lock period in seconds, an integer >= min_lock_duration

        Returns:
            The recorded Locked event

        Raises:
            AmountMustBePositiveError: amount is not a positive integer
            LockPeriodTooShortError: duration is not an integer or below the minimum
            AlreadyLockedError: the account already has an active lock
            AccountBusyError: the account mutex was held, or expired mid-operation
            CustodyTransferFailedError: the custodian refused the pull
        """
        account = normalize_account(account)
        self._validate_lock_request(amount, duration)

        async with self._account_locks.hold(account) as mutex:
            now = self._clock.now()
            record = await self._load(account)
            if record.is_active:
                logger.warning(f"Lock rejected for {account}: already locked until {record.unlock_time}")
                raise AlreadyLockedError(account, record.amount, record.unlock_time)

            reference = f"lock:{account}:{mutex}"
            await self._custodian.pull(account, amount, reference=reference)

            locked = LockRecord(
                account=account,
                amount=amount,
                unlock_time=now + duration,
                original_lock_time=duration,
            )
            undo: list[Callable[[], Awaitable[Any]]] = []
            try:
                if not await self._account_locks.refresh(account, mutex):
                    raise AccountBusyError(account)
                await self._store(locked)
                undo.append(lambda: self._restore(record))
                await self._storage.atomic_add(self.COUNTERS, "pulled", amount)
                undo.append(lambda: self._storage.atomic_add(self.COUNTERS, "pulled", -amount))
                event = await self._events.record(locked_event(account, amount, locked.unlock_time, now))
            except Exception:
                logger.error(f"Failed to commit lock for {account}, returning {amount} units")
                await self._rollback(undo)
                await self._custodian.push(account, amount, reference=f"refund:{reference}")
                raise

        logger.info(f"Locked {amount} units for {account} until {locked.unlock_time}")
        return event

    async def unlock(self, account: str) -> LockEvent:
        """
        Return the account's locked tokens once the unlock time is reached.

        The released record, counters and event are written before the push
        and rolled back if it fails. The push reference is fixed per lock
        cycle, so retrying after an ambiguous failure never pays out twice.

        Returns:
            The recorded Unlocked event

        Raises:
            NothingToUnlockError: the account has no active lock
            StillLockedError: the unlock time has not been reached
            CustodyTransferFailedError: the custodian refused the push
        """
        account = normalize_account(account)

        async with self._account_locks.hold(account) as mutex:
            now = self._clock.now()
            record = await self._load(account)
            if not record.is_active:
                logger.debug(f"Unlock rejected for {account}: nothing locked")
                raise NothingToUnlockError(account)
            if now < record.unlock_time:
                logger.debug(f"Unlock rejected for {account}: locked for {record.unlock_time - now}s more")
                raise StillLockedError(account, record.unlock_time, now)

            amount = record.amount
            undo: list[Callable[[], Awaitable[Any]]] = []
            try:
                # unlock_time and original_lock_time stay for audit until the next lock
                await self._store(replace(record, amount=0))
                undo.append(lambda: self._restore(record))
                await self._storage.atomic_add(self.COUNTERS, "pushed", amount)
                undo.append(lambda: self._storage.atomic_add(self.COUNTERS, "pushed", -amount))
                event = await self._events.record(unlocked_event(account, amount, now))
                undo.append(lambda: self._events.remove(event.id))
                await self._custodian.push(
                    account, amount, reference=f"unlock:{account}:{record.unlock_time}:{amount}"
                )
            except Exception:
                if await self._account_locks.refresh(account, mutex):
                    logger.warning(f"Unlock failed for {account}, restoring the lock record")
                    await self._rollback(undo)
                else:
                    logger.error(f"Unlock failed for {account} after its mutex expired, record left released")
                raise

        logger.info(f"Unlocked {amount} units for {account}")
        return event

    # ==================== Accounting ====================

    async def total_pulled(self) -> int:
        return await self._storage.get_counter(self.COUNTERS, "pulled")

    async def total_pushed(self) -> int:
        return await self._storage.get_counter(self.COUNTERS, "pushed")

    async def total_custodied(self) -> int:
        """Token units currently held in custody according to the ledger."""
        return await self.total_pulled() - await self.total_pushed()

    async def records(self, active_only: bool = False) -> list[LockRecord]:
        """List all lock records ever written, sorted by account."""
        raw = await self._storage.query(self.RECORDS)
        records = [LockRecord.from_dict(d) for d in raw]
        if active_only:
            records = [r for r in records if r.is_active]
        return sorted(records, key=lambda r: r.account)

    async def reconcile(self) -> ReconciliationReport:
        """
        Compare the ledger counters, the lock records and the custodian balance.
        """
        records = await self.records()
        report = ReconciliationReport(
            total_pulled=await self.total_pulled(),
            total_pushed=await self.total_pushed(),
            records_total=sum(r.amount for r in records),
            custodian_balance=await self._custodian.custody_balance(),
        )
        if not report.is_balanced:
            logger.warning(f"Custody accounting mismatch: {report.to_dict()}")
        return report

    async def events(
        self,
        account: str | None = None,
        event_type: LockEventType | None = None,
        limit: int = 100,
    ) -> list[LockEvent]:
        """Query the event log, newest first."""
        if account is not None:
            account = normalize_account(account)
        return await self._events.query(account=account, event_type=event_type, limit=limit)
