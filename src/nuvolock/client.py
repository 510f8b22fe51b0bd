"""NuvoLock client - main entry point."""

from __future__ import annotations

from typing import Any

from nuvolock.core.config import Config
from nuvolock.core.exceptions import (
    ConfigurationError,
    NotParticipantError,
    UnauthorizedError,
)
from nuvolock.core.logging import configure_logging, get_logger
from nuvolock.core.types import LockRecord, ReconciliationReport, normalize_account
from nuvolock.custody.base import TokenCustodian
from nuvolock.custody.http import HttpTokenCustodian
from nuvolock.ledger import LedgerConfig, LockEvent, LockEventType, LockLedger
from nuvolock.participants import ParticipantRegistry
from nuvolock.storage import StorageBackend, get_storage
from nuvolock.utils.clock import Clock


class NuvoLock:
    """
    Main client for NuvoLock.

    Wires configuration, storage, the token custodian, the participant
    allow-list and the lock ledger together. Participant gating and
    owner-only administration live here, outside the ledger.

    Example:
        >>> token = InMemoryTokenCustodian()
        >>> async with NuvoLock(Config(owner="0xowner"), custodian=token) as nuvo:
        ...     await nuvo.lock("0xabc", 100, 7 * 24 * 3600)
    """

    def __init__(
        self,
        config: Config | None = None,
        custodian: TokenCustodian | None = None,
        storage: StorageBackend | None = None,
        clock: Clock | None = None,
        log_level: int | str | None = None,
        **config_overrides: Any,
    ) -> None:
        """
        Initialize NuvoLock client.

        Args:
            config: Configuration (or loaded from NUVOLOCK_* env vars)
            custodian: Token custodian (or HttpTokenCustodian from config.custodian_url)
            storage: Storage backend (or from config.storage_backend)
            clock: Time source for the ledger
            log_level: Overrides config.log_level
            **config_overrides: Passed to Config.from_env when config is None
        """
        if config is None:
            config = Config.from_env(**config_overrides)
        self._config = config

        configure_logging(level=log_level or config.log_level)
        self._logger = get_logger("client")

        if storage is None:
            storage_kwargs = {}
            if config.storage_backend == "redis" and config.redis_url:
                storage_kwargs["redis_url"] = config.redis_url
            storage = get_storage(config.storage_backend, **storage_kwargs)
        self._storage = storage

        if custodian is None:
            if not config.custodian_url:
                raise ConfigurationError(
                    "No token custodian: pass custodian= or set NUVOLOCK_CUSTODIAN_URL"
                )
            custodian = HttpTokenCustodian(
                config.custodian_url,
                api_key=config.custodian_api_key,
                timeout=config.request_timeout,
            )
        self._custodian = custodian

        self._ledger = LockLedger(
            LedgerConfig(
                custodian=custodian,
                owner=normalize_account(config.owner),
                min_lock_duration=config.min_lock_duration,
            ),
            storage=self._storage,
            clock=clock,
        )
        self._participants = ParticipantRegistry(self._storage)

        self._logger.info(
            f"NuvoLock ready (storage: {config.storage_backend}, "
            f"min lock: {config.min_lock_duration}s, "
            f"participant gate: {'on' if config.require_participant else 'off'})"
        )

    @property
    def config(self) -> Config:
        return self._config

    @property
    def ledger(self) -> LockLedger:
        return self._ledger

    @property
    def participants(self) -> ParticipantRegistry:
        return self._participants

    async def __aenter__(self) -> NuvoLock:
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.close()

    async def close(self) -> None:
        """Close custodian and storage connections."""
        await self._custodian.close()
        await self._storage.close()

    # ==================== Gates ====================

    async def _require_participant(self, account: str) -> None:
        if self._config.require_participant and not await self._participants.is_member(account):
            self._logger.warning(f"Rejected non-participant {account}")
            raise NotParticipantError(normalize_account(account))

    def _require_owner(self, caller: str, action: str) -> None:
        if normalize_account(caller) != self._ledger.owner:
            raise UnauthorizedError(caller, action)

    # ==================== Lock operations ====================

    async def lock(self, account: str, amount: int, duration: int) -> LockEvent:
        """Lock amount token units of account for duration seconds."""
        await self._require_participant(account)
        return await self._ledger.lock(account, amount, duration)

    async def unlock(self, account: str) -> LockEvent:
        """Release account's tokens once the lock period has passed."""
        await self._require_participant(account)
        return await self._ledger.unlock(account)

    async def get_lock_info(self, account: str) -> LockRecord:
        return await self._ledger.get_lock_info(account)

    async def events(
        self,
        account: str | None = None,
        event_type: LockEventType | None = None,
        limit: int = 100,
    ) -> list[LockEvent]:
        return await self._ledger.events(account=account, event_type=event_type, limit=limit)

    async def reconcile(self) -> ReconciliationReport:
        return await self._ledger.reconcile()

    # ==================== Participants ====================

    async def is_participant(self, account: str) -> bool:
        return await self._participants.is_member(account)

    async def add_participant(self, account: str, caller: str) -> bool:
        """Add account to the allow-list. Only the owner may call this."""
        self._require_owner(caller, "add participants")
        return await self._participants.add(account)

    async def remove_participant(self, account: str, caller: str) -> bool:
        """Remove account from the allow-list. Only the owner may call this."""
        self._require_owner(caller, "remove participants")
        return await self._participants.remove(account)
