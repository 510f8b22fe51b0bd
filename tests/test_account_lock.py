"""Tests for AccountLockService."""

import asyncio

import pytest

from nuvolock.core.exceptions import AccountBusyError
from nuvolock.ledger.lock import AccountLockService
from nuvolock.storage.memory import InMemoryStorage


@pytest.fixture
def memory_storage():
    """Provides memory storage."""
    return InMemoryStorage()


@pytest.fixture
def lock_service(memory_storage):
    """Provides lock service with fast retries."""
    return AccountLockService(memory_storage, retry_count=1, retry_delay=0.01)


@pytest.mark.asyncio
async def test_acquire_and_release(lock_service):
    """Test basic acquire and release."""
    token = await lock_service.acquire("0xabc")
    assert token is not None
    assert isinstance(token, str)

    # Held: retries run out and acquire returns None
    assert await lock_service.acquire("0xabc") is None

    assert await lock_service.release("0xabc", token) is True

    token_2 = await lock_service.acquire("0xabc")
    assert token_2 is not None
    await lock_service.release("0xabc", token_2)


@pytest.mark.asyncio
async def test_accounts_are_independent(lock_service):
    token_a = await lock_service.acquire("0xaaa")
    token_b = await lock_service.acquire("0xbbb")
    assert token_a is not None
    assert token_b is not None


@pytest.mark.asyncio
async def test_ttl_expiry(memory_storage):
    """Test that a crashed holder's mutex expires after TTL."""
    service = AccountLockService(memory_storage, ttl=1, retry_count=0)

    assert await service.acquire("0xabc") is not None
    assert await service.acquire("0xabc") is None

    await asyncio.sleep(1.1)

    assert await service.acquire("0xabc") is not None


@pytest.mark.asyncio
async def test_retry_acquires_after_release(memory_storage):
    """Test that retries pick up the mutex once the holder releases it."""
    service = AccountLockService(memory_storage, retry_count=5, retry_delay=0.05)
    token = await service.acquire("0xabc")

    async def delayed_release():
        await asyncio.sleep(0.1)
        await service.release("0xabc", token)

    release_task = asyncio.create_task(delayed_release())

    token_2 = await service.acquire("0xabc")
    assert token_2 is not None

    await release_task
    await service.release("0xabc", token_2)


@pytest.mark.asyncio
async def test_wrong_token_does_not_release(lock_service):
    token = await lock_service.acquire("0xabc")

    assert await lock_service.release("0xabc", "wrong-token") is False
    assert await lock_service.acquire("0xabc") is None
    assert await lock_service.release("0xabc", token) is True


@pytest.mark.asyncio
async def test_hold_releases_on_error(lock_service):
    with pytest.raises(RuntimeError):
        async with lock_service.hold("0xabc"):
            raise RuntimeError("boom")

    async with lock_service.hold("0xabc") as token:
        assert token is not None


@pytest.mark.asyncio
async def test_hold_raises_when_busy(lock_service):
    async with lock_service.hold("0xabc"):
        with pytest.raises(AccountBusyError) as exc_info:
            async with lock_service.hold("0xabc"):
                pass

    assert exc_info.value.account == "0xabc"


@pytest.mark.asyncio
async def test_refresh_extends_held_mutex(memory_storage):
    service = AccountLockService(memory_storage, ttl=0.1, retry_count=0)
    token = await service.acquire("0xabc")

    await asyncio.sleep(0.06)
    assert await service.refresh("0xabc", token) is True
    await asyncio.sleep(0.06)

    # Past the original TTL, still held thanks to the refresh
    assert await service.acquire("0xabc") is None


@pytest.mark.asyncio
async def test_refresh_fails_once_taken_over(memory_storage):
    service = AccountLockService(memory_storage, ttl=0.05, retry_count=0)
    token = await service.acquire("0xabc")

    await asyncio.sleep(0.1)
    other = await service.acquire("0xabc")

    assert other is not None
    assert await service.refresh("0xabc", token) is False
    assert await service.refresh("0xabc", other) is True
