"""Tests for ParticipantRegistry."""

import pytest

from nuvolock.core.exceptions import InvalidAccountError
from nuvolock.participants import ParticipantRegistry
from nuvolock.storage.memory import InMemoryStorage


@pytest.fixture
def registry() -> ParticipantRegistry:
    return ParticipantRegistry(InMemoryStorage())


@pytest.mark.asyncio
async def test_add_and_is_member(registry):
    assert await registry.is_member("0xabc") is False
    assert await registry.add("0xABC") is True
    assert await registry.is_member("0xabc") is True


@pytest.mark.asyncio
async def test_add_twice(registry):
    await registry.add("0xabc")
    assert await registry.add("0xabc") is False
    assert await registry.members() == ["0xabc"]


@pytest.mark.asyncio
async def test_remove(registry):
    await registry.add("0xabc")
    assert await registry.remove("0xabc") is True
    assert await registry.remove("0xabc") is False
    assert await registry.is_member("0xabc") is False


@pytest.mark.asyncio
async def test_members_sorted(registry):
    await registry.add("0xdef")
    await registry.add("0xabc")
    assert await registry.members() == ["0xabc", "0xdef"]


@pytest.mark.asyncio
async def test_invalid_account(registry):
    with pytest.raises(InvalidAccountError):
        await registry.add("")
