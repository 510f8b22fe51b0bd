"""
Clock sources for the lock ledger.

The ledger reads time exactly once per operation from an injected clock,
never from time.time() directly.
"""

from __future__ import annotations

import time
from typing import Protocol, runtime_checkable


@runtime_checkable
class Clock(Protocol):
    """Anything that returns the current time as integer epoch seconds."""

    def now(self) -> int: ...


class SystemClock:
    """Wall-clock time, truncated to whole seconds."""

    def now(self) -> int:
        return int(time.time())


class FixedClock:
    """
    Manually driven clock.

    Useful for tests and simulations that need to move time forward
    without sleeping.

    Example:
        >>> clock = FixedClock(1_700_000_000)
        >>> clock.advance(7 * 24 * 3600)
        >>> clock.now()
        1700604800
    """

    def __init__(self, start: int = 0) -> None:
        self._now = int(start)

    def now(self) -> int:
        return self._now

    def set(self, timestamp: int) -> None:
        self._now = int(timestamp)

    def advance(self, seconds: int) -> int:
        """Move the clock forward and return the new time."""
        if seconds < 0:
            raise ValueError("Clock cannot move backwards")
        self._now += int(seconds)
        return self._now
