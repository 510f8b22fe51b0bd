"""Utility helpers for NuvoLock."""

from nuvolock.utils.clock import Clock, FixedClock, SystemClock

__all__ = [
    "Clock",
    "FixedClock",
    "SystemClock",
]
