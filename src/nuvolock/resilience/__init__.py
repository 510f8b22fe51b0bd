"""Resilience helpers for calls to external services."""

from nuvolock.resilience.retry import execute_with_retry, is_transient_error

__all__ = ["execute_with_retry", "is_transient_error"]
