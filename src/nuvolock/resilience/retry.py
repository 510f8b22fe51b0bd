"""
Retry Strategies using Tenacity.

Only read-only calls to external services are retried. Custody transfers
are never retried here; a failed lock or unlock is reported to the caller.
"""

from __future__ import annotations

from typing import Any, Callable

import httpx
from tenacity import (
    AsyncRetrying,
    retry_if_exception,
    stop_after_attempt,
    wait_exponential,
)

from nuvolock.core.logging import get_logger

logger = get_logger("retry")


def is_transient_error(exception: BaseException) -> bool:
    """Check if exception is a transient network/infrastructure error."""
    if isinstance(exception, (httpx.TimeoutException, httpx.NetworkError)):
        return True
    if isinstance(exception, httpx.HTTPStatusError):
        status = exception.response.status_code
        return status == 429 or 500 <= status < 600
    return False


async def execute_with_retry(
    func: Callable[..., Any],
    *args: Any,
    attempts: int = 3,
    max_wait: float = 4.0,
    **kwargs: Any,
) -> Any:
    """Execute an async function, retrying transient errors with exponential backoff."""
    async for attempt in AsyncRetrying(
        retry=retry_if_exception(is_transient_error),
        wait=wait_exponential(multiplier=0.5, min=0, max=max_wait),
        stop=stop_after_attempt(attempts),
        reraise=True,
        before_sleep=lambda state: logger.warning(
            f"Retrying {getattr(func, '__name__', 'call')}... (Attempt {state.attempt_number})"
        ),
    ):
        with attempt:
            return await func(*args, **kwargs)
