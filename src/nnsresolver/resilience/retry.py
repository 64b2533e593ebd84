"""
Retry strategies using Tenacity.

Transient transport failures against an RPC endpoint are retried with
exponential backoff; everything else fails fast.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from typing import Any, TypeVar

import httpx
from tenacity import (
    AsyncRetrying,
    RetryCallState,
    retry_if_exception,
    stop_after_attempt,
    wait_exponential,
)

from nnsresolver.core.logging import get_logger

logger = get_logger("resilience.retry")

T = TypeVar("T")

RETRYABLE_STATUS_CODES = frozenset({429, 502, 503, 504})


def is_transient_error(exception: BaseException) -> bool:
    """Check if exception is a transient network/infrastructure error."""
    if isinstance(exception, (httpx.TimeoutException, httpx.NetworkError)):
        return True
    if isinstance(exception, httpx.HTTPStatusError):
        return exception.response.status_code in RETRYABLE_STATUS_CODES
    return False


def _log_before_sleep(retry_state: RetryCallState) -> None:
    outcome = retry_state.outcome
    error = outcome.exception() if outcome is not None else None
    logger.debug(f"Retrying RPC request (attempt {retry_state.attempt_number}): {error}")


def transient_retrying(attempts: int = 3, backoff: float = 0.25) -> AsyncRetrying:
    """Build an AsyncRetrying policy for transient transport errors."""
    return AsyncRetrying(
        retry=retry_if_exception(is_transient_error),
        wait=wait_exponential(multiplier=backoff, min=0, max=4),
        stop=stop_after_attempt(attempts),
        reraise=True,
        before_sleep=_log_before_sleep,
    )


async def execute_with_retry(
    func: Callable[..., Awaitable[T]],
    *args: Any,
    attempts: int = 3,
    backoff: float = 0.25,
    **kwargs: Any,
) -> T:
    """Execute an async function with the transient-error retry policy."""
    return await transient_retrying(attempts, backoff)(func, *args, **kwargs)
