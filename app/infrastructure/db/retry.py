"""
Retry utilities for transient failures.

``retry_with_backoff`` is the generic loop (exponential backoff, caller
decides which errors are transient). ``retry_on_deadlock`` specializes it
for database lock conflicts and is what the write endpoints use.
"""

import asyncio
import logging
from typing import Awaitable, Callable, TypeVar

from sqlalchemy.exc import DBAPIError, OperationalError

logger = logging.getLogger(__name__)

T = TypeVar("T")

# MySQL error codes
MYSQL_DEADLOCK_ERROR = "1213"
MYSQL_LOCK_WAIT_TIMEOUT = "1205"
# PostgreSQL SQLSTATE
POSTGRES_DEADLOCK_DETECTED = "40P01"
POSTGRES_SERIALIZATION_FAILURE = "40001"
SQLITE_LOCKED = "database is locked"

_LOCK_MARKERS = (
    MYSQL_DEADLOCK_ERROR,
    MYSQL_LOCK_WAIT_TIMEOUT,
    POSTGRES_DEADLOCK_DETECTED,
    POSTGRES_SERIALIZATION_FAILURE,
    SQLITE_LOCKED,
)


def is_deadlock_error(error: Exception) -> bool:
    """True for lock conflicts worth retrying (deadlock, lock wait, locked db file)."""
    if isinstance(error, (OperationalError, DBAPIError)):
        error_str = str(error)
        return any(marker in error_str for marker in _LOCK_MARKERS)
    return False


async def retry_with_backoff(
    func: Callable[[], Awaitable[T]],
    should_retry: Callable[[Exception], bool],
    max_attempts: int = 3,
    base_delay: float = 0.1,
    operation: str = "operation",
) -> T:
    """
    Await ``func()`` until it succeeds, retrying errors accepted by ``should_retry``.

    Delay between attempts: ``base_delay * (2 ** attempt)``. Errors rejected
    by ``should_retry`` propagate immediately; the last retryable error
    propagates once ``max_attempts`` is exhausted.
    """
    for attempt in range(max_attempts):
        try:
            return await func()
        except Exception as e:
            if not should_retry(e):
                raise

            if attempt >= max_attempts - 1:
                logger.error(
                    "Transient failure persists after max retries",
                    extra={"operation": operation, "attempts": max_attempts, "error": str(e)},
                )
                raise

            delay = base_delay * (2 ** attempt)
            logger.warning(
                "Transient failure, retrying",
                extra={
                    "operation": operation,
                    "attempt": attempt + 1,
                    "max_attempts": max_attempts,
                    "retry_delay": delay,
                    "error": str(e),
                },
            )
            await asyncio.sleep(delay)

    raise RuntimeError("retry_with_backoff called with max_attempts < 1")


async def retry_on_deadlock(
    func: Callable[[], Awaitable[T]],
    max_attempts: int = 3,
    base_delay: float = 0.1,
) -> T:
    """
    Retry a function if it fails due to a database deadlock.

    Example:
        result = await retry_on_deadlock(lambda: use_case.execute(...))
    """
    return await retry_with_backoff(
        func,
        should_retry=is_deadlock_error,
        max_attempts=max_attempts,
        base_delay=base_delay,
        operation="database",
    )
