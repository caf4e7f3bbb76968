# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Bounded retry with exponential backoff for remote calls.

Used for broker publishes and catalog lookups. Delays are computed by
redis-py's backoff strategies so the same policy objects configure both
the Redis connection pool and these application-level retries.

Example:
    from redis.backoff import ExponentialBackoff
    from src.utils.retry import retry_async

    course = await retry_async(
        lambda: catalog.get_course(course_id),
        retries=3,
        backoff=ExponentialBackoff(cap=5.0, base=0.2),
        retry_on=(CatalogUnavailableError,),
        operation="catalog.get_course",
    )
"""

import asyncio
import logging
from typing import Awaitable, Callable, TypeVar

from redis.backoff import AbstractBackoff

logger = logging.getLogger(__name__)

T = TypeVar("T")


class RetryExhaustedError(Exception):
    """Raised when an operation still fails after its last retry.

    Attributes:
        operation: Name of the operation that was retried.
        attempts: Total number of attempts made.
        last_error: The exception raised by the final attempt.
    """

    def __init__(self, operation: str, attempts: int, last_error: Exception) -> None:
        super().__init__(f"{operation} failed after {attempts} attempts")
        self.operation = operation
        self.attempts = attempts
        self.last_error = last_error

    def __str__(self) -> str:
        return f"{self.operation} failed after {self.attempts} attempts: {self.last_error}"


async def retry_async(
    func: Callable[[], Awaitable[T]],
    *,
    retries: int,
    backoff: AbstractBackoff,
    retry_on: tuple[type[Exception], ...],
    operation: str,
    sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
) -> T:
    """Call ``func`` until it succeeds or ``retries`` extra attempts are used.

    Only exceptions listed in ``retry_on`` are retried; anything else
    propagates immediately.

    Args:
        func: Zero-argument coroutine factory performing one attempt.
        retries: Number of retries after the first attempt.
        backoff: Strategy giving the delay before retry ``n``.
        retry_on: Exception types considered transient.
        operation: Name used in log lines and the final error.
        sleep: Awaitable sleep, replaceable in tests.

    Returns:
        The value returned by the first successful attempt.

    Raises:
        RetryExhaustedError: If every attempt failed with a transient error.
    """
    backoff.reset()
    attempts = retries + 1
    for attempt in range(1, attempts + 1):
        try:
            return await func()
        except retry_on as e:
            if attempt == attempts:
                raise RetryExhaustedError(operation, attempts, e) from e
            delay = backoff.compute(attempt)
            logger.warning(
                "%s failed (attempt %d/%d), retrying in %.2fs: %s",
                operation,
                attempt,
                attempts,
                delay,
                e,
            )
            await sleep(delay)

    # Unreachable: the loop either returns or raises
    raise RuntimeError(f"{operation}: retry loop exited without result")
