# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Per-key mutual exclusion for profile updates.

Two implementations share the ``acquire(key)`` async context manager:

- ``KeyedLock``: asyncio locks inside one process. Entries are dropped as
  soon as no task holds or waits on them, so the table never grows with
  the number of users seen.
- ``RedisKeyedLock``: a redis-py lock shared by every worker process.
  The lock expires after ``timeout`` seconds if its holder dies.

Work for different keys never waits on each other.

Example:
    lock = RedisKeyedLock(get_redis(), timeout=30, blocking_timeout=10)
    async with lock.acquire(user_id):
        profile = await repository.get(user_id)
        ...
"""

import asyncio
import logging
from contextlib import AbstractAsyncContextManager, asynccontextmanager
from typing import AsyncIterator, Protocol

from redis.exceptions import LockError

from src.infrastructure.cache import RedisClient

logger = logging.getLogger(__name__)


class LockTimeoutError(Exception):
    """Raised when a lock could not be acquired in time.

    Attributes:
        key: The contended key.
    """

    def __init__(self, key: str) -> None:
        super().__init__(f"Timed out waiting for lock on {key}")
        self.key = key


class KeyLock(Protocol):
    """Interface shared by the lock implementations."""

    def acquire(self, key: str) -> AbstractAsyncContextManager[None]: ...


class KeyedLock:
    """In-process lock table keyed by string."""

    def __init__(self) -> None:
        self._locks: dict[str, asyncio.Lock] = {}
        self._users: dict[str, int] = {}

    @asynccontextmanager
    async def acquire(self, key: str) -> AsyncIterator[None]:
        """Hold the lock for ``key`` for the duration of the block."""
        lock = self._locks.setdefault(key, asyncio.Lock())
        self._users[key] = self._users.get(key, 0) + 1
        try:
            async with lock:
                yield
        finally:
            self._users[key] -= 1
            if self._users[key] == 0:
                del self._users[key]
                del self._locks[key]

    def __len__(self) -> int:
        return len(self._locks)


class RedisKeyedLock:
    """Distributed lock table backed by Redis."""

    def __init__(
        self,
        redis: RedisClient,
        timeout: float,
        blocking_timeout: float | None = None,
        namespace: str = "lock:preferences",
    ) -> None:
        self._redis = redis
        self._timeout = timeout
        self._blocking_timeout = blocking_timeout
        self._namespace = namespace

    @asynccontextmanager
    async def acquire(self, key: str) -> AsyncIterator[None]:
        """Hold the Redis lock for ``key`` for the duration of the block.

        Raises:
            LockTimeoutError: If the lock is not acquired within
                ``blocking_timeout`` seconds.
        """
        lock = self._redis.lock(
            f"{self._namespace}:{key}",
            timeout=self._timeout,
            blocking_timeout=self._blocking_timeout,
        )
        if not await lock.acquire():
            raise LockTimeoutError(key)
        try:
            yield
        finally:
            try:
                await lock.release()
            except LockError:
                # Expired while held; another holder may have it now
                logger.warning("Lock on %s expired before release", key)
