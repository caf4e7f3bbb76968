# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Unit tests for per-key locks."""

import asyncio
from unittest.mock import AsyncMock, MagicMock

import pytest
from redis.exceptions import LockError

from src.domains.preferences.locks import KeyedLock, LockTimeoutError, RedisKeyedLock


class TestKeyedLock:
    """Tests for the in-process lock table."""

    @pytest.mark.asyncio
    async def test_same_key_is_serialized(self) -> None:
        """Holders of the same key never overlap."""
        lock = KeyedLock()
        active = 0
        peak = 0

        async def worker() -> None:
            nonlocal active, peak
            async with lock.acquire("user-1"):
                active += 1
                peak = max(peak, active)
                await asyncio.sleep(0)
                active -= 1

        await asyncio.gather(*(worker() for _ in range(5)))

        assert peak == 1

    @pytest.mark.asyncio
    async def test_different_keys_do_not_block(self) -> None:
        """A held key does not delay work on another key."""
        lock = KeyedLock()
        release = asyncio.Event()

        async def hold() -> None:
            async with lock.acquire("user-1"):
                await release.wait()

        holder = asyncio.create_task(hold())
        await asyncio.sleep(0)

        async with lock.acquire("user-2"):
            pass

        release.set()
        await holder

    @pytest.mark.asyncio
    async def test_entries_are_dropped(self) -> None:
        """The table is empty once nobody holds or waits."""
        lock = KeyedLock()

        async with lock.acquire("user-1"):
            assert len(lock) == 1

        assert len(lock) == 0

    @pytest.mark.asyncio
    async def test_released_on_error(self) -> None:
        """An exception inside the block releases the key."""
        lock = KeyedLock()

        with pytest.raises(ValueError):
            async with lock.acquire("user-1"):
                raise ValueError("boom")

        assert len(lock) == 0
        async with lock.acquire("user-1"):
            pass


@pytest.fixture
def redis_lock():
    """Mock redis-py lock object."""
    lock = MagicMock()
    lock.acquire = AsyncMock(return_value=True)
    lock.release = AsyncMock()
    return lock


@pytest.fixture
def mock_redis(redis_lock):
    """Mock Redis client handing out the mock lock."""
    redis = MagicMock()
    redis.lock = MagicMock(return_value=redis_lock)
    return redis


class TestRedisKeyedLock:
    """Tests for the Redis-backed lock table."""

    @pytest.mark.asyncio
    async def test_acquire_and_release(self, mock_redis, redis_lock) -> None:
        """The lock is namespaced per key and released after the block."""
        lock = RedisKeyedLock(mock_redis, timeout=30, blocking_timeout=5)

        async with lock.acquire("user-1"):
            redis_lock.release.assert_not_awaited()

        mock_redis.lock.assert_called_once_with(
            "lock:preferences:user-1", timeout=30, blocking_timeout=5
        )
        redis_lock.release.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_timeout(self, mock_redis, redis_lock) -> None:
        """Failing to acquire raises LockTimeoutError without running the block."""
        redis_lock.acquire.return_value = False
        lock = RedisKeyedLock(mock_redis, timeout=30, blocking_timeout=0.1)
        entered = False

        with pytest.raises(LockTimeoutError) as exc_info:
            async with lock.acquire("user-1"):
                entered = True

        assert exc_info.value.key == "user-1"
        assert entered is False
        redis_lock.release.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_expired_lock_release_is_logged(self, mock_redis, redis_lock) -> None:
        """A lock that expired while held does not fail the block."""
        redis_lock.release.side_effect = LockError("not owned")
        lock = RedisKeyedLock(mock_redis, timeout=1)

        async with lock.acquire("user-1"):
            pass

        redis_lock.release.assert_awaited_once()
