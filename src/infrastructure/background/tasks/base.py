# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Base utilities for Dramatiq tasks.

Dramatiq actors are synchronous and run on worker threads, while the
aggregator, the database engine and the Redis client are async. asyncpg
connections belong to the event loop that opened them, so every worker
thread keeps one long-lived loop and runs all of its tasks on it.
"""

import asyncio
import logging
import threading
from typing import Any, Coroutine, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")

_thread_local = threading.local()


def _get_thread_event_loop() -> asyncio.AbstractEventLoop:
    """Return this thread's event loop, creating it on first use.

    A fresh loop invalidates the thread's database engine, whose pooled
    connections were opened on the previous loop.
    """
    loop = getattr(_thread_local, "event_loop", None)
    if loop is not None and not loop.is_closed():
        return loop

    loop = asyncio.new_event_loop()
    asyncio.set_event_loop(loop)
    _thread_local.event_loop = loop

    # Import here to avoid circular imports
    from src.infrastructure.database.connection import _clear_thread_db_connections

    _clear_thread_db_connections()
    logger.debug("Created event loop for worker thread %s", threading.current_thread().name)
    return loop


def run_async(coro: Coroutine[Any, Any, T]) -> T:
    """Run a coroutine to completion on the thread's event loop.

    Example:
        @dramatiq.actor
        def my_task(user_id: str):
            async def _process():
                async with get_worker_database().session() as session:
                    ...
            return run_async(_process())
    """
    return _get_thread_event_loop().run_until_complete(coro)
