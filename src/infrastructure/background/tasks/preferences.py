# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Preference aggregation background tasks.

``apply_preference_event`` consumes ``quiz.result`` and
``course.completed`` events from the preferences queue and folds them into
preference profiles.

Malformed payloads are logged and acknowledged. Storage and lock failures
raise, so Dramatiq redelivers the message with its own backoff; the
aggregator's idempotency makes the redelivery safe.

Each worker thread builds its own aggregator because the database engine
and Redis client are bound to the thread's event loop.
"""

import asyncio
import logging
import threading
from typing import Any

import dramatiq

from src.core.config import get_settings
from src.domains.preferences import (
    PreferenceAggregator,
    ProfileCache,
    RedisKeyedLock,
)
from src.infrastructure.background.broker import Priority, Queues, setup_dramatiq
from src.infrastructure.background.tasks.base import run_async
from src.infrastructure.cache import RedisClient
from src.infrastructure.catalog import CatalogClient
from src.infrastructure.database.connection import get_worker_database
from src.utils.logging import bind_context, clear_context

# Setup broker before defining actors
setup_dramatiq()

logger = logging.getLogger(__name__)

_thread_local = threading.local()


async def _get_aggregator() -> PreferenceAggregator:
    """Get the aggregator for the current thread's event loop."""
    loop = asyncio.get_running_loop()
    aggregator = getattr(_thread_local, "aggregator", None)
    if aggregator is not None and getattr(_thread_local, "loop", None) is loop:
        return aggregator

    settings = get_settings()

    redis = RedisClient(settings)
    await redis.connect()

    aggregator = PreferenceAggregator(
        session_factory=get_worker_database().session,
        catalog=CatalogClient(settings.catalog),
        lock=RedisKeyedLock(
            redis,
            timeout=settings.preference.lock_timeout,
            blocking_timeout=settings.preference.lock_blocking_timeout,
        ),
        settings=settings.preference,
        catalog_settings=settings.catalog,
        cache=ProfileCache(redis, settings.preference.profile_cache_ttl),
    )
    _thread_local.aggregator = aggregator
    _thread_local.loop = loop

    logger.debug(
        "Created preference aggregator for thread %s",
        threading.current_thread().name,
    )
    return aggregator


@dramatiq.actor(
    queue_name=Queues.PREFERENCES,
    max_retries=get_settings().worker.max_retries,
    time_limit=120000,  # 2 minutes
    priority=Priority.HIGH,
)
def apply_preference_event(event_type: str, payload: dict[str, Any]) -> bool:
    """Apply one preference event.

    Args:
        event_type: ``quiz.result`` or ``course.completed``.
        payload: Flat camelCase event record.

    Returns:
        True if a profile changed.
    """

    async def _apply() -> bool:
        clear_context()
        bind_context(event_type=event_type)
        aggregator = await _get_aggregator()
        try:
            return await aggregator.handle(event_type, payload)
        except Exception as e:
            logger.error(
                "Failed to apply %s event, will be redelivered: %s",
                event_type,
                str(e),
                exc_info=True,
            )
            raise

    return run_async(_apply())


def get_preference_actors() -> list:
    """Get all preference actors."""
    return [
        apply_preference_event,
    ]
