# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""FastAPI dependency injection definitions.

This module provides dependency functions for FastAPI endpoints.
Dependencies are used to:
- Get database sessions
- Get shared clients (catalog, Redis-backed cache and locks)
- Get service instances

Example:
    @router.get("/quizzes/{quiz_id}")
    async def get_quiz(
        quiz_id: str,
        service: QuizService = Depends(get_quiz_service),
    ):
        ...
"""

import logging
from typing import AsyncGenerator

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from src.core.config import get_settings
from src.domains.preferences import (
    KeyedLock,
    KeyLock,
    PreferenceService,
    ProfileCache,
    RedisKeyedLock,
)
from src.domains.quiz import DeadLetterRepository, QuizService, ResultPublisher
from src.domains.recommendation import RecommendationService
from src.infrastructure.cache import RedisError, get_redis
from src.infrastructure.catalog import CatalogClient
from src.infrastructure.database.connection import (
    close_database,
    get_session,
    init_database,
)
from src.infrastructure.events import (
    EventBus,
    EventToDramatiqBridge,
    get_event_bridge,
    get_event_bus,
)

logger = logging.getLogger(__name__)

# Shared clients
_catalog_client: CatalogClient | None = None
_local_lock: KeyedLock | None = None


async def init_db() -> None:
    """Initialize the database connection pool."""
    await init_database(get_settings())


async def close_db() -> None:
    """Close the database pool and the catalog client."""
    global _catalog_client

    if _catalog_client is not None:
        await _catalog_client.close()
        _catalog_client = None

    await close_database()


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """Get a database session for one request.

    Yields:
        AsyncSession that commits on success and rolls back on error.
    """
    async with get_session() as session:
        yield session


def get_catalog_client() -> CatalogClient:
    """Get the shared catalog client."""
    global _catalog_client
    if _catalog_client is None:
        _catalog_client = CatalogClient(get_settings().catalog)
    return _catalog_client


def get_bus() -> EventBus:
    """Get the in-process event bus."""
    return get_event_bus()


def get_bridge() -> EventToDramatiqBridge:
    """Get the broker bridge."""
    return get_event_bridge()


def get_profile_cache() -> ProfileCache | None:
    """Get the profile snapshot cache, or None when Redis is not up."""
    try:
        redis = get_redis()
    except RedisError:
        logger.debug("Redis not initialized, profile cache disabled")
        return None
    return ProfileCache(redis, get_settings().preference.profile_cache_ttl)


def get_profile_lock() -> KeyLock:
    """Get the per-user profile lock.

    The Redis lock is shared with the preference workers. Without Redis,
    updates are only serialized within this process.
    """
    global _local_lock
    settings = get_settings().preference
    try:
        redis = get_redis()
    except RedisError:
        if _local_lock is None:
            logger.warning("Redis not initialized, using in-process profile locks")
            _local_lock = KeyedLock()
        return _local_lock
    return RedisKeyedLock(
        redis,
        timeout=settings.lock_timeout,
        blocking_timeout=settings.lock_blocking_timeout,
    )


# =========================================================================
# Service Dependencies
# =========================================================================


def get_quiz_service(
    db: AsyncSession = Depends(get_db),
    bridge: EventToDramatiqBridge = Depends(get_bridge),
    event_bus: EventBus = Depends(get_bus),
) -> QuizService:
    """Get a quiz service bound to the request's session."""
    settings = get_settings()
    publisher = ResultPublisher(
        bridge=bridge,
        dead_letters=DeadLetterRepository(db),
        settings=settings.publisher,
        event_bus=event_bus,
    )
    return QuizService(
        db=db,
        publisher=publisher,
        settings=settings.quiz,
        event_bus=event_bus,
    )


def get_preference_service(
    db: AsyncSession = Depends(get_db),
    lock: KeyLock = Depends(get_profile_lock),
    cache: ProfileCache | None = Depends(get_profile_cache),
) -> PreferenceService:
    """Get a preference service bound to the request's session."""
    return PreferenceService(
        db=db,
        lock=lock,
        settings=get_settings().preference,
        cache=cache,
    )


def get_recommendation_service(
    db: AsyncSession = Depends(get_db),
    catalog: CatalogClient = Depends(get_catalog_client),
    cache: ProfileCache | None = Depends(get_profile_cache),
) -> RecommendationService:
    """Get a recommendation service bound to the request's session."""
    return RecommendationService(db=db, catalog=catalog, cache=cache)
