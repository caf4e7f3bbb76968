# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Redis-backed profile snapshot cache.

Snapshots expire after a fixed TTL and are invalidated whenever the
aggregator or a settings update writes the profile. Redis being
unavailable degrades to a cache miss.
"""

import logging

from pydantic import ValidationError

from src.infrastructure.cache import RedisClient, RedisError
from src.models.preference import PreferenceProfile

logger = logging.getLogger(__name__)


class ProfileCache:
    """TTL cache of preference profiles keyed by user id."""

    def __init__(self, redis: RedisClient, ttl_seconds: int) -> None:
        self._redis = redis
        self._ttl = ttl_seconds

    @staticmethod
    def _key(user_id: str) -> str:
        return f"profile:{user_id}"

    async def get(self, user_id: str) -> PreferenceProfile | None:
        """Return the cached profile, or None on a miss."""
        try:
            data = await self._redis.get(self._key(user_id))
        except RedisError as e:
            logger.warning("Profile cache read failed for %s: %s", user_id, e)
            return None
        if data is None:
            return None
        try:
            return PreferenceProfile.model_validate(data)
        except ValidationError:
            logger.warning("Discarding unreadable cached profile for %s", user_id)
            return None

    async def set(self, profile: PreferenceProfile) -> None:
        """Store a profile snapshot with the configured TTL."""
        try:
            await self._redis.set(
                self._key(profile.user_id),
                profile.model_dump(mode="json"),
                expire_seconds=self._ttl,
            )
        except RedisError as e:
            logger.warning("Profile cache write failed for %s: %s", profile.user_id, e)

    async def invalidate(self, user_id: str) -> None:
        """Drop the snapshot for a user."""
        try:
            await self._redis.delete(self._key(user_id))
        except RedisError as e:
            logger.warning("Profile cache invalidation failed for %s: %s", user_id, e)
