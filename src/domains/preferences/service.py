# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Preference service for reading and adjusting profiles.

Users may change their time budget and learning style. Quiz history,
preferred level, categories and completed courses are derived from
events and are never written here.
"""

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from src.core.config.settings import PreferenceSettings
from src.domains.preferences.cache import ProfileCache
from src.domains.preferences.locks import KeyLock
from src.domains.preferences.profile import new_profile, rolling_average
from src.domains.preferences.repository import PreferenceProfileRepository
from src.models.preference import (
    PreferenceProfile,
    PreferenceProfileResponse,
    UpdatePreferenceRequest,
)

logger = logging.getLogger(__name__)


class PreferenceServiceError(Exception):
    """Base exception for preference service errors."""

    pass


class ProfileNotFoundError(PreferenceServiceError):
    """Raised when a user has no preference profile yet."""

    def __init__(self, user_id: str) -> None:
        super().__init__(f"Preference profile not found: {user_id}")
        self.user_id = user_id


def to_response(profile: PreferenceProfile) -> PreferenceProfileResponse:
    """Attach the derived rolling average to a profile."""
    return PreferenceProfileResponse(
        **profile.model_dump(),
        rolling_average=rolling_average(profile.quiz_history),
    )


class PreferenceService:
    """Service for user-facing profile operations.

    Attributes:
        db: Async database session.
        lock: Per-user lock shared with the aggregator.
        cache: Profile snapshot cache.
    """

    def __init__(
        self,
        db: AsyncSession,
        lock: KeyLock,
        settings: PreferenceSettings,
        cache: ProfileCache | None = None,
    ) -> None:
        self.db = db
        self.lock = lock
        self.cache = cache
        self._settings = settings
        self._profiles = PreferenceProfileRepository(db)

    async def get_profile(self, user_id: str) -> PreferenceProfileResponse:
        """Get a user's profile.

        Raises:
            ProfileNotFoundError: If no event has created the profile yet.
        """
        profile = await self._profiles.get(user_id)
        if profile is None:
            raise ProfileNotFoundError(user_id)
        return to_response(profile)

    async def update_settings(
        self,
        user_id: str,
        request: UpdatePreferenceRequest,
    ) -> PreferenceProfileResponse:
        """Change the user-owned fields of a profile.

        The profile is created with defaults if it does not exist yet.

        Args:
            user_id: Profile owner.
            request: Fields to change; unset fields are left alone.

        Returns:
            The updated profile.
        """
        changes = request.model_dump(exclude_none=True)

        async with self.lock.acquire(user_id):
            profile = await self._profiles.get(user_id)
            if profile is None:
                profile = new_profile(user_id, self._settings.default_time_availability)

            profile = profile.model_copy(update=changes)
            await self._profiles.save(profile)
            await self.db.commit()

        if self.cache is not None:
            await self.cache.invalidate(user_id)

        logger.info("Updated preference settings for %s: %s", user_id, sorted(changes))
        return to_response(profile)
