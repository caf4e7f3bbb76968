# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Recommendation service.

Reads the user's profile (through the snapshot cache), fetches the
published catalog and hands both to the pure ranker. Nothing is stored.
"""

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from src.domains.preferences.cache import ProfileCache
from src.domains.preferences.repository import PreferenceProfileRepository
from src.domains.recommendation.ranker import DEFAULT_LIMIT, rank
from src.infrastructure.catalog import CatalogClient
from src.models.preference import PreferenceProfile
from src.models.recommendation import RecommendationEntry

logger = logging.getLogger(__name__)


class RecommendationService:
    """Service producing course recommendations.

    Attributes:
        db: Async database session.
        catalog: Course catalog client.
        cache: Profile snapshot cache.
    """

    def __init__(
        self,
        db: AsyncSession,
        catalog: CatalogClient,
        cache: ProfileCache | None = None,
    ) -> None:
        self.db = db
        self.catalog = catalog
        self.cache = cache
        self._profiles = PreferenceProfileRepository(db)

    async def _load_profile(self, user_id: str) -> PreferenceProfile | None:
        if self.cache is not None:
            cached = await self.cache.get(user_id)
            if cached is not None:
                return cached

        profile = await self._profiles.get(user_id)
        if profile is not None and self.cache is not None:
            await self.cache.set(profile)
        return profile

    async def recommend(
        self,
        user_id: str,
        limit: int = DEFAULT_LIMIT,
    ) -> list[RecommendationEntry]:
        """Recommend courses for a user.

        Args:
            user_id: The user to recommend for.
            limit: Maximum number of recommendations.

        Returns:
            Ranked recommendations; empty if the user has no profile.

        Raises:
            CatalogError: If the catalog snapshot cannot be fetched.
        """
        profile = await self._load_profile(user_id)
        if profile is None:
            logger.debug("No preference profile for %s, nothing to recommend", user_id)
            return []

        courses = await self.catalog.find_courses(published=True)
        recommendations = rank(profile, courses, limit=limit)

        logger.debug(
            "Ranked %d catalog courses for %s, returning %d",
            len(courses),
            user_id,
            len(recommendations),
        )
        return recommendations
