# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Unit tests for Recommendation service."""

from unittest.mock import AsyncMock, MagicMock

import pytest

from src.domains.recommendation.service import RecommendationService
from src.infrastructure.catalog import CatalogUnavailableError
from src.models.preference import PreferenceProfile, PreferredLevel


@pytest.fixture
def profile():
    """Beginner math profile."""
    return PreferenceProfile(
        user_id="student-1",
        preferred_categories=["math"],
        preferred_level=PreferredLevel.BEGINNER,
    )


@pytest.fixture
def mock_catalog(make_course):
    """Catalog with two published courses."""
    catalog = MagicMock()
    catalog.find_courses = AsyncMock(
        return_value=[
            make_course("c1", category="art", rating=4.0),
            make_course("c2", category="math", rating=3.0),
        ]
    )
    return catalog


@pytest.fixture
def mock_cache():
    """Profile cache that always misses."""
    cache = MagicMock()
    cache.get = AsyncMock(return_value=None)
    cache.set = AsyncMock()
    return cache


@pytest.fixture
def service(mock_catalog, mock_cache):
    """Recommendation service with mocked repository."""
    service = RecommendationService(db=AsyncMock(), catalog=mock_catalog, cache=mock_cache)
    service._profiles = MagicMock()
    service._profiles.get = AsyncMock(return_value=None)
    return service


class TestRecommend:
    """Tests for recommend."""

    @pytest.mark.asyncio
    async def test_ranks_published_catalog(
        self, service, mock_catalog, mock_cache, profile
    ) -> None:
        """Profile and published catalog are ranked and the profile cached."""
        service._profiles.get.return_value = profile

        result = await service.recommend("student-1")

        assert [entry.course_id for entry in result] == ["c2", "c1"]
        mock_catalog.find_courses.assert_awaited_once_with(published=True)
        mock_cache.set.assert_awaited_once_with(profile)

    @pytest.mark.asyncio
    async def test_cached_profile_skips_database(
        self, service, mock_cache, profile
    ) -> None:
        """A cache hit avoids the repository."""
        mock_cache.get.return_value = profile

        await service.recommend("student-1")

        service._profiles.get.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_no_profile(self, service, mock_catalog) -> None:
        """A user without a profile gets no recommendations."""
        assert await service.recommend("nobody") == []
        mock_catalog.find_courses.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_limit(self, service, profile) -> None:
        """The limit caps the result."""
        service._profiles.get.return_value = profile

        assert len(await service.recommend("student-1", limit=1)) == 1

    @pytest.mark.asyncio
    async def test_catalog_failure_propagates(self, service, mock_catalog, profile) -> None:
        """Catalog errors reach the caller."""
        service._profiles.get.return_value = profile
        mock_catalog.find_courses.side_effect = CatalogUnavailableError("down")

        with pytest.raises(CatalogUnavailableError):
            await service.recommend("student-1")

    @pytest.mark.asyncio
    async def test_without_cache(self, mock_catalog, profile) -> None:
        """The service works without a cache."""
        service = RecommendationService(db=AsyncMock(), catalog=mock_catalog)
        service._profiles = MagicMock()
        service._profiles.get = AsyncMock(return_value=profile)

        assert len(await service.recommend("student-1")) == 2
