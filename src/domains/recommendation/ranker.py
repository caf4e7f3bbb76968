# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Course recommendation ranking.

``rank`` is pure and deterministic: same profile and catalog snapshot,
same output. Each published course scores

    +2 if its category is one of the profile's preferred categories
    +2 if its level equals the profile's preferred level
    +1 if its duration fits the profile's time availability
    + its average rating (0 to 5)

and the top courses are returned by score descending, then course id
ascending.
"""

from typing import Iterable

from src.models.preference import PreferenceProfile
from src.models.recommendation import CourseCandidate, RecommendationEntry

DEFAULT_LIMIT = 5

CATEGORY_WEIGHT = 2.0
LEVEL_WEIGHT = 2.0
DURATION_WEIGHT = 1.0


def score_course(profile: PreferenceProfile, course: CourseCandidate) -> float:
    """Score one course for a profile."""
    score = course.rating
    if course.category in profile.preferred_categories:
        score += CATEGORY_WEIGHT
    if course.level == profile.preferred_level:
        score += LEVEL_WEIGHT
    if course.duration <= profile.time_availability:
        score += DURATION_WEIGHT
    return score


def rank(
    profile: PreferenceProfile,
    catalog: Iterable[CourseCandidate],
    limit: int = DEFAULT_LIMIT,
) -> list[RecommendationEntry]:
    """Rank published catalog courses for a profile.

    Args:
        profile: The user's preference profile.
        catalog: Catalog snapshot; unpublished courses are ignored.
        limit: Maximum number of entries returned.

    Returns:
        At most ``limit`` entries, best first.
    """
    entries = [
        RecommendationEntry(course_id=course.id, score=score_course(profile, course))
        for course in catalog
        if course.is_published
    ]
    entries.sort(key=lambda entry: (-entry.score, entry.course_id))
    return entries[:limit]
