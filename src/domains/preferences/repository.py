# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Preference profile persistence."""

from sqlalchemy.ext.asyncio import AsyncSession

from src.infrastructure.database.models import PreferenceProfileModel
from src.models.preference import (
    CompletedCourseEntry,
    LearningStyle,
    PreferenceProfile,
    PreferredLevel,
    QuizScoreEntry,
)


class PreferenceProfileRepository:
    """Loads and stores one profile row per user.

    Rows are versioned; saving a profile whose row changed since it was
    loaded raises ``sqlalchemy.orm.exc.StaleDataError`` on flush.
    """

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def get(self, user_id: str) -> PreferenceProfile | None:
        """Load a profile, or None if the user has none yet."""
        row = await self.session.get(PreferenceProfileModel, user_id)
        if row is None:
            return None
        return self._to_profile(row)

    async def save(self, profile: PreferenceProfile) -> None:
        """Insert or update a profile and flush it."""
        row = await self.session.get(PreferenceProfileModel, profile.user_id)
        if row is None:
            row = PreferenceProfileModel(user_id=profile.user_id)
            self.session.add(row)

        row.quiz_history = [e.model_dump(mode="json") for e in profile.quiz_history]
        row.seen_quiz_ids = list(profile.seen_quiz_ids)
        row.preferred_categories = list(profile.preferred_categories)
        row.preferred_level = profile.preferred_level.value
        row.time_availability = profile.time_availability
        row.learning_style = profile.learning_style.value
        row.completed_courses = [
            e.model_dump(mode="json") for e in profile.completed_courses
        ]
        await self.session.flush()

    @staticmethod
    def _to_profile(row: PreferenceProfileModel) -> PreferenceProfile:
        return PreferenceProfile(
            user_id=row.user_id,
            quiz_history=[QuizScoreEntry.model_validate(e) for e in row.quiz_history],
            seen_quiz_ids=list(row.seen_quiz_ids),
            preferred_categories=list(row.preferred_categories),
            preferred_level=PreferredLevel(row.preferred_level),
            time_availability=row.time_availability,
            learning_style=LearningStyle(row.learning_style),
            completed_courses=[
                CompletedCourseEntry.model_validate(e) for e in row.completed_courses
            ],
        )
