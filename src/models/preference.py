# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Preference profile schemas."""

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, Field, field_validator

from src.utils.datetime import ensure_utc


class PreferredLevel(str, Enum):
    """Course difficulty level, also used for catalog courses."""

    BEGINNER = "beginner"
    INTERMEDIATE = "intermediate"
    ADVANCED = "advanced"


class LearningStyle(str, Enum):
    """Self-reported learning style."""

    VISUAL = "visual"
    AUDITORY = "auditory"
    READING = "reading"
    KINESTHETIC = "kinesthetic"


class QuizScoreEntry(BaseModel):
    """One quiz score kept in the bounded history."""

    quiz_id: str
    score: float = Field(ge=0, le=100)
    submitted_at: datetime

    @field_validator("submitted_at")
    @classmethod
    def submitted_in_utc(cls, value: datetime) -> datetime:
        return ensure_utc(value)


class CompletedCourseEntry(BaseModel):
    """A course the user finished, with the rating they gave it."""

    course_id: str
    rating: float | None = Field(default=None, ge=0, le=5)
    completed_at: datetime

    @field_validator("completed_at")
    @classmethod
    def completed_in_utc(cls, value: datetime) -> datetime:
        return ensure_utc(value)


class PreferenceProfile(BaseModel):
    """Per-user model driving recommendations.

    ``quiz_history`` holds at most the configured number of most recent
    scores, ordered by ``submitted_at``. ``seen_quiz_ids`` records every quiz
    ever applied so redelivered events are recognised after their history
    entry has been evicted.
    """

    user_id: str
    quiz_history: list[QuizScoreEntry] = Field(default_factory=list)
    seen_quiz_ids: list[str] = Field(default_factory=list)
    preferred_categories: list[str] = Field(default_factory=list)
    preferred_level: PreferredLevel = PreferredLevel.BEGINNER
    time_availability: float = Field(default=10.0, ge=0, le=168)
    learning_style: LearningStyle = LearningStyle.VISUAL
    completed_courses: list[CompletedCourseEntry] = Field(default_factory=list)


class PreferenceProfileResponse(PreferenceProfile):
    """Profile as returned by the API, with the derived rolling average."""

    rolling_average: float | None = None


class UpdatePreferenceRequest(BaseModel):
    """User-editable profile fields. Derived fields are not accepted."""

    time_availability: float | None = Field(default=None, ge=0, le=168)
    learning_style: LearningStyle | None = None
