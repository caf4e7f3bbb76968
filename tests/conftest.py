# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Pytest configuration and shared fixtures.

This module provides fixtures used across all test types:
- Unit tests
- Integration tests (FastAPI app with overridden dependencies)
"""

import os
from datetime import datetime, timedelta, timezone
from typing import Any

import pytest

# Must be set before any module builds the broker or the rate limiter
os.environ.setdefault("DRAMATIQ_TEST_MODE", "true")
os.environ.setdefault("RATE_LIMIT_ENABLED", "false")
os.environ.setdefault("RATE_LIMIT_STORAGE_URI", "memory://")

from src.core.config.settings import (  # noqa: E402
    CatalogSettings,
    PreferenceSettings,
    PublisherSettings,
    QuizSettings,
)
from src.models.quiz import (  # noqa: E402
    AnswerSubmission,
    Question,
    QuestionType,
    QuizDefinition,
    QuizSubmission,
)
from src.models.recommendation import CourseCandidate  # noqa: E402


# =============================================================================
# Marker Configuration
# =============================================================================


def pytest_configure(config: pytest.Config) -> None:
    """Configure custom pytest markers."""
    config.addinivalue_line(
        "markers", "unit: mark test as a unit test"
    )
    config.addinivalue_line(
        "markers", "integration: mark test as an integration test"
    )


# =============================================================================
# Settings Fixtures
# =============================================================================


@pytest.fixture
def publisher_settings() -> PublisherSettings:
    """Publisher settings with a small retry budget."""
    return PublisherSettings(max_retries=2, backoff_base=0.01, backoff_cap=0.1)


@pytest.fixture
def catalog_settings() -> CatalogSettings:
    """Catalog settings pointing at a fake endpoint."""
    return CatalogSettings(
        url="http://catalog.test/graphql",
        max_retries=2,
        backoff_base=0.01,
        backoff_cap=0.1,
    )


@pytest.fixture
def preference_settings() -> PreferenceSettings:
    """Preference settings with the standard history size."""
    return PreferenceSettings(history_size=10, default_time_availability=10.0)


@pytest.fixture
def quiz_settings() -> QuizSettings:
    """Quiz policy allowing repeated attempts."""
    return QuizSettings(single_attempt=False)


# =============================================================================
# Domain Fixtures
# =============================================================================


@pytest.fixture
def base_time() -> datetime:
    """A fixed reference timestamp."""
    return datetime(2026, 1, 5, 10, 0, tzinfo=timezone.utc)


@pytest.fixture
def two_question_quiz(base_time: datetime) -> QuizDefinition:
    """Quiz with two 5-point questions and a passing score of 50."""
    return QuizDefinition(
        id="quiz-1",
        course_id="course-1",
        title="Fractions",
        questions=[
            Question(
                id="q1",
                text="1/2 + 1/2?",
                type=QuestionType.SINGLE_CHOICE,
                options=["1", "2"],
                correct_answers=["1"],
                points=5,
            ),
            Question(
                id="q2",
                text="Which are equal to 1/2?",
                type=QuestionType.MULTI_CHOICE,
                options=["2/4", "3/6", "2/3"],
                correct_answers=["2/4", "3/6"],
                points=5,
            ),
        ],
        passing_score=50,
        created_at=base_time,
    )


@pytest.fixture
def make_submission():
    """Factory for submissions keyed by question id."""

    def _make(
        answers: dict[str, list[str]],
        quiz_id: str = "quiz-1",
        student_id: str = "student-1",
    ) -> QuizSubmission:
        return QuizSubmission(
            quiz_id=quiz_id,
            student_id=student_id,
            answers=[
                AnswerSubmission(question_id=qid, selected_answers=selected)
                for qid, selected in answers.items()
            ],
        )

    return _make


@pytest.fixture
def make_course():
    """Factory for catalog courses."""

    def _make(
        course_id: str,
        category: str = "math",
        level: str = "beginner",
        duration: float = 5.0,
        rating: float = 4.0,
        is_published: bool = True,
    ) -> CourseCandidate:
        return CourseCandidate(
            id=course_id,
            category=category,
            level=level,
            duration=duration,
            rating=rating,
            is_published=is_published,
        )

    return _make


@pytest.fixture
def quiz_result_payload(base_time: datetime):
    """Factory for wire-format quiz result payloads."""

    def _make(
        quiz_id: str,
        score: float,
        student_id: str = "student-1",
        minutes: int = 0,
    ) -> dict[str, Any]:
        return {
            "version": 1,
            "quizId": quiz_id,
            "studentId": student_id,
            "score": score,
            "passed": score >= 50,
            "submittedAt": (base_time + timedelta(minutes=minutes)).isoformat(),
        }

    return _make


@pytest.fixture
def course_completed_payload(base_time: datetime):
    """Factory for wire-format course completion payloads."""

    def _make(
        course_id: str,
        student_id: str = "student-1",
        rating: float | None = 4.5,
        minutes: int = 0,
    ) -> dict[str, Any]:
        return {
            "version": 1,
            "studentId": student_id,
            "courseId": course_id,
            "rating": rating,
            "completedAt": (base_time + timedelta(minutes=minutes)).isoformat(),
        }

    return _make
