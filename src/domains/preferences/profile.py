# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Pure preference profile transformations.

Every function here takes a profile and returns a new one; nothing is
mutated in place and nothing touches storage. The aggregator calls them
explicitly between loading and saving a profile.

Each transformation reports whether it changed anything. A ``False``
result means the event was already applied (dedupe-before-mutate), so
applying the same event twice gives the same profile as applying it once.
Collections are kept in a canonical order, which makes the final profile
independent of the order in which events for different fields arrive.
"""

from src.models.events import CourseCompletedEvent, QuizResultEvent
from src.models.preference import (
    CompletedCourseEntry,
    PreferenceProfile,
    PreferredLevel,
    QuizScoreEntry,
)
from src.models.recommendation import CourseCandidate

ADVANCED_THRESHOLD = 80.0
INTERMEDIATE_THRESHOLD = 60.0


def new_profile(user_id: str, time_availability: float) -> PreferenceProfile:
    """Build the default profile for a user seen for the first time."""
    return PreferenceProfile(
        user_id=user_id,
        preferred_level=PreferredLevel.BEGINNER,
        time_availability=time_availability,
    )


def rolling_average(history: list[QuizScoreEntry]) -> float | None:
    """Mean score of the history, or None when it is empty."""
    if not history:
        return None
    return sum(entry.score for entry in history) / len(history)


def level_for_average(average: float | None) -> PreferredLevel:
    """Map a rolling average to a preferred level.

    >= 80 is advanced, >= 60 intermediate, anything lower (or no history)
    beginner.
    """
    if average is None:
        return PreferredLevel.BEGINNER
    if average >= ADVANCED_THRESHOLD:
        return PreferredLevel.ADVANCED
    if average >= INTERMEDIATE_THRESHOLD:
        return PreferredLevel.INTERMEDIATE
    return PreferredLevel.BEGINNER


def apply_quiz_result(
    profile: PreferenceProfile,
    event: QuizResultEvent,
    history_size: int,
) -> tuple[PreferenceProfile, bool]:
    """Record a quiz score in the bounded history.

    The history is ordered by ``(submitted_at, quiz_id)`` and only the
    ``history_size`` most recent entries are kept. ``seen_quiz_ids`` keeps
    every quiz ever applied, including evicted ones.

    Args:
        profile: Current profile of the event's student.
        event: The quiz result.
        history_size: Maximum number of scores in the rolling window.

    Returns:
        The updated profile and whether the event was applied.
    """
    seen = {(profile.user_id, quiz_id) for quiz_id in profile.seen_quiz_ids}
    if event.idempotency_key in seen:
        return profile, False

    entry = QuizScoreEntry(
        quiz_id=event.quiz_id,
        score=event.score,
        submitted_at=event.submitted_at,
    )
    history = sorted(
        [*profile.quiz_history, entry],
        key=lambda e: (e.submitted_at, e.quiz_id),
    )[-history_size:]

    updated = profile.model_copy(
        update={
            "quiz_history": history,
            "seen_quiz_ids": sorted({*profile.seen_quiz_ids, event.quiz_id}),
            "preferred_level": level_for_average(rolling_average(history)),
        }
    )
    return updated, True


def apply_course_completion(
    profile: PreferenceProfile,
    event: CourseCompletedEvent,
    course: CourseCandidate | None,
) -> tuple[PreferenceProfile, bool]:
    """Record a completed course and learn its category.

    The category is added only when the course is known and published.
    Pass ``course=None`` when the catalog could not be reached; the
    completion is still recorded.

    Args:
        profile: Current profile of the event's student.
        event: The course completion.
        course: Catalog record for the course, if available.

    Returns:
        The updated profile and whether the event was applied.
    """
    seen = {
        (profile.user_id, entry.course_id, entry.completed_at)
        for entry in profile.completed_courses
    }
    if event.idempotency_key in seen:
        return profile, False

    completed = sorted(
        [
            *profile.completed_courses,
            CompletedCourseEntry(
                course_id=event.course_id,
                rating=event.rating,
                completed_at=event.completed_at,
            ),
        ],
        key=lambda e: (e.completed_at, e.course_id),
    )
    update: dict = {"completed_courses": completed}

    if (
        course is not None
        and course.is_published
        and course.category not in profile.preferred_categories
    ):
        update["preferred_categories"] = sorted(
            [*profile.preferred_categories, course.category]
        )

    return profile.model_copy(update=update), True
