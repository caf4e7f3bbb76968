# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Quiz grading.

``grade`` is pure: it reads a definition and a submission and returns a
new QuizResult. Persisting and publishing the result are the caller's job.

Answers are compared as sets. Selection order and repeated options do not
matter, so ``["b", "a", "a"]`` matches a correct answer of ``["a", "b"]``.
A question the submission does not answer earns zero points.
"""

import logging
from datetime import datetime
from uuid import uuid4

from src.models.quiz import (
    AnswerSubmission,
    Question,
    QuestionResult,
    QuizDefinition,
    QuizResult,
    QuizSubmission,
)
from src.utils.datetime import utc_now

logger = logging.getLogger(__name__)


def is_correct(question: Question, selected_answers: list[str]) -> bool:
    """Check a selection against the question's correct answer set."""
    return set(selected_answers) == set(question.correct_answers)


def grade_question(question: Question, answer: AnswerSubmission | None) -> QuestionResult:
    """Grade a single question.

    Args:
        question: The question being graded.
        answer: The student's answer, or None if the question was skipped.

    Returns:
        The per-question outcome.
    """
    submitted = list(answer.selected_answers) if answer is not None else []
    correct = answer is not None and is_correct(question, submitted)

    return QuestionResult(
        question_id=question.id,
        correct=correct,
        points_earned=question.points if correct else 0.0,
        points_possible=question.points,
        correct_answers=list(question.correct_answers),
        submitted_answers=submitted,
    )


def compute_score(earned_points: float, total_points: float) -> float:
    """Percentage of points earned, clamped to [0, 100].

    A zero-point quiz scores 0.
    """
    if total_points <= 0:
        return 0.0
    return max(0.0, min(100.0, 100.0 * earned_points / total_points))


def grade(
    definition: QuizDefinition,
    submission: QuizSubmission,
    result_id: str | None = None,
    submitted_at: datetime | None = None,
) -> QuizResult:
    """Score a submission against a quiz definition.

    Args:
        definition: The quiz being answered.
        submission: The student's answers.
        result_id: Identifier for the new result (generated if omitted).
        submitted_at: Result timestamp (now if omitted).

    Returns:
        A new, immutable QuizResult.
    """
    answers = {answer.question_id: answer for answer in submission.answers}

    unknown = answers.keys() - {question.id for question in definition.questions}
    if unknown:
        logger.debug(
            "Ignoring answers to unknown questions on quiz %s: %s",
            definition.id,
            sorted(unknown),
        )

    question_results = [
        grade_question(question, answers.get(question.id))
        for question in definition.questions
    ]

    total_points = sum(result.points_possible for result in question_results)
    earned_points = sum(result.points_earned for result in question_results)

    score = compute_score(earned_points, total_points)
    if total_points == 0:
        logger.warning(
            "Quiz %s has zero total points; scoring submission from %s as 0",
            definition.id,
            submission.student_id,
        )
        passed = False
    else:
        passed = score >= definition.passing_score

    return QuizResult(
        id=result_id or str(uuid4()),
        quiz_id=definition.id,
        student_id=submission.student_id,
        score=score,
        passed=passed,
        earned_points=earned_points,
        total_points=total_points,
        question_results=question_results,
        submitted_at=submitted_at or utc_now(),
    )
