# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Unit tests for quiz grading."""

import logging

import pytest

from src.domains.quiz.grading import compute_score, grade, is_correct
from src.models.quiz import Question, QuestionType, QuizDefinition


class TestGrade:
    """Tests for the grade function."""

    def test_half_correct_scores_fifty(self, two_question_quiz, make_submission) -> None:
        """Two 5-point questions, one right and one wrong, score 50."""
        submission = make_submission({"q1": ["1"], "q2": ["2/4"]})

        result = grade(two_question_quiz, submission)

        assert result.score == 50.0
        assert result.earned_points == 5
        assert result.total_points == 10
        assert result.passed is True
        assert [qr.correct for qr in result.question_results] == [True, False]

    def test_passed_compares_against_passing_score(
        self, two_question_quiz, make_submission
    ) -> None:
        """A score below the passing score fails."""
        strict = two_question_quiz.model_copy(update={"passing_score": 60})

        result = grade(strict, make_submission({"q1": ["1"], "q2": []}))

        assert result.score == 50.0
        assert result.passed is False

    def test_zero_total_points(self, make_submission, caplog) -> None:
        """A zero-point quiz scores 0, fails and logs a warning."""
        definition = QuizDefinition(
            id="empty",
            title="No points",
            questions=[
                Question(
                    id="q1",
                    text="Free question",
                    type=QuestionType.TRUE_FALSE,
                    correct_answers=["true"],
                    points=0,
                )
            ],
            passing_score=0,
        )

        with caplog.at_level(logging.WARNING):
            result = grade(definition, make_submission({"q1": ["true"]}, quiz_id="empty"))

        assert result.score == 0.0
        assert result.passed is False
        assert "zero total points" in caplog.text

    def test_quiz_without_questions(self, make_submission) -> None:
        """A quiz with no questions grades without error."""
        definition = QuizDefinition(id="none", title="Empty", passing_score=50)

        result = grade(definition, make_submission({}, quiz_id="none"))

        assert result.score == 0.0
        assert result.passed is False
        assert result.question_results == []

    def test_missing_answer_is_incorrect(self, two_question_quiz, make_submission) -> None:
        """An unanswered question earns nothing and records no selection."""
        result = grade(two_question_quiz, make_submission({"q1": ["1"]}))

        missing = result.question_results[1]
        assert missing.question_id == "q2"
        assert missing.correct is False
        assert missing.points_earned == 0
        assert missing.submitted_answers == []
        assert missing.correct_answers == ["2/4", "3/6"]

    def test_results_follow_definition_order(self, two_question_quiz, make_submission) -> None:
        """Question results are ordered like the definition, not the submission."""
        submission = make_submission({"q2": ["3/6", "2/4"], "q1": ["1"]})

        result = grade(two_question_quiz, submission)

        assert [qr.question_id for qr in result.question_results] == ["q1", "q2"]
        assert result.score == 100.0

    def test_unknown_questions_are_ignored(self, two_question_quiz, make_submission) -> None:
        """Answers to questions not in the quiz do not affect the score."""
        submission = make_submission({"q1": ["1"], "q2": ["2/4", "3/6"], "q9": ["x"]})

        result = grade(two_question_quiz, submission)

        assert result.score == 100.0
        assert len(result.question_results) == 2

    def test_grading_is_deterministic(self, two_question_quiz, make_submission, base_time) -> None:
        """Same inputs with the same id and time give the same result."""
        submission = make_submission({"q1": ["1"], "q2": ["2/4"]})

        first = grade(two_question_quiz, submission, result_id="r-1", submitted_at=base_time)
        second = grade(two_question_quiz, submission, result_id="r-1", submitted_at=base_time)

        assert first == second

    def test_result_carries_identifiers(self, two_question_quiz, make_submission) -> None:
        """The result references the quiz and student and gets an id."""
        result = grade(two_question_quiz, make_submission({}, student_id="s-42"))

        assert result.quiz_id == "quiz-1"
        assert result.student_id == "s-42"
        assert result.id
        assert result.submitted_at.tzinfo is not None


class TestAnswerComparison:
    """Tests for set-based answer comparison."""

    @pytest.mark.parametrize(
        "selected, expected",
        [
            (["2/4", "3/6"], True),
            (["3/6", "2/4"], True),
            (["2/4", "3/6", "3/6"], True),
            (["2/4"], False),
            (["2/4", "3/6", "2/3"], False),
            ([], False),
        ],
    )
    def test_set_equality(self, two_question_quiz, selected, expected) -> None:
        """Order and repeated options do not matter, membership does."""
        question = two_question_quiz.questions[1]

        assert is_correct(question, selected) is expected


class TestComputeScore:
    """Tests for score computation."""

    def test_percentage(self) -> None:
        """Score is the earned share of total points."""
        assert compute_score(3, 4) == 75.0

    def test_zero_total(self) -> None:
        """Zero total points scores 0."""
        assert compute_score(0, 0) == 0.0

    def test_bounded(self) -> None:
        """Score never leaves [0, 100]."""
        assert compute_score(12, 10) == 100.0
