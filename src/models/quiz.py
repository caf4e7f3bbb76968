# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Quiz definition, submission and result schemas."""

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_validator

from src.utils.datetime import utc_now


class QuestionType(str, Enum):
    """Supported question formats."""

    SINGLE_CHOICE = "single_choice"
    MULTI_CHOICE = "multi_choice"
    TRUE_FALSE = "true_false"
    SHORT_ANSWER = "short_answer"


class Question(BaseModel):
    """A question inside a stored quiz definition."""

    model_config = ConfigDict(frozen=True)

    id: str
    text: str
    type: QuestionType
    options: list[str] = Field(default_factory=list)
    correct_answers: list[str] = Field(default_factory=list)
    points: float = Field(ge=0)


class QuizDefinition(BaseModel):
    """An authored quiz. Immutable once created."""

    model_config = ConfigDict(frozen=True)

    id: str
    course_id: str | None = None
    title: str
    description: str = ""
    questions: list[Question] = Field(default_factory=list)
    time_limit: int = Field(default=0, ge=0, description="Time limit in minutes, 0 for none")
    passing_score: float = Field(ge=0, le=100)
    created_at: datetime = Field(default_factory=utc_now)

    @property
    def total_points(self) -> float:
        """Sum of all question point values."""
        return sum(question.points for question in self.questions)


class QuestionCreate(BaseModel):
    """Question payload when authoring a quiz."""

    text: str = Field(min_length=1)
    type: QuestionType
    options: list[str] = Field(default_factory=list)
    correct_answers: list[str] = Field(default_factory=list)
    points: float = Field(ge=0)


class CreateQuizRequest(BaseModel):
    """Request body for creating a quiz."""

    course_id: str | None = None
    title: str = Field(min_length=1, max_length=255)
    description: str = ""
    questions: list[QuestionCreate] = Field(default_factory=list)
    time_limit: int = Field(default=0, ge=0)
    passing_score: float = Field(ge=0, le=100)


class AnswerSubmission(BaseModel):
    """The options a student selected for one question."""

    question_id: str
    selected_answers: list[str] = Field(default_factory=list)


class SubmitQuizRequest(BaseModel):
    """Request body for submitting answers to a quiz."""

    student_id: str = Field(min_length=1)
    answers: list[AnswerSubmission] = Field(default_factory=list)

    @field_validator("answers")
    @classmethod
    def unique_question_ids(cls, answers: list[AnswerSubmission]) -> list[AnswerSubmission]:
        """Reject submissions that answer the same question twice."""
        seen: set[str] = set()
        for answer in answers:
            if answer.question_id in seen:
                raise ValueError(f"duplicate answer for question {answer.question_id}")
            seen.add(answer.question_id)
        return answers


class QuizSubmission(SubmitQuizRequest):
    """A complete submission: the quiz it targets plus the answers."""

    quiz_id: str = Field(min_length=1)


class QuestionResult(BaseModel):
    """Grading outcome of a single question. Derived, never stored alone."""

    model_config = ConfigDict(frozen=True)

    question_id: str
    correct: bool
    points_earned: float = Field(ge=0)
    points_possible: float = Field(ge=0)
    correct_answers: list[str]
    submitted_answers: list[str]


class QuizResult(BaseModel):
    """Immutable outcome of one graded submission."""

    model_config = ConfigDict(frozen=True)

    id: str
    quiz_id: str
    student_id: str
    score: float = Field(ge=0, le=100)
    passed: bool
    earned_points: float = Field(ge=0)
    total_points: float = Field(ge=0)
    question_results: list[QuestionResult] = Field(default_factory=list)
    submitted_at: datetime


class QuizResultList(BaseModel):
    """Response wrapper for result queries."""

    items: list[QuizResult]
    total: int
