# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Persistence for quizzes, quiz results and dead-lettered events.

Repositories convert between ORM rows and pydantic models. Quiz results
are append-only: ``QuizResultRepository`` exposes insert and read, and
nothing else.
"""

import logging
from typing import Any

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from src.infrastructure.database.models import (
    DeadLetterEventModel,
    QuizModel,
    QuizResultModel,
)
from src.infrastructure.database.models.base import new_id
from src.models.quiz import Question, QuestionResult, QuizDefinition, QuizResult

logger = logging.getLogger(__name__)


class DuplicateAttemptError(Exception):
    """Raised when a result violates the one-attempt-per-student policy.

    Attributes:
        attempt_key: The conflicting attempt key.
    """

    def __init__(self, attempt_key: str) -> None:
        super().__init__(f"Attempt already recorded: {attempt_key}")
        self.attempt_key = attempt_key


def attempt_key_for(result: QuizResult, single_attempt: bool) -> str:
    """Build the uniqueness key stored with a result.

    Args:
        result: The graded result.
        single_attempt: Whether only one attempt per student is recorded.

    Returns:
        ``quiz_id:student_id`` under the single-attempt policy, the result
        id otherwise (which never collides).
    """
    if single_attempt:
        return f"{result.quiz_id}:{result.student_id}"
    return result.id


class QuizRepository:
    """Reads and writes quiz definitions."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def add(self, definition: QuizDefinition) -> None:
        """Stage a new quiz definition for insert."""
        self.session.add(
            QuizModel(
                id=definition.id,
                course_id=definition.course_id,
                title=definition.title,
                description=definition.description,
                questions=[q.model_dump(mode="json") for q in definition.questions],
                time_limit=definition.time_limit,
                passing_score=definition.passing_score,
                created_at=definition.created_at,
            )
        )
        await self.session.flush()

    async def get(self, quiz_id: str) -> QuizDefinition | None:
        """Load a quiz definition by id."""
        row = await self.session.get(QuizModel, quiz_id)
        if row is None:
            return None
        return self._to_definition(row)

    @staticmethod
    def _to_definition(row: QuizModel) -> QuizDefinition:
        return QuizDefinition(
            id=row.id,
            course_id=row.course_id,
            title=row.title,
            description=row.description,
            questions=[Question.model_validate(q) for q in row.questions],
            time_limit=row.time_limit,
            passing_score=row.passing_score,
            created_at=row.created_at,
        )


class QuizResultRepository:
    """Insert-only store of graded results."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def insert(self, result: QuizResult, attempt_key: str) -> None:
        """Insert a result row.

        Args:
            result: The graded result.
            attempt_key: Uniqueness key, see ``attempt_key_for``.

        Raises:
            DuplicateAttemptError: If the attempt key already exists.
        """
        self.session.add(
            QuizResultModel(
                id=result.id,
                quiz_id=result.quiz_id,
                student_id=result.student_id,
                attempt_key=attempt_key,
                score=result.score,
                passed=result.passed,
                earned_points=result.earned_points,
                total_points=result.total_points,
                question_results=[
                    qr.model_dump(mode="json") for qr in result.question_results
                ],
                submitted_at=result.submitted_at,
            )
        )
        try:
            await self.session.flush()
        except IntegrityError as e:
            await self.session.rollback()
            raise DuplicateAttemptError(attempt_key) from e

    async def list(
        self,
        quiz_id: str | None = None,
        student_id: str | None = None,
    ) -> list[QuizResult]:
        """List results, oldest first, optionally filtered."""
        query = select(QuizResultModel)
        if quiz_id is not None:
            query = query.where(QuizResultModel.quiz_id == quiz_id)
        if student_id is not None:
            query = query.where(QuizResultModel.student_id == student_id)
        query = query.order_by(QuizResultModel.submitted_at, QuizResultModel.id)

        rows = (await self.session.execute(query)).scalars().all()
        return [self._to_result(row) for row in rows]

    @staticmethod
    def _to_result(row: QuizResultModel) -> QuizResult:
        return QuizResult(
            id=row.id,
            quiz_id=row.quiz_id,
            student_id=row.student_id,
            score=row.score,
            passed=row.passed,
            earned_points=row.earned_points,
            total_points=row.total_points,
            question_results=[
                QuestionResult.model_validate(qr) for qr in row.question_results
            ],
            submitted_at=row.submitted_at,
        )


class DeadLetterRepository:
    """Records events whose publish retries were exhausted.

    Each record is committed on its own so it survives regardless of what
    the caller's unit of work does next.
    """

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def record(
        self,
        event_type: str,
        payload: dict[str, Any],
        error: str,
        attempts: int,
    ) -> str:
        """Write one dead-letter row and commit it.

        Returns:
            Id of the new record.
        """
        row = DeadLetterEventModel(
            id=new_id(),
            event_type=event_type,
            payload=payload,
            error=error,
            attempts=attempts,
        )
        self.session.add(row)
        await self.session.commit()
        logger.info("Dead-lettered %s event as %s", event_type, row.id)
        return row.id
