# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Quiz service for authoring, submission and result queries.

This module provides the QuizService class for:
- Creating and fetching quiz definitions
- Grading and recording submissions
- Listing recorded results

A submission is graded, committed, and only then published, so consumers
never see a result event before the result itself is durable.
"""

import logging
from uuid import uuid4

from sqlalchemy.ext.asyncio import AsyncSession

from src.core.config.settings import QuizSettings
from src.domains.quiz.grading import grade
from src.domains.quiz.publisher import ResultPublisher
from src.domains.quiz.repository import (
    DuplicateAttemptError,
    QuizRepository,
    QuizResultRepository,
    attempt_key_for,
)
from src.infrastructure.events import EventBus, EventTypes
from src.models.quiz import (
    CreateQuizRequest,
    Question,
    QuizDefinition,
    QuizResult,
    QuizSubmission,
)

logger = logging.getLogger(__name__)


class QuizServiceError(Exception):
    """Base exception for quiz service errors."""

    pass


class QuizNotFoundError(QuizServiceError):
    """Raised when a quiz id does not resolve to a definition."""

    def __init__(self, quiz_id: str) -> None:
        super().__init__(f"Quiz not found: {quiz_id}")
        self.quiz_id = quiz_id


class AttemptAlreadySubmittedError(QuizServiceError):
    """Raised when a student resubmits under the single-attempt policy."""

    def __init__(self, quiz_id: str, student_id: str) -> None:
        super().__init__(f"Student {student_id} already submitted quiz {quiz_id}")
        self.quiz_id = quiz_id
        self.student_id = student_id


class QuizService:
    """Service for quiz authoring and submission.

    Attributes:
        db: Async database session.
        publisher: Publishes committed results.
        event_bus: In-process bus for local notifications.
    """

    def __init__(
        self,
        db: AsyncSession,
        publisher: ResultPublisher,
        settings: QuizSettings,
        event_bus: EventBus,
    ) -> None:
        """Initialize quiz service.

        Args:
            db: Async database session.
            publisher: Result publisher.
            settings: Submission policy.
            event_bus: In-process event bus.
        """
        self.db = db
        self.publisher = publisher
        self.event_bus = event_bus
        self._settings = settings
        self._quizzes = QuizRepository(db)
        self._results = QuizResultRepository(db)

    async def create_quiz(self, request: CreateQuizRequest) -> QuizDefinition:
        """Create a quiz definition.

        Question ids are assigned here.

        Args:
            request: Quiz authoring payload.

        Returns:
            The stored definition.
        """
        definition = QuizDefinition(
            id=str(uuid4()),
            course_id=request.course_id,
            title=request.title,
            description=request.description,
            questions=[
                Question(id=str(uuid4()), **question.model_dump())
                for question in request.questions
            ],
            time_limit=request.time_limit,
            passing_score=request.passing_score,
        )

        await self._quizzes.add(definition)
        await self.db.commit()

        if definition.total_points == 0:
            logger.warning("Quiz %s was created with zero total points", definition.id)

        logger.info(
            "Created quiz %s with %d questions",
            definition.id,
            len(definition.questions),
        )
        await self.event_bus.publish(
            EventTypes.Quiz.CREATED,
            {"quizId": definition.id, "courseId": definition.course_id},
        )
        return definition

    async def get_quiz(self, quiz_id: str) -> QuizDefinition:
        """Fetch a quiz definition.

        Raises:
            QuizNotFoundError: If the quiz does not exist.
        """
        definition = await self._quizzes.get(quiz_id)
        if definition is None:
            raise QuizNotFoundError(quiz_id)
        return definition

    async def submit_quiz(self, submission: QuizSubmission) -> QuizResult:
        """Grade, record and publish a submission.

        Args:
            submission: The student's answers for one quiz.

        Returns:
            The recorded result.

        Raises:
            QuizNotFoundError: If the quiz does not exist.
            AttemptAlreadySubmittedError: If the single-attempt policy is
                on and the student already has a result for this quiz.
        """
        definition = await self.get_quiz(submission.quiz_id)
        result = grade(definition, submission)

        try:
            await self._results.insert(
                result,
                attempt_key_for(result, self._settings.single_attempt),
            )
        except DuplicateAttemptError as e:
            raise AttemptAlreadySubmittedError(result.quiz_id, result.student_id) from e

        # Durable before anyone can observe the event
        await self.db.commit()

        logger.info(
            "Recorded result %s: quiz=%s student=%s score=%.2f passed=%s",
            result.id,
            result.quiz_id,
            result.student_id,
            result.score,
            result.passed,
        )

        await self.publisher.publish(result)
        return result

    async def get_results(
        self,
        quiz_id: str | None = None,
        student_id: str | None = None,
    ) -> list[QuizResult]:
        """List recorded results, oldest first.

        Args:
            quiz_id: Restrict to one quiz.
            student_id: Restrict to one student.

        Returns:
            Matching results.
        """
        return await self._results.list(quiz_id=quiz_id, student_id=student_id)
