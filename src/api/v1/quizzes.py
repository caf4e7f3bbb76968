# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Quiz API endpoints.

This module provides endpoints for quiz authoring and submission:
- POST / - Create a quiz
- GET /{quiz_id} - Get a quiz definition
- POST /{quiz_id}/submissions - Grade and record a submission
"""

import logging

from fastapi import APIRouter, Depends, HTTPException, Request, status

from src.api.dependencies import get_quiz_service
from src.api.middleware.rate_limit import limiter, submission_limit
from src.domains.quiz import (
    AttemptAlreadySubmittedError,
    QuizNotFoundError,
    QuizService,
)
from src.models.quiz import (
    CreateQuizRequest,
    QuizDefinition,
    QuizResult,
    QuizSubmission,
    SubmitQuizRequest,
)
from src.utils.logging import bind_context

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post(
    "",
    response_model=QuizDefinition,
    status_code=status.HTTP_201_CREATED,
    summary="Create quiz",
    description="Create a quiz definition. Question ids are assigned by the server.",
)
async def create_quiz(
    data: CreateQuizRequest,
    service: QuizService = Depends(get_quiz_service),
) -> QuizDefinition:
    """Create a new quiz.

    Args:
        data: Quiz authoring payload.
        service: Quiz service.

    Returns:
        The stored quiz definition.
    """
    logger.info("Creating quiz: %s (%d questions)", data.title, len(data.questions))
    return await service.create_quiz(data)


@router.get(
    "/{quiz_id}",
    response_model=QuizDefinition,
    summary="Get quiz",
)
async def get_quiz(
    quiz_id: str,
    service: QuizService = Depends(get_quiz_service),
) -> QuizDefinition:
    """Get a quiz definition.

    Raises:
        HTTPException: 404 if the quiz does not exist.
    """
    try:
        return await service.get_quiz(quiz_id)
    except QuizNotFoundError:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Quiz not found",
        )


@router.post(
    "/{quiz_id}/submissions",
    response_model=QuizResult,
    status_code=status.HTTP_201_CREATED,
    summary="Submit quiz",
    description="Grade a submission, record the result and publish it.",
)
@limiter.limit(submission_limit)
async def submit_quiz(
    request: Request,
    quiz_id: str,
    data: SubmitQuizRequest,
    service: QuizService = Depends(get_quiz_service),
) -> QuizResult:
    """Submit answers to a quiz.

    Args:
        request: HTTP request (used by the rate limiter).
        quiz_id: Quiz being answered.
        data: The student's answers.
        service: Quiz service.

    Returns:
        The graded result.

    Raises:
        HTTPException: 404 if the quiz does not exist, 409 if the student
            already submitted under the single-attempt policy.
    """
    bind_context(quiz_id=quiz_id, student_id=data.student_id)
    submission = QuizSubmission(quiz_id=quiz_id, **data.model_dump())

    try:
        return await service.submit_quiz(submission)
    except QuizNotFoundError:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Quiz not found",
        )
    except AttemptAlreadySubmittedError as e:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=str(e),
        )
