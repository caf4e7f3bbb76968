# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Quiz result API endpoints.

- GET / - List recorded results, filterable by quiz and student
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Query

from src.api.dependencies import get_quiz_service
from src.domains.quiz import QuizService
from src.models.quiz import QuizResultList

router = APIRouter()


@router.get(
    "",
    response_model=QuizResultList,
    summary="List quiz results",
    description="Recorded results, oldest first.",
)
async def list_results(
    quiz_id: Annotated[str | None, Query(description="Filter by quiz")] = None,
    student_id: Annotated[str | None, Query(description="Filter by student")] = None,
    service: QuizService = Depends(get_quiz_service),
) -> QuizResultList:
    """List quiz results."""
    results = await service.get_results(quiz_id=quiz_id, student_id=student_id)
    return QuizResultList(items=results, total=len(results))
