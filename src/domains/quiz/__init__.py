# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Quiz domain package.

This package provides quiz functionality including:
- Pure grading of submissions
- Append-only result storage
- Result publishing with retry and dead-lettering
"""

from src.domains.quiz.grading import grade
from src.domains.quiz.publisher import ResultPublisher
from src.domains.quiz.repository import (
    DeadLetterRepository,
    QuizRepository,
    QuizResultRepository,
)
from src.domains.quiz.service import (
    AttemptAlreadySubmittedError,
    QuizNotFoundError,
    QuizService,
    QuizServiceError,
)

__all__ = [
    "grade",
    "ResultPublisher",
    "QuizRepository",
    "QuizResultRepository",
    "DeadLetterRepository",
    "QuizService",
    "QuizServiceError",
    "QuizNotFoundError",
    "AttemptAlreadySubmittedError",
]
