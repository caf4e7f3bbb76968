# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""SQLAlchemy ORM models."""

from src.infrastructure.database.models.base import Base
from src.infrastructure.database.models.dead_letter import DeadLetterEventModel
from src.infrastructure.database.models.preference import PreferenceProfileModel
from src.infrastructure.database.models.quiz import QuizModel, QuizResultModel

__all__ = [
    "Base",
    "QuizModel",
    "QuizResultModel",
    "PreferenceProfileModel",
    "DeadLetterEventModel",
]
