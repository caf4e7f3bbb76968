# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Quiz definition and quiz result tables.

``quiz_results`` is an append-only log: rows are inserted once and never
updated or deleted. ``attempt_key`` carries the uniqueness policy; it is
the result id when repeated attempts are allowed and ``quiz_id:student_id``
when only one attempt per student is recorded.
"""

from datetime import datetime
from typing import Any

from sqlalchemy import Boolean, DateTime, Float, ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from src.infrastructure.database.models.base import Base, CreatedAtMixin, JSONType, new_id
from src.utils.datetime import utc_now


class QuizModel(CreatedAtMixin, Base):
    """An authored quiz with its questions stored as a JSON document."""

    __tablename__ = "quizzes"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    course_id: Mapped[str | None] = mapped_column(String(64), index=True, nullable=True)
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str] = mapped_column(Text, default="", nullable=False)
    questions: Mapped[list[dict[str, Any]]] = mapped_column(JSONType, default=list, nullable=False)
    time_limit: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    passing_score: Mapped[float] = mapped_column(Float, nullable=False)


class QuizResultModel(Base):
    """A graded submission."""

    __tablename__ = "quiz_results"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    quiz_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("quizzes.id"),
        index=True,
        nullable=False,
    )
    student_id: Mapped[str] = mapped_column(String(64), index=True, nullable=False)
    attempt_key: Mapped[str] = mapped_column(String(128), unique=True, nullable=False)
    score: Mapped[float] = mapped_column(Float, nullable=False)
    passed: Mapped[bool] = mapped_column(Boolean, nullable=False)
    earned_points: Mapped[float] = mapped_column(Float, nullable=False)
    total_points: Mapped[float] = mapped_column(Float, nullable=False)
    question_results: Mapped[list[dict[str, Any]]] = mapped_column(
        JSONType,
        default=list,
        nullable=False,
    )
    submitted_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utc_now,
        index=True,
        nullable=False,
    )
