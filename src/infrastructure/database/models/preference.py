# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Preference profile table.

One row per user. ``version`` is SQLAlchemy's optimistic concurrency
counter: a write based on a stale read fails with StaleDataError instead
of silently overwriting a concurrent update.
"""

from datetime import datetime
from typing import Any

from sqlalchemy import DateTime, Float, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from src.infrastructure.database.models.base import Base, CreatedAtMixin, JSONType
from src.utils.datetime import utc_now


class PreferenceProfileModel(CreatedAtMixin, Base):
    """Per-user preference profile."""

    __tablename__ = "preference_profiles"

    user_id: Mapped[str] = mapped_column(String(64), primary_key=True)
    quiz_history: Mapped[list[dict[str, Any]]] = mapped_column(JSONType, default=list, nullable=False)
    seen_quiz_ids: Mapped[list[str]] = mapped_column(JSONType, default=list, nullable=False)
    preferred_categories: Mapped[list[str]] = mapped_column(JSONType, default=list, nullable=False)
    preferred_level: Mapped[str] = mapped_column(String(20), default="beginner", nullable=False)
    time_availability: Mapped[float] = mapped_column(Float, nullable=False)
    learning_style: Mapped[str] = mapped_column(String(20), default="visual", nullable=False)
    completed_courses: Mapped[list[dict[str, Any]]] = mapped_column(
        JSONType,
        default=list,
        nullable=False,
    )
    version: Mapped[int] = mapped_column(Integer, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utc_now,
        onupdate=utc_now,
        nullable=False,
    )

    __mapper_args__ = {"version_id_col": version}
