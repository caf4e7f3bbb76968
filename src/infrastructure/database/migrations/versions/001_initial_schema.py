# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Initial schema: quizzes, quiz results, preference profiles, dead letters.

Revision ID: 001_initial_schema
Revises:
Create Date: 2026-10-17
"""

from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op
from sqlalchemy.dialects import postgresql

revision: str = "001_initial_schema"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create all tables."""

    op.create_table(
        "quizzes",
        sa.Column("id", sa.String(36), nullable=False),
        sa.Column("course_id", sa.String(64), nullable=True),
        sa.Column("title", sa.String(255), nullable=False),
        sa.Column("description", sa.Text, nullable=False, server_default=""),
        sa.Column("questions", postgresql.JSONB, nullable=False),
        sa.Column("time_limit", sa.Integer, nullable=False, server_default="0"),
        sa.Column("passing_score", sa.Float, nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_quizzes_course_id", "quizzes", ["course_id"])

    op.create_table(
        "quiz_results",
        sa.Column("id", sa.String(36), nullable=False),
        sa.Column("quiz_id", sa.String(36), nullable=False),
        sa.Column("student_id", sa.String(64), nullable=False),
        # result id, or quiz_id:student_id under the single-attempt policy
        sa.Column("attempt_key", sa.String(128), nullable=False),
        sa.Column("score", sa.Float, nullable=False),
        sa.Column("passed", sa.Boolean, nullable=False),
        sa.Column("earned_points", sa.Float, nullable=False),
        sa.Column("total_points", sa.Float, nullable=False),
        sa.Column("question_results", postgresql.JSONB, nullable=False),
        sa.Column("submitted_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["quiz_id"], ["quizzes.id"]),
        sa.UniqueConstraint("attempt_key", name="uq_quiz_results_attempt_key"),
        sa.CheckConstraint("score >= 0 AND score <= 100", name="ck_quiz_results_score_range"),
        sa.CheckConstraint("earned_points <= total_points", name="ck_quiz_results_points"),
    )
    op.create_index("ix_quiz_results_quiz_id", "quiz_results", ["quiz_id"])
    op.create_index("ix_quiz_results_student_id", "quiz_results", ["student_id"])
    op.create_index("ix_quiz_results_submitted_at", "quiz_results", ["submitted_at"])

    op.create_table(
        "preference_profiles",
        sa.Column("user_id", sa.String(64), nullable=False),
        sa.Column("quiz_history", postgresql.JSONB, nullable=False),
        sa.Column("seen_quiz_ids", postgresql.JSONB, nullable=False),
        sa.Column("preferred_categories", postgresql.JSONB, nullable=False),
        sa.Column("preferred_level", sa.String(20), nullable=False, server_default="beginner"),
        sa.Column("time_availability", sa.Float, nullable=False),
        sa.Column("learning_style", sa.String(20), nullable=False, server_default="visual"),
        sa.Column("completed_courses", postgresql.JSONB, nullable=False),
        sa.Column("version", sa.Integer, nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("user_id"),
    )

    op.create_table(
        "dead_letter_events",
        sa.Column("id", sa.String(36), nullable=False),
        sa.Column("event_type", sa.String(100), nullable=False),
        sa.Column("payload", postgresql.JSONB, nullable=False),
        sa.Column("error", sa.Text, nullable=False),
        sa.Column("attempts", sa.Integer, nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("replayed_at", sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_dead_letter_events_event_type", "dead_letter_events", ["event_type"])


def downgrade() -> None:
    """Drop all tables."""
    op.drop_index("ix_dead_letter_events_event_type", table_name="dead_letter_events")
    op.drop_table("dead_letter_events")
    op.drop_table("preference_profiles")
    op.drop_index("ix_quiz_results_submitted_at", table_name="quiz_results")
    op.drop_index("ix_quiz_results_student_id", table_name="quiz_results")
    op.drop_index("ix_quiz_results_quiz_id", table_name="quiz_results")
    op.drop_table("quiz_results")
    op.drop_index("ix_quizzes_course_id", table_name="quizzes")
    op.drop_table("quizzes")
