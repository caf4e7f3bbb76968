# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Catalog candidate and recommendation schemas."""

from datetime import datetime

from pydantic import AliasChoices, BaseModel, ConfigDict, Field

from src.models.preference import PreferredLevel
from src.utils.datetime import utc_now


class CourseCandidate(BaseModel):
    """A course as read from the external catalog. Not owned here.

    Accepts both the catalog's camelCase documents (``_id``, ``isPublished``)
    and snake_case field names.
    """

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    id: str = Field(validation_alias=AliasChoices("id", "_id", "courseId", "course_id"))
    title: str | None = None
    category: str
    level: PreferredLevel
    duration: float = Field(ge=0, description="Expected hours of study")
    rating: float = Field(default=0.0, ge=0, le=5)
    is_published: bool = Field(
        default=False,
        validation_alias=AliasChoices("is_published", "isPublished", "published"),
    )


class RecommendationEntry(BaseModel):
    """A ranked course. Recomputed per request, never persisted."""

    model_config = ConfigDict(frozen=True)

    course_id: str
    score: float


class RecommendationResponse(BaseModel):
    """Response for the recommendation endpoint."""

    user_id: str
    recommendations: list[RecommendationEntry]
    generated_at: datetime = Field(default_factory=utc_now)
