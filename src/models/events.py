# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Versioned event payloads consumed by the preference aggregator.

Payloads travel as flat camelCase records, for example::

    {"version": 1, "quizId": "q-1", "studentId": "s-1", "score": 50.0,
     "passed": false, "submittedAt": "2026-01-05T10:00:00+00:00"}

``decode_event`` is the single entry point for turning a raw broker
message into a typed event. It tags the payload with its event type and
validates it against the matching variant; anything that does not fit
raises ``MalformedEventError``.
"""

from datetime import datetime
from typing import Annotated, Any, Literal, Union

from pydantic import (
    AliasChoices,
    BaseModel,
    ConfigDict,
    Field,
    TypeAdapter,
    ValidationError,
    field_validator,
)
from pydantic.alias_generators import to_camel

from src.infrastructure.events.types import EventTypes
from src.utils.datetime import ensure_utc

EVENT_SCHEMA_VERSION = 1


class MalformedEventError(Exception):
    """Raised when a payload cannot be decoded into a known event.

    Attributes:
        event_type: The event type the payload arrived under.
        message: Human-readable error description.
    """

    def __init__(self, event_type: str, message: str) -> None:
        super().__init__(message)
        self.event_type = event_type
        self.message = message

    def __str__(self) -> str:
        return f"malformed {self.event_type} event: {self.message}"


class _EventPayload(BaseModel):
    """Common configuration for wire payloads."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
        extra="ignore",
    )

    version: int = EVENT_SCHEMA_VERSION

    @field_validator("version")
    @classmethod
    def known_version(cls, version: int) -> int:
        if version < 1 or version > EVENT_SCHEMA_VERSION:
            raise ValueError(f"unsupported payload version {version}")
        return version

    def to_payload(self) -> dict[str, Any]:
        """Serialize to the flat camelCase wire record (without the tag)."""
        return self.model_dump(mode="json", by_alias=True, exclude={"kind"})


class QuizResultEvent(_EventPayload):
    """A graded quiz result."""

    kind: Literal["quiz.result"] = EventTypes.Quiz.RESULT
    quiz_id: str = Field(min_length=1)
    student_id: str = Field(min_length=1)
    score: float = Field(ge=0, le=100)
    passed: bool
    submitted_at: datetime

    @field_validator("submitted_at")
    @classmethod
    def submitted_in_utc(cls, value: datetime) -> datetime:
        return ensure_utc(value)

    @property
    def idempotency_key(self) -> tuple[str, str]:
        return (self.student_id, self.quiz_id)


class CourseCompletedEvent(_EventPayload):
    """A course completion reported by the progress tracker."""

    kind: Literal["course.completed"] = EventTypes.Course.COMPLETED
    student_id: str = Field(
        min_length=1,
        validation_alias=AliasChoices("studentId", "student_id", "userId"),
    )
    course_id: str = Field(min_length=1)
    rating: float | None = Field(default=None, ge=0, le=5)
    completed_at: datetime

    @field_validator("completed_at")
    @classmethod
    def completed_in_utc(cls, value: datetime) -> datetime:
        return ensure_utc(value)

    @property
    def idempotency_key(self) -> tuple[str, str, datetime]:
        return (self.student_id, self.course_id, self.completed_at)


PreferenceEvent = Annotated[
    Union[QuizResultEvent, CourseCompletedEvent],
    Field(discriminator="kind"),
]

_preference_event_adapter: TypeAdapter[PreferenceEvent] = TypeAdapter(PreferenceEvent)


def decode_event(event_type: str, payload: Any) -> QuizResultEvent | CourseCompletedEvent:
    """Decode a raw payload into its typed event variant.

    Args:
        event_type: Event type the message was published under.
        payload: Raw message body, expected to be a JSON object.

    Returns:
        The validated event.

    Raises:
        MalformedEventError: If the type is unknown or the payload invalid.
    """
    if not isinstance(payload, dict):
        raise MalformedEventError(
            event_type, f"payload must be an object, got {type(payload).__name__}"
        )

    try:
        return _preference_event_adapter.validate_python({**payload, "kind": event_type})
    except ValidationError as e:
        raise MalformedEventError(event_type, str(e)) from e
