# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Centralized event type definitions.

Using constants instead of string literals gives a single source of truth
for event names shared by publishers, the broker bridge and consumers.

Adding a new event:
1. Add constant to appropriate class here
2. If it must reach a background worker, route it in EventRegistry
"""


class EventTypes:
    """All event types organized by domain."""

    class Quiz:
        """Quiz domain events."""

        CREATED = "quiz.created"
        RESULT = "quiz.result"

    class Course:
        """Events reported by the external progress tracker."""

        COMPLETED = "course.completed"

    class Ops:
        """Operational events."""

        ALERT_RAISED = "ops.alert.raised"


class EventPatterns:
    """Wildcard patterns for subscribing to multiple events."""

    ALL_QUIZ = "quiz.*"
    ALL_OPS = "ops.*"
    ALL = "*"


class EventRegistry:
    """Registry of events that are delivered through the durable broker."""

    # Events consumed by the preference aggregator worker
    _preference_events: frozenset[str] = frozenset(
        {
            EventTypes.Quiz.RESULT,
            EventTypes.Course.COMPLETED,
        }
    )

    @classmethod
    def is_preference_event(cls, event_type: str) -> bool:
        """Check if an event feeds the preference aggregator.

        Args:
            event_type: Event type string.

        Returns:
            True if the event is routed to the preferences queue.
        """
        return event_type in cls._preference_events

    @classmethod
    def preference_events(cls) -> frozenset[str]:
        """Get all event types routed to the preferences queue."""
        return cls._preference_events
