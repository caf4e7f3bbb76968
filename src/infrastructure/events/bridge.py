# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Event-to-Dramatiq bridge.

Hands events to the durable broker and, once the broker accepted them,
fans them out on the in-process EventBus.

Architecture:
    ResultPublisher → Bridge.forward() → Redis queue → Dramatiq worker
                                       ↘ EventBus (local subscribers)

Events registered in EventRegistry as preference events are sent to the
``apply_preference_event`` actor. Other events are local only.

Example:
    from src.infrastructure.events.bridge import get_event_bridge

    bridge = get_event_bridge()
    await bridge.forward(EventTypes.Quiz.RESULT, event.to_payload())
"""

import asyncio
import logging
from typing import Any

from src.infrastructure.events.bus import EventBus, get_event_bus
from src.infrastructure.events.types import EventRegistry

logger = logging.getLogger(__name__)


class PublishError(Exception):
    """Raised when the broker does not accept an event.

    Attributes:
        event_type: Event type that failed to publish.
        original_error: The underlying broker error.
    """

    def __init__(self, event_type: str, original_error: Exception | None = None) -> None:
        super().__init__(f"Failed to publish {event_type}")
        self.event_type = event_type
        self.original_error = original_error

    def __str__(self) -> str:
        if self.original_error:
            return f"Failed to publish {self.event_type}: {self.original_error}"
        return f"Failed to publish {self.event_type}"


class EventToDramatiqBridge:
    """Routes events to Dramatiq actors.

    Attributes:
        _event_bus: EventBus receiving events after the broker accepted them.
        _events_forwarded: Count of events accepted by the broker.
        _errors: Count of broker send failures.
    """

    def __init__(self, event_bus: EventBus | None = None) -> None:
        self._event_bus = event_bus or get_event_bus()
        self._events_forwarded = 0
        self._errors = 0

    async def forward(self, event_type: str, payload: dict[str, Any]) -> None:
        """Send one event to the broker, then publish it locally.

        Args:
            event_type: Event type string.
            payload: JSON-serializable event payload.

        Raises:
            PublishError: If the broker rejects the message.
        """
        if EventRegistry.is_preference_event(event_type):
            # Import here to avoid circular imports and ensure broker is initialized
            from src.infrastructure.background.tasks import apply_preference_event

            try:
                # Dramatiq send is blocking network I/O against Redis
                await asyncio.to_thread(
                    apply_preference_event.send,
                    event_type,
                    payload,
                )
            except Exception as e:
                self._errors += 1
                raise PublishError(event_type, e) from e

            self._events_forwarded += 1
            logger.debug("Event forwarded to Dramatiq: %s", event_type)

        await self._event_bus.publish(event_type, payload)

    def get_stats(self) -> dict[str, Any]:
        """Get bridge statistics."""
        return {
            "events_forwarded": self._events_forwarded,
            "errors": self._errors,
        }


_bridge_instance: EventToDramatiqBridge | None = None


def get_event_bridge() -> EventToDramatiqBridge:
    """Get the singleton bridge instance."""
    global _bridge_instance
    if _bridge_instance is None:
        _bridge_instance = EventToDramatiqBridge()
    return _bridge_instance


def reset_event_bridge() -> None:
    """Drop the singleton bridge (used at shutdown and in tests)."""
    global _bridge_instance
    _bridge_instance = None
