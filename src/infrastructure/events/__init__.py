# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Event infrastructure module.

Components:
- EventBus: In-process pub/sub with pattern matching
- EventTypes: Centralized event type constants
- EventToDramatiqBridge: Sends durable events to Dramatiq workers

Architecture:
    Service → Bridge.forward() → Dramatiq → Worker → DB
                               ↘ EventBus (local subscribers)
"""

from src.infrastructure.events.bridge import (
    EventToDramatiqBridge,
    PublishError,
    get_event_bridge,
    reset_event_bridge,
)
from src.infrastructure.events.bus import (
    EventBus,
    EventData,
    EventHandler,
    get_event_bus,
    reset_event_bus,
)
from src.infrastructure.events.types import (
    EventPatterns,
    EventRegistry,
    EventTypes,
)

__all__ = [
    # Event Bus
    "EventBus",
    "EventData",
    "EventHandler",
    "get_event_bus",
    "reset_event_bus",
    # Event Types
    "EventTypes",
    "EventPatterns",
    "EventRegistry",
    # Bridge
    "EventToDramatiqBridge",
    "PublishError",
    "get_event_bridge",
    "reset_event_bridge",
]
