# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Background task actors.

- Preferences: apply quiz result and course completion events to profiles

Usage:
    from src.infrastructure.background.tasks import apply_preference_event

    apply_preference_event.send("quiz.result", event.to_payload())

Running Workers:
    dramatiq src.infrastructure.background.tasks --processes 2 --threads 4
"""

from src.infrastructure.background.tasks.preferences import (
    apply_preference_event,
    get_preference_actors,
)

# Re-export run_async for convenience
from src.infrastructure.background.tasks.base import run_async

__all__ = [
    "apply_preference_event",
    "run_async",
    "get_all_actors",
]


def get_all_actors() -> list:
    """Get list of all defined actors."""
    return get_preference_actors()
