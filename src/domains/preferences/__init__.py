# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Preferences domain package.

This package provides preference profile functionality including:
- Pure profile transformations for quiz results and course completions
- The event aggregator run by background workers
- Per-user locking and profile snapshot caching
- User-facing profile reads and settings updates
"""

from src.domains.preferences.aggregator import PreferenceAggregator
from src.domains.preferences.cache import ProfileCache
from src.domains.preferences.locks import (
    KeyedLock,
    KeyLock,
    LockTimeoutError,
    RedisKeyedLock,
)
from src.domains.preferences.profile import (
    apply_course_completion,
    apply_quiz_result,
    level_for_average,
    new_profile,
    rolling_average,
)
from src.domains.preferences.repository import PreferenceProfileRepository
from src.domains.preferences.service import (
    PreferenceService,
    PreferenceServiceError,
    ProfileNotFoundError,
    to_response,
)

__all__ = [
    "PreferenceAggregator",
    "ProfileCache",
    "KeyLock",
    "KeyedLock",
    "RedisKeyedLock",
    "LockTimeoutError",
    "apply_quiz_result",
    "apply_course_completion",
    "level_for_average",
    "new_profile",
    "rolling_average",
    "PreferenceProfileRepository",
    "PreferenceService",
    "PreferenceServiceError",
    "ProfileNotFoundError",
    "to_response",
]
