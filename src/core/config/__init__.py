# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Configuration package.

Example:
    >>> from src.core.config import get_settings
    >>> settings = get_settings()
    >>> print(settings.preference.history_size)
    10
"""

from src.core.config.settings import (
    APISettings,
    CatalogSettings,
    CORSSettings,
    DatabaseSettings,
    PreferenceSettings,
    PublisherSettings,
    QuizSettings,
    RateLimitSettings,
    RedisSettings,
    Settings,
    WorkerSettings,
    clear_settings_cache,
    get_settings,
)

__all__ = [
    # Settings
    "Settings",
    "get_settings",
    "clear_settings_cache",
    # Subsettings
    "DatabaseSettings",
    "RedisSettings",
    "CatalogSettings",
    "PublisherSettings",
    "PreferenceSettings",
    "QuizSettings",
    "RateLimitSettings",
    "CORSSettings",
    "APISettings",
    "WorkerSettings",
]
