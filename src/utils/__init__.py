# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Utility functions and helpers.

This package contains cross-cutting utilities:
- logging: Structured logging with structlog
- datetime: Timezone-aware datetime operations
- retry: Bounded exponential backoff for remote calls
"""

from src.utils.datetime import ensure_utc, format_iso, parse_iso, utc_now
from src.utils.logging import bind_context, clear_context, get_logger, setup_logging
from src.utils.retry import RetryExhaustedError, retry_async

__all__ = [
    # Logging
    "setup_logging",
    "get_logger",
    "bind_context",
    "clear_context",
    # Datetime
    "utc_now",
    "ensure_utc",
    "format_iso",
    "parse_iso",
    # Retry
    "retry_async",
    "RetryExhaustedError",
]
