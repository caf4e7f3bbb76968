# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""API v1 routes package.

This package contains all v1 API endpoint definitions.
Each module provides a FastAPI router for a specific domain.

Modules:
    quizzes: Quiz authoring and submission.
    results: Recorded quiz results.
    preferences: Preference profiles.
    recommendations: Course recommendations.
    events: Inbound events from the progress tracker.
"""

from fastapi import APIRouter

from src.api.v1 import events, preferences, quizzes, recommendations, results

# Create the main v1 router
router = APIRouter(prefix="/api/v1")

# Include domain routers
router.include_router(quizzes.router, prefix="/quizzes", tags=["Quizzes"])
router.include_router(results.router, prefix="/quiz-results", tags=["Quiz Results"])
router.include_router(preferences.router, prefix="/preferences", tags=["Preferences"])
router.include_router(recommendations.router, prefix="/recommendations", tags=["Recommendations"])
router.include_router(events.router, prefix="/events", tags=["Events"])

__all__ = ["router"]
