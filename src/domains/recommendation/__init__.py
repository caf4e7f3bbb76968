# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Recommendation domain package."""

from src.domains.recommendation.ranker import rank, score_course
from src.domains.recommendation.service import RecommendationService

__all__ = [
    "rank",
    "score_course",
    "RecommendationService",
]
