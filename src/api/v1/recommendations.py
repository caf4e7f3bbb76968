# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Recommendation API endpoints.

- GET /{user_id} - Top course recommendations for a user
"""

import logging

from fastapi import APIRouter, Depends, HTTPException, status

from src.api.dependencies import get_recommendation_service
from src.domains.recommendation import RecommendationService
from src.infrastructure.catalog import CatalogError
from src.models.recommendation import RecommendationResponse

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get(
    "/{user_id}",
    response_model=RecommendationResponse,
    summary="Get recommendations",
    description="Ranked published courses for the user; empty without a profile.",
)
async def get_recommendations(
    user_id: str,
    service: RecommendationService = Depends(get_recommendation_service),
) -> RecommendationResponse:
    """Recommend courses for a user.

    Raises:
        HTTPException: 503 if the course catalog is unavailable.
    """
    try:
        recommendations = await service.recommend(user_id)
    except CatalogError as e:
        logger.warning("Recommendations for %s unavailable: %s", user_id, e)
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Course catalog unavailable",
        )
    return RecommendationResponse(user_id=user_id, recommendations=recommendations)
