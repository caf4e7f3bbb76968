# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Preference profile API endpoints.

- GET /{user_id} - Get a user's preference profile
- PATCH /{user_id} - Change time availability or learning style
"""

import logging

from fastapi import APIRouter, Depends, HTTPException, status

from src.api.dependencies import get_preference_service
from src.domains.preferences import (
    LockTimeoutError,
    PreferenceService,
    ProfileNotFoundError,
)
from src.models.preference import PreferenceProfileResponse, UpdatePreferenceRequest

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get(
    "/{user_id}",
    response_model=PreferenceProfileResponse,
    summary="Get preference profile",
)
async def get_profile(
    user_id: str,
    service: PreferenceService = Depends(get_preference_service),
) -> PreferenceProfileResponse:
    """Get a user's preference profile.

    Raises:
        HTTPException: 404 if no profile exists yet.
    """
    try:
        return await service.get_profile(user_id)
    except ProfileNotFoundError:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Preference profile not found",
        )


@router.patch(
    "/{user_id}",
    response_model=PreferenceProfileResponse,
    summary="Update preference settings",
    description="Only time availability and learning style are user-editable.",
)
async def update_profile(
    user_id: str,
    data: UpdatePreferenceRequest,
    service: PreferenceService = Depends(get_preference_service),
) -> PreferenceProfileResponse:
    """Update the user-owned fields of a profile.

    Raises:
        HTTPException: 503 if the profile is locked by a running update.
    """
    try:
        return await service.update_settings(user_id, data)
    except LockTimeoutError:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Profile is being updated, try again shortly",
        )
