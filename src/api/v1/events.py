# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Inbound event endpoints.

- POST /course-completed - Accept a course completion from the progress tracker

The payload is validated here and handed to the broker; the preference
workers apply it asynchronously.
"""

import logging
from typing import Any

from fastapi import APIRouter, Body, Depends, HTTPException, status
from pydantic import BaseModel

from src.api.dependencies import get_bridge
from src.infrastructure.events import EventToDramatiqBridge, EventTypes, PublishError
from src.models.events import MalformedEventError, decode_event

logger = logging.getLogger(__name__)

router = APIRouter()


class EventAccepted(BaseModel):
    """Acknowledgement for an accepted event."""

    accepted: bool = True
    event_type: str


@router.post(
    "/course-completed",
    response_model=EventAccepted,
    status_code=status.HTTP_202_ACCEPTED,
    summary="Report course completion",
)
async def course_completed(
    payload: dict[str, Any] = Body(...),
    bridge: EventToDramatiqBridge = Depends(get_bridge),
) -> EventAccepted:
    """Queue a course completion for the preference workers.

    Raises:
        HTTPException: 422 for a malformed payload, 503 if the broker is
            unavailable.
    """
    event_type = EventTypes.Course.COMPLETED
    try:
        event = decode_event(event_type, payload)
    except MalformedEventError as e:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=str(e),
        )

    try:
        await bridge.forward(event_type, event.to_payload())
    except PublishError as e:
        logger.error("Could not queue %s event: %s", event_type, e)
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Event broker unavailable",
        )

    return EventAccepted(event_type=event_type)
