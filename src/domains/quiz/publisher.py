# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Result publisher.

Publishes a ``quiz.result`` event for a result that is already durable.
Delivery is at-least-once: broker failures are retried with bounded
exponential backoff, and once retries are exhausted the event goes to the
dead-letter table and an operational alert is raised. The result itself is
never rolled back.
"""

import asyncio
import logging
from typing import Awaitable, Callable

from redis.backoff import ExponentialBackoff
from sqlalchemy.exc import SQLAlchemyError

from src.core.config.settings import PublisherSettings
from src.domains.quiz.repository import DeadLetterRepository
from src.infrastructure.events import (
    EventBus,
    EventToDramatiqBridge,
    EventTypes,
    PublishError,
)
from src.models.events import QuizResultEvent
from src.models.quiz import QuizResult
from src.utils.retry import RetryExhaustedError, retry_async

logger = logging.getLogger(__name__)


def result_event(result: QuizResult) -> QuizResultEvent:
    """Build the wire event for a graded result."""
    return QuizResultEvent(
        quiz_id=result.quiz_id,
        student_id=result.student_id,
        score=result.score,
        passed=result.passed,
        submitted_at=result.submitted_at,
    )


class ResultPublisher:
    """Publishes persisted quiz results to the broker.

    Attributes:
        bridge: Bridge handing events to Dramatiq.
        dead_letters: Repository receiving undeliverable events.
        event_bus: In-process bus the alert is raised on.
    """

    def __init__(
        self,
        bridge: EventToDramatiqBridge,
        dead_letters: DeadLetterRepository,
        settings: PublisherSettings,
        event_bus: EventBus,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        self.bridge = bridge
        self.dead_letters = dead_letters
        self.event_bus = event_bus
        self._settings = settings
        self._sleep = sleep

    async def publish(self, result: QuizResult) -> bool:
        """Publish a result event.

        Must only be called after ``result`` has been committed.

        Args:
            result: The persisted result.

        Returns:
            True if the broker accepted the event, False if it was
            dead-lettered.
        """
        payload = result_event(result).to_payload()

        try:
            await retry_async(
                lambda: self.bridge.forward(EventTypes.Quiz.RESULT, payload),
                retries=self._settings.max_retries,
                backoff=ExponentialBackoff(
                    cap=self._settings.backoff_cap,
                    base=self._settings.backoff_base,
                ),
                retry_on=(PublishError,),
                operation=f"publish {EventTypes.Quiz.RESULT}",
                sleep=self._sleep,
            )
        except RetryExhaustedError as e:
            await self._dead_letter(result, payload, e)
            return False

        logger.info(
            "Published result %s for quiz %s, student %s",
            result.id,
            result.quiz_id,
            result.student_id,
        )
        return True

    async def _dead_letter(
        self,
        result: QuizResult,
        payload: dict,
        error: RetryExhaustedError,
    ) -> None:
        dead_letter_id: str | None = None
        try:
            dead_letter_id = await self.dead_letters.record(
                event_type=EventTypes.Quiz.RESULT,
                payload=payload,
                error=str(error.last_error),
                attempts=error.attempts,
            )
        except SQLAlchemyError:
            logger.exception(
                "Could not dead-letter %s event for result %s",
                EventTypes.Quiz.RESULT,
                result.id,
            )

        logger.critical(
            "ALERT: %s event for result %s undeliverable after %d attempts "
            "(dead letter %s): %s",
            EventTypes.Quiz.RESULT,
            result.id,
            error.attempts,
            dead_letter_id,
            error.last_error,
        )
        await self.event_bus.publish(
            EventTypes.Ops.ALERT_RAISED,
            {
                "source": "result_publisher",
                "eventType": EventTypes.Quiz.RESULT,
                "resultId": result.id,
                "deadLetterId": dead_letter_id,
                "attempts": error.attempts,
                "error": str(error.last_error),
            },
        )
