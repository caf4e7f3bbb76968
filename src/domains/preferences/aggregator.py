# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Preference aggregator.

Consumes ``quiz.result`` and ``course.completed`` events and folds them
into per-user preference profiles. For every event it:

1. Decodes the payload into a typed event (malformed ones are skipped).
2. Looks up the course in the catalog (course completions only), with
   bounded retry. If the lookup fails, only the category update is lost.
3. Takes the per-user lock, loads or creates the profile, and applies the
   pure transformation. Already-applied events leave it untouched.
4. Saves the profile and invalidates its cached snapshot.

Storage errors propagate so the broker redelivers the message. The
transformations are idempotent, so the retry cannot double-count.
"""

import asyncio
import logging
from contextlib import AbstractAsyncContextManager
from typing import Any, Awaitable, Callable

from redis.backoff import ExponentialBackoff
from sqlalchemy.ext.asyncio import AsyncSession

from src.core.config.settings import CatalogSettings, PreferenceSettings
from src.domains.preferences.cache import ProfileCache
from src.domains.preferences.locks import KeyLock
from src.domains.preferences.profile import (
    apply_course_completion,
    apply_quiz_result,
    new_profile,
)
from src.domains.preferences.repository import PreferenceProfileRepository
from src.infrastructure.catalog import CatalogClient, CatalogError, CatalogUnavailableError
from src.models.events import (
    CourseCompletedEvent,
    MalformedEventError,
    QuizResultEvent,
    decode_event,
)
from src.models.preference import PreferenceProfile
from src.models.recommendation import CourseCandidate
from src.utils.retry import RetryExhaustedError, retry_async

logger = logging.getLogger(__name__)

SessionFactory = Callable[[], AbstractAsyncContextManager[AsyncSession]]


class PreferenceAggregator:
    """Applies preference events to profiles.

    Attributes:
        session_factory: Opens a committing database session.
        catalog: Course catalog client.
        lock: Per-user lock table.
        cache: Profile snapshot cache to invalidate after writes.
    """

    def __init__(
        self,
        session_factory: SessionFactory,
        catalog: CatalogClient,
        lock: KeyLock,
        settings: PreferenceSettings,
        catalog_settings: CatalogSettings,
        cache: ProfileCache | None = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        self.session_factory = session_factory
        self.catalog = catalog
        self.lock = lock
        self.cache = cache
        self._settings = settings
        self._catalog_settings = catalog_settings
        self._sleep = sleep

    async def handle(self, event_type: str, payload: Any) -> bool:
        """Process one raw event.

        Args:
            event_type: Type the message was published under.
            payload: Raw message body.

        Returns:
            True if the profile changed, False if the event was a
            duplicate or was skipped as malformed.
        """
        try:
            event = decode_event(event_type, payload)
        except MalformedEventError as e:
            logger.warning("Skipping malformed event: %s", e)
            return False

        if isinstance(event, QuizResultEvent):
            return await self.handle_quiz_result(event)
        return await self.handle_course_completed(event)

    async def handle_quiz_result(self, event: QuizResultEvent) -> bool:
        """Fold a quiz score into the student's profile."""
        history_size = self._settings.history_size
        applied = await self._update(
            event.student_id,
            lambda profile: apply_quiz_result(profile, event, history_size),
        )
        if applied:
            logger.info("Applied quiz %s to profile %s", event.quiz_id, event.student_id)
        else:
            logger.debug(
                "Quiz %s already applied to profile %s", event.quiz_id, event.student_id
            )
        return applied

    async def handle_course_completed(self, event: CourseCompletedEvent) -> bool:
        """Record a course completion in the student's profile."""
        course = await self._lookup_course(event.course_id)
        applied = await self._update(
            event.student_id,
            lambda profile: apply_course_completion(profile, event, course),
        )
        if applied:
            logger.info(
                "Applied completion of course %s to profile %s",
                event.course_id,
                event.student_id,
            )
        else:
            logger.debug(
                "Completion of course %s at %s already applied to profile %s",
                event.course_id,
                event.completed_at,
                event.student_id,
            )
        return applied

    async def _update(
        self,
        user_id: str,
        transform: Callable[[PreferenceProfile], tuple[PreferenceProfile, bool]],
    ) -> bool:
        async with self.lock.acquire(user_id):
            async with self.session_factory() as session:
                repository = PreferenceProfileRepository(session)
                profile = await repository.get(user_id)
                if profile is None:
                    profile = new_profile(user_id, self._settings.default_time_availability)
                    logger.info("Creating preference profile for %s", user_id)

                updated, applied = transform(profile)
                if applied:
                    await repository.save(updated)

        if applied and self.cache is not None:
            await self.cache.invalidate(user_id)
        return applied

    async def _lookup_course(self, course_id: str) -> CourseCandidate | None:
        try:
            course = await retry_async(
                lambda: self.catalog.get_course(course_id),
                retries=self._catalog_settings.max_retries,
                backoff=ExponentialBackoff(
                    cap=self._catalog_settings.backoff_cap,
                    base=self._catalog_settings.backoff_base,
                ),
                retry_on=(CatalogUnavailableError,),
                operation="catalog.get_course",
                sleep=self._sleep,
            )
        except (RetryExhaustedError, CatalogError) as e:
            logger.warning(
                "Catalog lookup for course %s failed, dropping category update: %s",
                course_id,
                e,
            )
            return None

        if course is None:
            logger.warning("Course %s not found in catalog", course_id)
        return course
