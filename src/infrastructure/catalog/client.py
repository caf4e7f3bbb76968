# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""HTTP client for the external course catalog service.

The catalog is read-only from this service's point of view. It is served
by the course service's GraphQL endpoint; only the two lookups the
preference pipeline needs are implemented:

- ``course(id)``: a single course, or null
- ``courses(category, level, isPublished)``: filtered listing

Transport failures, timeouts and 5xx responses raise
CatalogUnavailableError, which callers treat as retryable. Everything else
(4xx, GraphQL errors, records that do not parse) raises CatalogError.
"""

import logging
from typing import Any

import httpx
from pydantic import ValidationError

from src.core.config.settings import CatalogSettings, get_settings
from src.models.preference import PreferredLevel
from src.models.recommendation import CourseCandidate

logger = logging.getLogger(__name__)

_COURSE_FIELDS = "id title category level duration rating isPublished"

COURSE_QUERY = f"""
query Course($id: ID!) {{
  course(id: $id) {{ {_COURSE_FIELDS} }}
}}
"""

COURSES_QUERY = f"""
query Courses($category: String, $level: String, $isPublished: Boolean) {{
  courses(category: $category, level: $level, isPublished: $isPublished) {{ {_COURSE_FIELDS} }}
}}
"""


class CatalogError(Exception):
    """Base exception for catalog lookups.

    Attributes:
        message: Human-readable error description.
        original_error: The underlying transport or parsing error.
    """

    def __init__(self, message: str, original_error: Exception | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.original_error = original_error

    def __str__(self) -> str:
        if self.original_error:
            return f"{self.message}: {self.original_error}"
        return self.message


class CatalogUnavailableError(CatalogError):
    """Raised when the catalog cannot be reached or fails server-side."""


class CatalogClient:
    """Async client for course lookups.

    Example:
        client = CatalogClient()
        course = await client.get_course("c-1")
        published = await client.find_courses(published=True)
        await client.close()
    """

    def __init__(
        self,
        settings: CatalogSettings | None = None,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        self._settings = settings or get_settings().catalog
        self._client = http_client

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(
                timeout=self._settings.timeout,
                headers={"Content-Type": "application/json"},
            )
        return self._client

    async def close(self) -> None:
        """Close the underlying HTTP client."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def _query(self, query: str, variables: dict[str, Any]) -> dict[str, Any]:
        try:
            response = await self._get_client().post(
                self._settings.url,
                json={"query": query, "variables": variables},
            )
        except httpx.RequestError as e:
            raise CatalogUnavailableError("Catalog service not reachable", e) from e

        if response.status_code >= 500:
            raise CatalogUnavailableError(f"Catalog service error {response.status_code}")
        if response.status_code != 200:
            raise CatalogError(f"Catalog request rejected with {response.status_code}")

        body = response.json()
        if body.get("errors"):
            messages = "; ".join(str(err.get("message", err)) for err in body["errors"])
            raise CatalogError(f"Catalog query failed: {messages}")
        return body.get("data") or {}

    def _parse(self, record: dict[str, Any]) -> CourseCandidate:
        try:
            return CourseCandidate.model_validate(record)
        except ValidationError as e:
            raise CatalogError(f"Invalid course record {record.get('id')}", e) from e

    async def get_course(self, course_id: str) -> CourseCandidate | None:
        """Look up a single course.

        Args:
            course_id: Catalog course identifier.

        Returns:
            The course, or None if the catalog has no such course.

        Raises:
            CatalogUnavailableError: On transport failure or 5xx.
            CatalogError: On any other failure.
        """
        data = await self._query(COURSE_QUERY, {"id": course_id})
        record = data.get("course")
        if record is None:
            return None
        return self._parse(record)

    async def find_courses(
        self,
        category: str | None = None,
        level: PreferredLevel | None = None,
        published: bool | None = None,
    ) -> list[CourseCandidate]:
        """List courses matching the given filters.

        Records that fail to parse are skipped with a warning so one bad
        catalog entry does not hide the rest.
        """
        variables = {
            "category": category,
            "level": level.value if level is not None else None,
            "isPublished": published,
        }
        data = await self._query(COURSES_QUERY, variables)

        courses: list[CourseCandidate] = []
        for record in data.get("courses") or []:
            try:
                courses.append(self._parse(record))
            except CatalogError as e:
                logger.warning("Skipping catalog record: %s", e)
        return courses
