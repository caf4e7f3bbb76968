# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Integration tests for the HTTP API.

The app is built with create_app() and services are swapped for mocks
through dependency overrides, so no database or Redis is needed.
"""

from unittest.mock import AsyncMock, MagicMock

import pytest
from fastapi.testclient import TestClient

from src.api.app import create_app
from src.api.dependencies import (
    get_bridge,
    get_preference_service,
    get_quiz_service,
    get_recommendation_service,
)
from src.domains.preferences import LockTimeoutError, ProfileNotFoundError, to_response
from src.domains.quiz import AttemptAlreadySubmittedError, QuizNotFoundError
from src.domains.quiz.grading import grade
from src.infrastructure.catalog import CatalogUnavailableError
from src.infrastructure.events import PublishError
from src.models.preference import PreferenceProfile, PreferredLevel
from src.models.recommendation import RecommendationEntry

pytestmark = pytest.mark.integration


@pytest.fixture
def quiz_service():
    service = MagicMock()
    service.create_quiz = AsyncMock()
    service.get_quiz = AsyncMock()
    service.submit_quiz = AsyncMock()
    service.get_results = AsyncMock(return_value=[])
    return service


@pytest.fixture
def preference_service():
    service = MagicMock()
    service.get_profile = AsyncMock()
    service.update_settings = AsyncMock()
    return service


@pytest.fixture
def recommendation_service():
    service = MagicMock()
    service.recommend = AsyncMock(return_value=[])
    return service


@pytest.fixture
def bridge():
    mock = MagicMock()
    mock.forward = AsyncMock()
    return mock


@pytest.fixture
def client(quiz_service, preference_service, recommendation_service, bridge):
    """Test client with mocked services."""
    app = create_app()
    app.dependency_overrides[get_quiz_service] = lambda: quiz_service
    app.dependency_overrides[get_preference_service] = lambda: preference_service
    app.dependency_overrides[get_recommendation_service] = lambda: recommendation_service
    app.dependency_overrides[get_bridge] = lambda: bridge
    return TestClient(app)


class TestQuizEndpoints:
    """Tests for /api/v1/quizzes."""

    def test_create_quiz(self, client, quiz_service, two_question_quiz) -> None:
        """Creating a quiz returns 201 with the definition."""
        quiz_service.create_quiz.return_value = two_question_quiz

        response = client.post(
            "/api/v1/quizzes",
            json={
                "title": "Fractions",
                "passing_score": 50,
                "questions": [
                    {
                        "text": "1/2 + 1/2?",
                        "type": "single_choice",
                        "options": ["1", "2"],
                        "correct_answers": ["1"],
                        "points": 5,
                    }
                ],
            },
        )

        assert response.status_code == 201
        assert response.json()["id"] == "quiz-1"

    def test_create_quiz_validation(self, client) -> None:
        """An invalid passing score is rejected."""
        response = client.post(
            "/api/v1/quizzes", json={"title": "Bad", "passing_score": 150}
        )

        assert response.status_code == 422

    def test_get_missing_quiz(self, client, quiz_service) -> None:
        """A missing quiz is 404."""
        quiz_service.get_quiz.side_effect = QuizNotFoundError("missing")

        assert client.get("/api/v1/quizzes/missing").status_code == 404

    def test_submit(self, client, quiz_service, two_question_quiz, make_submission) -> None:
        """A submission is graded and returned with 201."""
        quiz_service.submit_quiz.return_value = grade(
            two_question_quiz, make_submission({"q1": ["1"], "q2": ["2/4"]})
        )

        response = client.post(
            "/api/v1/quizzes/quiz-1/submissions",
            json={
                "student_id": "student-1",
                "answers": [
                    {"question_id": "q1", "selected_answers": ["1"]},
                    {"question_id": "q2", "selected_answers": ["2/4"]},
                ],
            },
        )

        assert response.status_code == 201
        assert response.json()["score"] == 50.0
        submission = quiz_service.submit_quiz.await_args.args[0]
        assert submission.quiz_id == "quiz-1"
        assert submission.student_id == "student-1"

    def test_submit_duplicate_attempt(self, client, quiz_service) -> None:
        """A second attempt under the single-attempt policy is 409."""
        quiz_service.submit_quiz.side_effect = AttemptAlreadySubmittedError(
            "quiz-1", "student-1"
        )

        response = client.post(
            "/api/v1/quizzes/quiz-1/submissions",
            json={"student_id": "student-1", "answers": []},
        )

        assert response.status_code == 409

    def test_submit_unknown_quiz(self, client, quiz_service) -> None:
        """Submitting to a missing quiz is 404."""
        quiz_service.submit_quiz.side_effect = QuizNotFoundError("missing")

        response = client.post(
            "/api/v1/quizzes/missing/submissions",
            json={"student_id": "student-1", "answers": []},
        )

        assert response.status_code == 404

    def test_list_results(self, client, quiz_service) -> None:
        """Results are listed with filters passed through."""
        response = client.get("/api/v1/quiz-results", params={"student_id": "student-1"})

        assert response.status_code == 200
        assert response.json() == {"items": [], "total": 0}
        quiz_service.get_results.assert_awaited_once_with(quiz_id=None, student_id="student-1")


class TestPreferenceEndpoints:
    """Tests for /api/v1/preferences."""

    def test_get_profile(self, client, preference_service) -> None:
        """A profile is returned with its rolling average."""
        preference_service.get_profile.return_value = to_response(
            PreferenceProfile(user_id="student-1", preferred_level=PreferredLevel.ADVANCED)
        )

        response = client.get("/api/v1/preferences/student-1")

        assert response.status_code == 200
        body = response.json()
        assert body["preferred_level"] == "advanced"
        assert body["rolling_average"] is None

    def test_get_missing_profile(self, client, preference_service) -> None:
        """A user without a profile is 404."""
        preference_service.get_profile.side_effect = ProfileNotFoundError("nobody")

        assert client.get("/api/v1/preferences/nobody").status_code == 404

    def test_update_settings(self, client, preference_service) -> None:
        """Editable fields are passed to the service."""
        preference_service.update_settings.return_value = to_response(
            PreferenceProfile(user_id="student-1", time_availability=4)
        )

        response = client.patch(
            "/api/v1/preferences/student-1", json={"time_availability": 4}
        )

        assert response.status_code == 200
        user_id, request = preference_service.update_settings.await_args.args
        assert user_id == "student-1"
        assert request.time_availability == 4

    def test_update_locked_profile(self, client, preference_service) -> None:
        """A profile locked by a running update is 503."""
        preference_service.update_settings.side_effect = LockTimeoutError("student-1")

        response = client.patch(
            "/api/v1/preferences/student-1", json={"learning_style": "reading"}
        )

        assert response.status_code == 503


class TestRecommendationEndpoints:
    """Tests for /api/v1/recommendations."""

    def test_recommendations(self, client, recommendation_service) -> None:
        """Ranked entries are returned."""
        recommendation_service.recommend.return_value = [
            RecommendationEntry(course_id="c2", score=8.0),
            RecommendationEntry(course_id="c1", score=7.0),
        ]

        response = client.get("/api/v1/recommendations/student-1")

        assert response.status_code == 200
        body = response.json()
        assert body["user_id"] == "student-1"
        assert [entry["course_id"] for entry in body["recommendations"]] == ["c2", "c1"]

    def test_catalog_unavailable(self, client, recommendation_service) -> None:
        """A catalog outage is 503."""
        recommendation_service.recommend.side_effect = CatalogUnavailableError("down")

        assert client.get("/api/v1/recommendations/student-1").status_code == 503


class TestEventEndpoints:
    """Tests for /api/v1/events."""

    def test_course_completed_accepted(
        self, client, bridge, course_completed_payload
    ) -> None:
        """A valid completion is forwarded and acknowledged with 202."""
        response = client.post(
            "/api/v1/events/course-completed", json=course_completed_payload("c1")
        )

        assert response.status_code == 202
        assert response.json() == {"accepted": True, "event_type": "course.completed"}
        event_type, payload = bridge.forward.await_args.args
        assert event_type == "course.completed"
        assert payload["courseId"] == "c1"

    def test_malformed_completion(self, client, bridge) -> None:
        """A malformed payload is 422 and not forwarded."""
        response = client.post("/api/v1/events/course-completed", json={"courseId": "c1"})

        assert response.status_code == 422
        bridge.forward.assert_not_awaited()

    def test_broker_unavailable(self, client, bridge, course_completed_payload) -> None:
        """A broker failure is 503."""
        bridge.forward.side_effect = PublishError("course.completed")

        response = client.post(
            "/api/v1/events/course-completed", json=course_completed_payload("c1")
        )

        assert response.status_code == 503


class TestHealthEndpoints:
    """Tests for health probes."""

    def test_health_without_backends(self, client) -> None:
        """Without database and Redis the service reports unhealthy."""
        response = client.get("/health")

        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "unhealthy"
        assert body["components"]["database"]["status"] == "unhealthy"

    def test_readiness_without_backends(self, client) -> None:
        """The service is not ready without its backends."""
        response = client.get("/health/ready")

        assert response.status_code == 200
        assert response.json()["ready"] is False

    def test_request_id_header(self, client) -> None:
        """Every response carries a request id."""
        response = client.get("/health", headers={"X-Request-ID": "req-1"})

        assert response.headers["X-Request-ID"] == "req-1"
