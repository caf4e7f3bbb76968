# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Unit tests for recommendation ranking."""

import pytest

from src.domains.recommendation.ranker import rank, score_course
from src.models.preference import PreferenceProfile, PreferredLevel


@pytest.fixture
def profile():
    """Intermediate math learner with 8 hours available."""
    return PreferenceProfile(
        user_id="student-1",
        preferred_categories=["math"],
        preferred_level=PreferredLevel.INTERMEDIATE,
        time_availability=8.0,
    )


class TestScoreCourse:
    """Tests for scoring a single course."""

    def test_full_match(self, profile, make_course) -> None:
        """Category, level and duration matches add to the rating."""
        course = make_course("c1", "math", "intermediate", duration=8.0, rating=4.5)

        assert score_course(profile, course) == pytest.approx(9.5)

    def test_no_match(self, profile, make_course) -> None:
        """Without matches the score is the rating."""
        course = make_course("c1", "art", "advanced", duration=20.0, rating=3.0)

        assert score_course(profile, course) == pytest.approx(3.0)


class TestRank:
    """Tests for ranking a catalog."""

    def test_returns_at_most_five(self, profile, make_course) -> None:
        """Only the top five courses are returned."""
        catalog = [make_course(f"c{i}", rating=i * 0.5) for i in range(8)]

        result = rank(profile, catalog)

        assert len(result) == 5
        assert [entry.course_id for entry in result] == ["c7", "c6", "c5", "c4", "c3"]

    def test_ordering_by_score(self, profile, make_course) -> None:
        """Better matches rank first."""
        catalog = [
            make_course("weak", "art", "advanced", duration=20.0, rating=5.0),
            make_course("strong", "math", "intermediate", duration=4.0, rating=3.0),
            make_course("medium", "math", "beginner", duration=4.0, rating=3.0),
        ]

        result = rank(profile, catalog)

        assert [entry.course_id for entry in result] == ["strong", "medium", "weak"]
        assert result[0].score == pytest.approx(8.0)

    def test_ties_break_by_course_id(self, profile, make_course) -> None:
        """Equal scores are ordered by course id."""
        catalog = [make_course("b"), make_course("c"), make_course("a")]

        assert [entry.course_id for entry in rank(profile, catalog)] == ["a", "b", "c"]

    def test_unpublished_courses_are_excluded(self, profile, make_course) -> None:
        """Unpublished courses never appear."""
        catalog = [
            make_course("hidden", "math", "intermediate", rating=5.0, is_published=False),
            make_course("shown", rating=1.0),
        ]

        assert [entry.course_id for entry in rank(profile, catalog)] == ["shown"]

    def test_empty_catalog(self, profile) -> None:
        """An empty catalog gives no recommendations."""
        assert rank(profile, []) == []

    def test_deterministic(self, profile, make_course) -> None:
        """Input order does not change the output."""
        catalog = [make_course(f"c{i}", rating=(i % 3) * 1.0) for i in range(7)]

        assert rank(profile, catalog) == rank(profile, list(reversed(catalog)))
