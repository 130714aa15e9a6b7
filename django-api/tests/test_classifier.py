"""Unit tests for course classification and age compatibility.

Run with: pytest tests/test_classifier.py -v
"""

import pytest

from enrollment.domain import Course, CourseId, CourseTier
from enrollment.domain.classifier import (
    categorize_courses,
    check_age_compatibility,
    classify_course,
    is_age_compatible,
    recommended_courses_for_age,
)


def course(name="Jazz", age_range="10+"):
    return Course(id=CourseId(name.lower()), name=name, age_range=age_range)


class TestClassifyCourse:
    """Tests for classify_course."""

    @pytest.mark.parametrize("age_range", ["3-5 år", "3-4", "3–5", "4-6", "5-6 år", " 3-5 ÅR "])
    def test_toddler_age_labels(self, age_range):
        assert classify_course(course("Barnedans", age_range)) is CourseTier.BARNEDANS

    @pytest.mark.parametrize("name", ["Kompani jazz", "Aspirantkompani", "Dance Company"])
    def test_premium_names(self, name):
        assert classify_course(course(name, "12+")) is CourseTier.KOMPANI

    def test_premium_name_wins_over_toddler_age(self):
        assert classify_course(course("Kompani mini", "3-5 år")) is CourseTier.KOMPANI

    @pytest.mark.parametrize("age_range", ["6-8", "10+", "", "3-50"])
    def test_other_labels_are_regular(self, age_range):
        assert classify_course(course("Jazz", age_range)) is CourseTier.VANLIG

    def test_unrecognized_age_label_is_regular(self):
        """A free-text label the rules do not know falls back to the regular tier."""
        assert classify_course(course("Moderne", "flerårig")) is CourseTier.VANLIG


class TestCategorizeCourses:
    """Tests for categorize_courses."""

    def test_every_tier_present(self):
        assert categorize_courses([]) == {
            CourseTier.BARNEDANS: 0,
            CourseTier.VANLIG: 0,
            CourseTier.KOMPANI: 0,
        }

    def test_counts_per_tier(self):
        counts = categorize_courses(
            [course("Barnedans", "3-5 år"), course("Jazz"), course("Hip hop"), course("Kompani", "12+")]
        )
        assert counts[CourseTier.BARNEDANS] == 1
        assert counts[CourseTier.VANLIG] == 2
        assert counts[CourseTier.KOMPANI] == 1


class TestAgeCompatibility:
    """Tests for age checks against course age labels."""

    @pytest.mark.parametrize(
        "age, age_range, expected",
        [
            (4, "3-5 år", True),
            (6, "3-5", False),
            (7, "6-8", True),
            (8, "8+", True),
            (7, "8+", False),
            (11, "12+ år", False),
            (40, "flerårig", True),
        ],
    )
    def test_is_age_compatible(self, age, age_range, expected):
        assert is_age_compatible(age, course("Jazz", age_range)) is expected

    def test_check_lists_incompatible_courses(self):
        result = check_age_compatibility(7, [course("Jazz", "10+"), course("Hip hop", "6-8")])
        assert not result.valid
        assert result.message == "Alderen 7 år passer ikke for følgende klasser: Jazz"

    def test_check_passes(self):
        assert check_age_compatibility(12, [course("Jazz", "10+"), course("Ballett", "12+")]).valid

    def test_recommended_courses_for_age(self):
        offered = [course("Barnedans", "3-5 år"), course("Jazz", "10+"), course("Hip hop", "8+")]
        names = [c.name for c in recommended_courses_for_age(9, offered)]
        assert names == ["Hip hop"]
