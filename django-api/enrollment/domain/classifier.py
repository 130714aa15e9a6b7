"""Course classification and age compatibility.

Rules are ordered ``(predicate, result)`` tables; the first matching rule
wins. Age labels are free text typed by studio staff, so anything the
tables do not recognise falls through to the permissive default.
"""

import re
from collections.abc import Callable, Iterable

from enrollment.domain.models import Course, CourseTier, ValidationResult

PREMIUM_KEYWORDS = ("kompani", "aspirantkompani", "company")

# 3-4, 3-5, 4-6 and 5-6, with an optional "år" suffix
_TODDLER_AGE = re.compile(r"^(3[-–+][45]|4[-–+]6|5[-–+]6)\s*(år)?$")

CourseRule = tuple[Callable[[Course], bool], CourseTier]


def normalize_age_label(label: str | None) -> str:
    return (label or "").strip().lower()


def is_premium_course(course: Course) -> bool:
    name = (course.name or "").lower()
    return any(keyword in name for keyword in PREMIUM_KEYWORDS)


def is_toddler_age(label: str | None) -> bool:
    return bool(_TODDLER_AGE.match(normalize_age_label(label)))


COURSE_RULES: tuple[CourseRule, ...] = (
    (is_premium_course, CourseTier.KOMPANI),
    (lambda course: is_toddler_age(course.age_range), CourseTier.BARNEDANS),
)


def classify_course(course: Course, rules: Iterable[CourseRule] = COURSE_RULES) -> CourseTier:
    """Return the pricing tier of a course. Never raises."""
    for predicate, tier in rules:
        if predicate(course):
            return tier
    return CourseTier.VANLIG


def classify_courses(courses: Iterable[Course]) -> tuple[CourseTier, ...]:
    return tuple(classify_course(course) for course in courses)


def categorize_courses(courses: Iterable[Course]) -> dict[CourseTier, int]:
    """Count selected courses per tier. Every tier is present in the result."""
    counts = {tier: 0 for tier in CourseTier}
    for tier in classify_courses(courses):
        counts[tier] += 1
    return counts


# Label -> predicate that the student's age must satisfy
AgeRule = tuple[Callable[[str], bool], Callable[[int], bool]]


def _label_is(*labels: str) -> Callable[[str], bool]:
    accepted = {label for base in labels for label in (base, f"{base} år")}
    return lambda label: label in accepted


AGE_RULES: tuple[AgeRule, ...] = (
    (_label_is("3-5"), lambda age: 3 <= age <= 5),
    (_label_is("6-8"), lambda age: 6 <= age <= 8),
    (_label_is("8+"), lambda age: age >= 8),
    (_label_is("9+"), lambda age: age >= 9),
    (_label_is("10+"), lambda age: age >= 10),
    (_label_is("12+"), lambda age: age >= 12),
)


def is_age_compatible(age: int, course: Course) -> bool:
    label = normalize_age_label(course.age_range)
    for matches, allows in AGE_RULES:
        if matches(label):
            return allows(age)
    return True


def check_age_compatibility(age: int, courses: Iterable[Course]) -> ValidationResult:
    """Check a student's age against the age labels of the selected courses."""
    incompatible = [course for course in courses if not is_age_compatible(age, course)]
    if not incompatible:
        return ValidationResult(valid=True)

    names = ", ".join(course.name for course in incompatible)
    message = f"Alderen {age} år passer ikke for følgende klasser: {names}"
    return ValidationResult(valid=False, message=message, errors=(message,))


def recommended_courses_for_age(age: int, courses: Iterable[Course]) -> list[Course]:
    return [course for course in courses if is_age_compatible(age, course)]
