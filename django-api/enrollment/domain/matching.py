"""Package catalog matching.

Package names are typed by studio staff and are not a stable enum, so
matching is done with case-insensitive name heuristics. Two strategies
exist: count-tiered matching for catalogs that tag packages with a type,
and the looser fuzzy matching kept for older untyped catalogs.
"""

import logging
from collections.abc import Callable, Iterable, Sequence
from dataclasses import dataclass
from enum import Enum

from enrollment.domain.models import CourseTier, PricingPackage

logger = logging.getLogger(__name__)

SEMESTER = "semester"


class MatchStrategy(Enum):
    COUNT_TIERED = "count_tiered"
    FUZZY = "fuzzy"


@dataclass(frozen=True)
class PackageRule:
    """Select packages by name when the rule applies to the selection."""

    label: str
    applies: Callable[[int, bool], bool]
    name_matches: Callable[[str], bool]


def _any_of(*names: str) -> Callable[[str], bool]:
    return lambda name: name in names


def _contains_all(*parts: str) -> Callable[[str], bool]:
    return lambda name: all(part in name for part in parts)


def _either(*checks: Callable[[str], bool]) -> Callable[[str], bool]:
    return lambda name: any(check(name) for check in checks)


def _toddler(count: int, has_toddler: bool) -> bool:
    return has_toddler


def _exactly(expected: int) -> Callable[[int, bool], bool]:
    return lambda count, has_toddler: not has_toddler and count == expected


def _at_least(minimum: int) -> Callable[[int, bool], bool]:
    return lambda count, has_toddler: not has_toddler and count >= minimum


COUNT_TIERED_RULES: tuple[PackageRule, ...] = (
    PackageRule(
        label="toddler",
        applies=_toddler,
        name_matches=_either(
            _any_of("toddler", "toddler-pakke", "småbarn", "3-5 år"),
            _contains_all("toddler"),
            _contains_all("småbarn"),
        ),
    ),
    PackageRule(
        label="1 class",
        applies=_exactly(1),
        name_matches=_either(
            _any_of("1 klasse", "1. klasse", "1-klasse", "en klasse", "1 class"),
            _contains_all("1", "klasse"),
            _contains_all("1", "class"),
        ),
    ),
    PackageRule(
        label="2 classes",
        applies=_exactly(2),
        name_matches=_either(
            _any_of("2 klasser", "2-klasser", "to klasser", "2 classes"),
            _contains_all("2", "klasser"),
            _contains_all("2", "classes"),
        ),
    ),
    PackageRule(
        label="3+ classes",
        applies=_at_least(3),
        name_matches=_either(
            _any_of("3+ klasser", "3+-klasser", "3+ classes", "tre eller flere klasser"),
            _contains_all("3+"),
            _contains_all("3 ", "klasser"),
            _contains_all("flere", "klasser"),
        ),
    ),
)

FUZZY_RULES: tuple[PackageRule, ...] = (
    PackageRule(
        label="toddler",
        applies=_toddler,
        name_matches=_either(_contains_all("småbarn"), _contains_all("toddler")),
    ),
    PackageRule(
        label="1 course",
        applies=_exactly(1),
        name_matches=_either(_contains_all("1 kurs"), _contains_all("enkelt")),
    ),
    PackageRule(
        label="2 courses",
        applies=_exactly(2),
        name_matches=_contains_all("2 kurs"),
    ),
    PackageRule(
        label="3+ courses",
        applies=_at_least(3),
        name_matches=_contains_all("3", "kurs"),
    ),
)


def active_packages(catalog: Iterable[PricingPackage]) -> list[PricingPackage]:
    """Active packages ordered by their ordering hint."""
    return sorted((pkg for pkg in catalog if pkg.is_active), key=lambda pkg: pkg.order)


def select_strategy(catalog: Iterable[PricingPackage]) -> MatchStrategy:
    """Typed catalogs use count-tiered matching, untyped ones fuzzy matching."""
    if any(pkg.package_type for pkg in catalog):
        return MatchStrategy.COUNT_TIERED
    return MatchStrategy.FUZZY


def _first_by_name(
    packages: Sequence[PricingPackage],
    name_matches: Callable[[str], bool],
) -> PricingPackage | None:
    for pkg in packages:
        if name_matches(pkg.name.strip().lower()):
            return pkg
    return None


def _applicable_rule(
    rules: Iterable[PackageRule], course_count: int, has_toddler: bool
) -> PackageRule | None:
    for rule in rules:
        if rule.applies(course_count, has_toddler):
            return rule
    return None


def match_count_tiered(
    course_count: int,
    has_toddler: bool,
    catalog: Iterable[PricingPackage],
    rules: Iterable[PackageRule] = COUNT_TIERED_RULES,
) -> PricingPackage | None:
    """Match semester packages by course count, or the toddler package."""
    if course_count <= 0:
        return None

    packages = [
        pkg for pkg in active_packages(catalog) if pkg.package_type.lower() == SEMESTER
    ]
    rule = _applicable_rule(rules, course_count, has_toddler)
    if rule is None:
        return None

    found = _first_by_name(packages, rule.name_matches)
    if found is None:
        logger.info(
            "No %s package among %s",
            rule.label,
            [pkg.name for pkg in packages],
        )
    return found


def _is_toddler_description(pkg: PricingPackage) -> bool:
    return "3-5" in (pkg.description or "").lower()


def match_fuzzy(
    course_count: int,
    has_toddler: bool,
    catalog: Iterable[PricingPackage],
    rules: Iterable[PackageRule] = FUZZY_RULES,
) -> PricingPackage | None:
    """Looser matching for untyped catalogs, with a first-priced fallback."""
    if course_count <= 0:
        return None

    packages = active_packages(catalog)
    rules = tuple(rules)

    if has_toddler:
        toddler_rule = _applicable_rule(rules, course_count, True)
        if toddler_rule is not None:
            found = _first_by_name(packages, toddler_rule.name_matches)
            if found is None:
                found = next((pkg for pkg in packages if _is_toddler_description(pkg)), None)
            if found is not None and found.price > 0:
                return found

    rule = _applicable_rule(rules, course_count, False)
    found = _first_by_name(packages, rule.name_matches) if rule else None
    if found is not None:
        return found

    fallback = next((pkg for pkg in packages if pkg.price > 0), None)
    if fallback is not None:
        logger.warning(
            "No package matched %d courses, falling back to %s",
            course_count,
            fallback.name,
        )
    return fallback


def resolve_package(
    course_count: int,
    tiers: Iterable[CourseTier],
    catalog: Iterable[PricingPackage],
) -> PricingPackage | None:
    """Resolve the package that prices a student's selection.

    Any toddler-tier course routes the whole selection to the toddler
    package regardless of how many courses are selected. Returns None when
    nothing applies; callers price that as a zero "not found" result.
    """
    catalog = list(catalog)
    has_toddler = CourseTier.BARNEDANS in set(tiers)

    if select_strategy(catalog) is MatchStrategy.COUNT_TIERED:
        return match_count_tiered(course_count, has_toddler, catalog)
    return match_fuzzy(course_count, has_toddler, catalog)


def find_package_by_name(
    catalog: Iterable[PricingPackage], name: str
) -> PricingPackage | None:
    wanted = name.strip().lower()
    return next((pkg for pkg in catalog if pkg.name.strip().lower() == wanted), None)
