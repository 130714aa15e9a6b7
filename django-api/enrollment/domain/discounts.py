"""Discount calculation.

All arithmetic is integer øre. Percentages are applied with floor
division so the studio never undercharges by a fraction of an øre.

The family discount is taken on the package's base price, before the
package's own flat discount is subtracted.
"""

import logging
from collections.abc import Iterable, Sequence
from dataclasses import dataclass

from enrollment.domain.classifier import categorize_courses, classify_courses
from enrollment.domain.matching import find_package_by_name, resolve_package
from enrollment.domain.models import (
    Course,
    CourseTier,
    PricingCalculation,
    PricingPackage,
    StandardPricingResult,
)
from enrollment.domain.value_objects import Money

logger = logging.getLogger(__name__)

# (minimum course count, percent), highest threshold first
FAMILY_DISCOUNT_TIERS: tuple[tuple[int, int], ...] = (
    (3, 50),
    (2, 30),
    (1, 15),
)
TODDLER_FAMILY_DISCOUNT_PERCENT = 30

NO_CLASSES_SELECTED = "Ingen klasser valgt"
NO_PACKAGES_AVAILABLE = "Ingen pakker tilgjengelig"
TODDLER_PACKAGE_NOT_FOUND = "Toddler pakke ikke funnet"


def percent_of(amount: int, percent: int) -> int:
    """Floor of ``percent`` percent of ``amount``."""
    return amount * percent // 100


def family_discount_percent(course_count: int, is_toddler: bool = False) -> int:
    """Family-discount rate for a second-or-later dancer."""
    if course_count <= 0:
        return 0
    if is_toddler:
        return TODDLER_FAMILY_DISCOUNT_PERCENT
    for minimum, percent in FAMILY_DISCOUNT_TIERS:
        if course_count >= minimum:
            return percent
    return 0


def package_not_found_name(course_count: int) -> str:
    suffix = "klasse" if course_count == 1 else "klasser"
    return f"Pakke ikke funnet for {course_count} {suffix}"


@dataclass(frozen=True)
class FamilyDiscountCheck:
    """Outcome of the family-discount sanity check."""

    allowed: bool
    reduced_rate: bool = False
    reason: str = ""


def check_family_discount(
    courses: Sequence[Course], family_eligible: bool
) -> FamilyDiscountCheck:
    """Sanity-check a family-discount request.

    Suspicious requests are downgraded and logged for review, never
    rejected outright.
    """
    if not family_eligible:
        return FamilyDiscountCheck(allowed=False)
    if not courses:
        return FamilyDiscountCheck(allowed=False, reason="no classes selected")

    if len(courses) == 1:
        logger.info(
            "Single class family discount requested for %s, using reduced rate",
            courses[0].name or "unknown",
        )
        return FamilyDiscountCheck(
            allowed=True,
            reduced_rate=True,
            reason="single class family discount uses the reduced rate",
        )

    age_groups = {course.age_range for course in courses}
    if len(age_groups) > 2:
        logger.warning(
            "Family discount requested across %d age groups: %s",
            len(age_groups),
            sorted(age_groups),
        )
        return FamilyDiscountCheck(allowed=True, reason="multiple age groups")

    return FamilyDiscountCheck(allowed=True)


def calculate_price(
    courses: Sequence[Course],
    package: PricingPackage | None,
    family_eligible: bool,
    *,
    tiers: Iterable[CourseTier] | None = None,
) -> PricingCalculation:
    """Price one student's selection against an already resolved package."""
    courses = tuple(courses)
    if not courses:
        return PricingCalculation.not_found(NO_CLASSES_SELECTED)

    tiers = tuple(tiers) if tiers is not None else classify_courses(courses)
    is_toddler = CourseTier.BARNEDANS in tiers
    course_count = len(courses)

    if package is None:
        name = TODDLER_PACKAGE_NOT_FOUND if is_toddler else package_not_found_name(course_count)
        return PricingCalculation.not_found(name, is_toddler_pricing=is_toddler)

    check = check_family_discount(courses, family_eligible)

    base = package.price
    package_discount = min(package.discount_amount, base)
    family_discount = 0
    if check.allowed:
        percent = family_discount_percent(course_count, is_toddler)
        family_discount = min(percent_of(base, percent), base - package_discount)

    discount = package_discount + family_discount
    total = base - discount

    logger.debug(
        "Priced %d classes with %s: base=%d package_discount=%d family_discount=%d total=%d",
        course_count,
        package.name,
        base,
        package_discount,
        family_discount,
        total,
    )

    return PricingCalculation(
        total=total,
        discount=discount,
        package_id=package.id,
        package_name=package.name,
        is_toddler_pricing=is_toddler,
        original_price=base if discount > 0 else None,
        applied_family_discount=family_discount if family_discount > 0 else None,
    )


def calculate_smart_package_price(
    courses: Sequence[Course],
    catalog: Iterable[PricingPackage],
    family_eligible: bool = False,
) -> PricingCalculation:
    """Classify, match and price a selection against the catalog.

    Missing courses, an empty catalog and unmatched selections all produce
    a zero-priced placeholder instead of an error.
    """
    courses = tuple(courses)
    catalog = list(catalog)

    if not courses:
        return PricingCalculation.not_found(NO_CLASSES_SELECTED)
    if not catalog:
        logger.warning("No pricing packages available")
        return PricingCalculation.not_found(NO_PACKAGES_AVAILABLE)

    tiers = classify_courses(courses)
    package = resolve_package(len(courses), tiers, catalog)
    return calculate_price(courses, package, family_eligible, tiers=tiers)


@dataclass(frozen=True)
class StandardPriceList:
    """Flat price list used when no package catalog is available."""

    barnedans_per_course: int = 130_000
    kompani_per_course: int = 220_000
    # (price, volume discount) for 1, 2 and 3+ regular courses
    vanlig: tuple[tuple[int, int], ...] = (
        (170_000, 0),
        (320_000, 20_000),
        (510_000, 60_000),
    )

    def vanlig_price(self, count: int) -> tuple[int, int]:
        if count <= 0:
            return 0, 0
        return self.vanlig[min(count, len(self.vanlig)) - 1]


def calculate_standard_price(
    courses: Sequence[Course],
    family_eligible: bool = False,
    price_list: StandardPriceList | None = None,
) -> StandardPricingResult:
    """Price a selection from the flat price list, per tier.

    The family flag is carried through for display only; this model has no
    family discount.
    """
    price_list = price_list or StandardPriceList()
    counts = categorize_courses(courses)

    vanlig_price, vanlig_discount = price_list.vanlig_price(counts[CourseTier.VANLIG])
    prices = {
        CourseTier.BARNEDANS: counts[CourseTier.BARNEDANS] * price_list.barnedans_per_course,
        CourseTier.VANLIG: vanlig_price,
        CourseTier.KOMPANI: counts[CourseTier.KOMPANI] * price_list.kompani_per_course,
    }
    base_price = sum(prices.values())
    discount = min(vanlig_discount, base_price)

    return StandardPricingResult(
        total_price=base_price - discount,
        base_price=base_price,
        discount=discount,
        tier_counts=counts,
        tier_prices=prices,
        is_second_dancer_in_family=family_eligible,
    )


def format_price(ore: int) -> str:
    """Format øre for display, e.g. 170000 -> "1 700 kr"."""
    return str(Money(ore))


def discount_percentage(original: int, discounted: int) -> int:
    """Whole-percent saving from ``original`` to ``discounted``, rounded half up."""
    if original <= 0:
        return 0
    return ((original - discounted) * 200 + original) // (2 * original)


def package_recommendations(
    courses: Sequence[Course], catalog: Iterable[PricingPackage]
) -> list[str]:
    """Hints shown next to a selection in the cart."""
    if not courses:
        return []

    catalog = list(catalog)
    tiers = classify_courses(courses)
    if CourseTier.BARNEDANS in tiers:
        percent = family_discount_percent(len(courses), is_toddler=True)
        return [
            "Toddler-pakken er perfekt for barn 3-5 år",
            f"{percent}% familierabatt tilgjengelig for danser nr. 2+",
        ]

    recommendations = []
    count = len(courses)
    if count == 1:
        recommendations.append("Perfekt for å prøve ut dans!")
    else:
        name = "2 klasser" if count == 2 else "3+ klasser"
        pkg = find_package_by_name(catalog, name)
        if pkg is not None and pkg.discount_amount > 0:
            recommendations.append(
                f"Spar {format_price(pkg.discount_amount)} med {pkg.name} pakken!"
            )

    percent = family_discount_percent(count)
    recommendations.append(f"{percent}% familierabatt tilgjengelig for danser nr. 2+")
    return recommendations
