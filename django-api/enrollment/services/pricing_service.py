"""Pricing service - binds the pricing engine to a catalog store."""

from collections.abc import Iterable, Sequence

from enrollment.domain import CartItem, Course, CourseId, PricingCalculation
from enrollment.domain.classifier import check_age_compatibility
from enrollment.domain.discounts import (
    StandardPriceList,
    calculate_smart_package_price,
    calculate_standard_price,
    package_recommendations,
)
from enrollment.domain.models import PricedCartItem, StandardPricingResult, ValidationResult
from enrollment.stores.interfaces import CatalogStore


class PricingService:
    """Service for pricing selections and cart items."""

    def __init__(
        self,
        catalog: CatalogStore,
        price_list: StandardPriceList | None = None,
    ) -> None:
        self._catalog = catalog
        self._price_list = price_list or StandardPriceList()

    def resolve_courses(self, course_ids: Iterable[str]) -> list[Course]:
        """Look up courses by id, skipping ids the catalog does not know."""
        ids = [CourseId(str(course_id)) for course_id in course_ids if course_id]
        return self._catalog.get_courses(ids)

    def quote(self, courses: Sequence[Course], family_eligible: bool = False) -> PricingCalculation:
        """Price a selection against the active catalog."""
        return calculate_smart_package_price(courses, self._catalog.list_packages(), family_eligible)

    def quote_standard(
        self, courses: Sequence[Course], family_eligible: bool = False
    ) -> StandardPricingResult:
        """Price a selection from the flat price list."""
        return calculate_standard_price(courses, family_eligible, self._price_list)

    def recommendations(self, courses: Sequence[Course]) -> list[str]:
        return package_recommendations(courses, self._catalog.list_packages())

    def age_check(self, age: int, courses: Sequence[Course]) -> ValidationResult:
        return check_age_compatibility(age, courses)

    def price_items(self, items: Iterable[CartItem]) -> list[PricedCartItem]:
        """Reprice cart items, reading the catalog once."""
        packages = self._catalog.list_packages()
        return [
            PricedCartItem(
                item=item,
                pricing=calculate_smart_package_price(
                    item.courses, packages, item.is_second_dancer_in_family
                ),
            )
            for item in items
        ]
