"""In-memory stores for tests and scripts."""

import json
from typing import Any

from enrollment.domain import Course, CourseId, PricingPackage
from enrollment.domain.matching import active_packages
from enrollment.stores.interfaces import CartStore, CatalogStore


class InMemoryCatalogStore(CatalogStore):
    """Catalog held in plain lists."""

    def __init__(
        self,
        packages: list[PricingPackage] | None = None,
        courses: list[Course] | None = None,
    ) -> None:
        self.packages = list(packages or [])
        self.courses = list(courses or [])

    def list_packages(self) -> list[PricingPackage]:
        return active_packages(self.packages)

    def list_courses(self) -> list[Course]:
        return list(self.courses)

    def get_courses(self, course_ids: list[CourseId]) -> list[Course]:
        by_id = {course.id: course for course in self.courses}
        return [by_id[course_id] for course_id in course_ids if course_id in by_id]


class InMemoryCartStore(CartStore):
    """Snapshots kept as JSON strings, like the cache-backed store."""

    def __init__(self) -> None:
        self.snapshots: dict[str, str] = {}

    def load(self, cart_id: str) -> list[dict[str, Any]] | None:
        raw = self.snapshots.get(cart_id)
        if raw is None:
            return None
        records = json.loads(raw)
        if not isinstance(records, list):
            raise ValueError("Cart snapshot is not a list")
        return records

    def save(self, cart_id: str, records: list[dict[str, Any]]) -> None:
        self.snapshots[cart_id] = json.dumps(records)

    def delete(self, cart_id: str) -> None:
        self.snapshots.pop(cart_id, None)

    def cart_ids(self) -> list[str]:
        return sorted(self.snapshots)
