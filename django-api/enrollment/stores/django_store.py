"""Django implementations of the stores.

The catalog is read from the ORM and cached; cart snapshots live in the
Django cache as JSON under a fixed storage key.
"""

import json
import logging
from typing import Any

from django.core.cache import cache

from enrollment import conf
from enrollment import models as orm
from enrollment.domain import Course, CourseId, PackageId, PricingPackage
from enrollment.stores.interfaces import CartStore, CatalogStore

logger = logging.getLogger(__name__)

PACKAGES_CACHE_KEY = "pricing:packages"
COURSES_CACHE_KEY = "pricing:courses"


def package_to_domain(row: orm.PricingPackage) -> PricingPackage:
    return PricingPackage(
        id=PackageId(str(row.id)),
        name=row.name,
        price=row.price_in_ore,
        discount_amount=row.discount_amount,
        is_active=row.is_active,
        order=row.order,
        package_type=row.package_type,
        description=row.description,
    )


def course_to_domain(row: orm.Course) -> Course:
    return Course(
        id=CourseId(str(row.id)),
        name=row.name,
        age_range=row.age_range,
        course_type=row.course_type,
    )


def invalidate_catalog_cache() -> None:
    cache.delete_many([PACKAGES_CACHE_KEY, COURSES_CACHE_KEY])


class DjangoCatalogStore(CatalogStore):
    """Database-backed catalog using Django ORM, cached in the Django cache."""

    def list_packages(self) -> list[PricingPackage]:
        packages = cache.get(PACKAGES_CACHE_KEY)
        if packages is None:
            rows = orm.PricingPackage.objects.filter(is_active=True).order_by("order", "name")
            packages = [package_to_domain(row) for row in rows]
            cache.set(PACKAGES_CACHE_KEY, packages, conf.catalog_cache_timeout())
        return packages

    def list_courses(self) -> list[Course]:
        courses = cache.get(COURSES_CACHE_KEY)
        if courses is None:
            rows = orm.Course.objects.filter(is_active=True)
            courses = [course_to_domain(row) for row in rows]
            cache.set(COURSES_CACHE_KEY, courses, conf.catalog_cache_timeout())
        return courses

    def get_courses(self, course_ids: list[CourseId]) -> list[Course]:
        by_id = {course.id: course for course in self.list_courses()}
        return [by_id[course_id] for course_id in course_ids if course_id in by_id]


class CacheCartStore(CartStore):
    """Cart snapshots in the Django cache, keyed by storage key and cart id.

    An index entry lists the cart ids so the expiry sweep can find them.
    """

    def __init__(self, timeout: int | None = None) -> None:
        self._timeout = timeout

    def _key(self, cart_id: str) -> str:
        return f"{conf.cart_storage_key()}:{cart_id}"

    def _index_key(self) -> str:
        return f"{conf.cart_storage_key()}:index"

    def load(self, cart_id: str) -> list[dict[str, Any]] | None:
        raw = cache.get(self._key(cart_id))
        if raw is None:
            return None
        records = json.loads(raw)
        if not isinstance(records, list):
            raise ValueError("Cart snapshot is not a list")
        return records

    def save(self, cart_id: str, records: list[dict[str, Any]]) -> None:
        cache.set(self._key(cart_id), json.dumps(records), self._timeout)
        ids = set(self.cart_ids())
        if cart_id not in ids:
            cache.set(self._index_key(), sorted(ids | {cart_id}), None)

    def delete(self, cart_id: str) -> None:
        cache.delete(self._key(cart_id))
        ids = set(self.cart_ids())
        if cart_id in ids:
            cache.set(self._index_key(), sorted(ids - {cart_id}), None)

    def cart_ids(self) -> list[str]:
        return list(cache.get(self._index_key()) or [])
