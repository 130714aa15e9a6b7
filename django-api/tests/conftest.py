"""Pytest configuration and shared fixtures."""

from datetime import datetime, timedelta, timezone

import pytest
from rest_framework.test import APIClient

from enrollment.domain import Course, CourseId, PackageId, PricingPackage
from enrollment.stores.memory_store import InMemoryCartStore, InMemoryCatalogStore


class FakeClock:
    """Settable clock passed to services instead of timezone.now."""

    def __init__(self, now: datetime) -> None:
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, minutes: int) -> None:
        self.now += timedelta(minutes=minutes)


def make_package(name, price, discount_amount=0, order=0, package_type="semester", description=""):
    return PricingPackage(
        id=PackageId(name.lower().replace(" ", "-")),
        name=name,
        price=price,
        discount_amount=discount_amount,
        order=order,
        package_type=package_type,
        description=description,
    )


def make_course(course_id, name, age_range):
    return Course(id=CourseId(course_id), name=name, age_range=age_range)


@pytest.fixture
def api_client() -> APIClient:
    return APIClient()


@pytest.fixture(autouse=True)
def clear_cache():
    from django.core.cache import cache
    cache.clear()
    yield
    cache.clear()


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock(datetime(2025, 8, 18, 12, 0, tzinfo=timezone.utc))


@pytest.fixture
def packages() -> list[PricingPackage]:
    """Typed semester catalog, plus a clip card that never prices a selection."""
    return [
        make_package("Toddler", 130_000, order=0),
        make_package("1 klasse", 170_000, order=1),
        make_package("2 klasser", 340_000, discount_amount=20_000, order=2),
        make_package("3+ klasser", 510_000, discount_amount=60_000, order=3),
        make_package("Klippekort", 200_000, order=4, package_type="clipcard"),
    ]


@pytest.fixture
def untyped_packages() -> list[PricingPackage]:
    return [
        make_package("Småbarn", 120_000, order=0, package_type="", description="3-5 år"),
        make_package("1 kurs", 150_000, order=1, package_type=""),
        make_package("2 kurs", 280_000, discount_amount=10_000, order=2, package_type=""),
        make_package("3 kurs", 400_000, discount_amount=30_000, order=3, package_type=""),
    ]


@pytest.fixture
def courses() -> dict[str, Course]:
    return {
        "jazz": make_course("jazz", "Jazz", "10+"),
        "hiphop": make_course("hiphop", "Hip hop", "8+"),
        "ballet": make_course("ballet", "Ballett", "12+"),
        "toddler": make_course("toddler", "Barnedans", "3-5 år"),
        "kompani": make_course("kompani", "Kompani jazz", "12+"),
        "moderne": make_course("moderne", "Moderne", "flerårig"),
    }


@pytest.fixture
def catalog(packages, courses) -> InMemoryCatalogStore:
    return InMemoryCatalogStore(packages, list(courses.values()))


@pytest.fixture
def cart_store() -> InMemoryCartStore:
    return InMemoryCartStore()
