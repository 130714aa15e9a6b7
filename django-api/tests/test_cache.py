"""Tests for cache behavior.

Run with: pytest tests/test_cache.py -v
"""

import pytest
from django.core.cache import cache

from enrollment.models import Course, PricingPackage
from enrollment.stores.django_store import (
    COURSES_CACHE_KEY,
    PACKAGES_CACHE_KEY,
    CacheCartStore,
    DjangoCatalogStore,
)


@pytest.mark.django_db
class TestCatalogCacheInvalidation:
    """Tests for cache invalidation on model changes."""

    def test_package_list_is_cached(self):
        """Listing packages fills the pricing:packages cache key."""
        PricingPackage.objects.create(name="1 klasse", package_type="semester", price_in_ore=170_000)
        DjangoCatalogStore().list_packages()
        assert len(cache.get(PACKAGES_CACHE_KEY)) == 1

    def test_package_save_invalidates_cache(self):
        """Saving a package drops the cached catalog."""
        PricingPackage.objects.create(name="1 klasse", package_type="semester", price_in_ore=170_000)
        store = DjangoCatalogStore()
        store.list_packages()

        PricingPackage.objects.create(name="2 klasser", package_type="semester", price_in_ore=340_000)
        assert cache.get(PACKAGES_CACHE_KEY) is None
        assert [pkg.name for pkg in store.list_packages()] == ["1 klasse", "2 klasser"]

    def test_package_delete_invalidates_cache(self):
        package = PricingPackage.objects.create(name="1 klasse", price_in_ore=170_000)
        DjangoCatalogStore().list_packages()
        package.delete()
        assert DjangoCatalogStore().list_packages() == []

    def test_course_save_invalidates_cache(self):
        """Saving a course drops the cached course list."""
        course = Course.objects.create(name="Jazz", age_range="10+")
        DjangoCatalogStore().list_courses()
        course.age_range = "12+"
        course.save()
        assert cache.get(COURSES_CACHE_KEY) is None
        assert DjangoCatalogStore().list_courses()[0].age_range == "12+"

    def test_inactive_rows_are_hidden(self):
        PricingPackage.objects.create(name="Old", price_in_ore=100_000, is_active=False)
        Course.objects.create(name="Old", age_range="10+", is_active=False)
        store = DjangoCatalogStore()
        assert store.list_packages() == []
        assert store.list_courses() == []


class TestCacheCartStore:
    """Tests for cart snapshots kept in the Django cache."""

    def test_save_and_load(self):
        store = CacheCartStore()
        store.save("a", [{"first_name": "Ola"}])
        assert store.load("a") == [{"first_name": "Ola"}]
        assert store.cart_ids() == ["a"]

    def test_missing_cart(self):
        assert CacheCartStore().load("missing") is None

    def test_delete_removes_from_index(self):
        store = CacheCartStore()
        store.save("a", [])
        store.save("b", [])
        store.delete("a")
        assert store.load("a") is None
        assert store.cart_ids() == ["b"]

    def test_undecodable_snapshot(self, settings):
        cache.set(f"{settings.STUDIO_CART_STORAGE_KEY}:a", "{broken")
        with pytest.raises(ValueError):
            CacheCartStore().load("a")

    def test_storage_key_from_settings(self, settings):
        settings.STUDIO_CART_STORAGE_KEY = "otherStudio_cart"
        CacheCartStore().save("a", [])
        assert cache.get("otherStudio_cart:a") == "[]"
