"""Django signals for cache invalidation.

Any change to a course or pricing package drops the cached catalog so the
next quote reads fresh rows.
"""

from django.db.models.signals import post_delete, post_save
from django.dispatch import receiver

from enrollment.models import Course, PricingPackage
from enrollment.stores.django_store import invalidate_catalog_cache


@receiver([post_save, post_delete], sender=PricingPackage)
def invalidate_package_cache(sender, instance, **kwargs):
    """Invalidate the catalog cache when a package is saved or deleted."""
    invalidate_catalog_cache()


@receiver([post_save, post_delete], sender=Course)
def invalidate_course_cache(sender, instance, **kwargs):
    """Invalidate the catalog cache when a course is saved or deleted."""
    invalidate_catalog_cache()
