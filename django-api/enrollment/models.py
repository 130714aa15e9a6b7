"""Django ORM models (persistence layer).

These models handle database concerns. Domain logic lives in domain/.
"""

import uuid

from django.db import models

from enrollment.domain.value_objects import Money


class Course(models.Model):
    """Persistence model for dance classes."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    name = models.CharField(max_length=255)
    age_range = models.CharField(max_length=50, blank=True)
    course_type = models.CharField(max_length=100, blank=True)
    instructor = models.CharField(max_length=255, blank=True)
    description = models.TextField(blank=True)
    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["name"]

    def __str__(self) -> str:
        return f"{self.name} ({self.age_range})"


class PricingPackage(models.Model):
    """Persistence model for priced bundles. Amounts are in øre."""

    class PackageType(models.TextChoices):
        SEMESTER = "semester", "Semester"
        ADDON = "addon", "Add-on"
        CLIPCARD = "clipcard", "Clip card"

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    name = models.CharField(max_length=100)
    package_type = models.CharField(
        max_length=20, choices=PackageType.choices, blank=True
    )
    price_in_ore = models.PositiveIntegerField()
    discount_amount = models.PositiveIntegerField(default=0)
    description = models.TextField(blank=True)
    is_active = models.BooleanField(default=True)
    order = models.IntegerField(default=0)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["order", "name"]
        indexes = [
            models.Index(fields=["is_active", "order"], name="package_active_order_idx"),
        ]

    def __str__(self) -> str:
        return f"{self.name} - {Money(self.price_in_ore)}"
