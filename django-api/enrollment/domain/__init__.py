from enrollment.domain.models import (
    CartItem,
    CartSummary,
    Course,
    CourseTier,
    FamilyDiscountChoice,
    PricingCalculation,
    PricingPackage,
    StudentData,
    ValidationResult,
)
from enrollment.domain.value_objects import CartItemId, CourseId, Money, PackageId

__all__ = [
    "CartItem",
    "CartSummary",
    "Course",
    "CourseTier",
    "FamilyDiscountChoice",
    "PricingCalculation",
    "PricingPackage",
    "StudentData",
    "ValidationResult",
    "CartItemId",
    "CourseId",
    "PackageId",
    "Money",
]
