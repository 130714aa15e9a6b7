"""Domain models for enrollment pricing and the cart.

These are pure domain objects with no API input rules.
Django ORM models are in enrollment/models.py (persistence layer).
All monetary fields are integers in øre.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Self

from enrollment.domain.value_objects import CartItemId, CourseId, PackageId, ensure_ore


class CourseTier(Enum):
    """Pricing tier of a single course."""

    BARNEDANS = "barnedans"
    VANLIG = "vanlig"
    KOMPANI = "kompani"


class FamilyDiscountChoice(Enum):
    """Three-state family-discount signal: unset, or forced to a value."""

    UNSET = "unset"
    ELIGIBLE = "eligible"
    NOT_ELIGIBLE = "not_eligible"

    @classmethod
    def from_flag(cls, flag: bool | None) -> Self:
        if flag is None:
            return cls.UNSET
        return cls.ELIGIBLE if flag else cls.NOT_ELIGIBLE

    def as_flag(self) -> bool | None:
        if self is FamilyDiscountChoice.UNSET:
            return None
        return self is FamilyDiscountChoice.ELIGIBLE


@dataclass(frozen=True)
class Course:
    """Domain representation of a dance class offering."""

    id: CourseId
    name: str
    age_range: str
    course_type: str = ""


@dataclass(frozen=True)
class PricingPackage:
    """Domain representation of a priced bundle from the catalog."""

    id: PackageId
    name: str
    price: int
    discount_amount: int = 0
    is_active: bool = True
    order: int = 0
    package_type: str = ""
    description: str = ""

    def __post_init__(self) -> None:
        ensure_ore(self.price, "price")
        ensure_ore(self.discount_amount, "discount_amount")


@dataclass(frozen=True)
class PricingCalculation:
    """Immutable pricing result for one student."""

    total: int
    discount: int
    package_id: PackageId | None
    package_name: str
    is_toddler_pricing: bool = False
    original_price: int | None = None
    applied_family_discount: int | None = None

    @classmethod
    def not_found(cls, package_name: str, is_toddler_pricing: bool = False) -> Self:
        """Zero-priced placeholder used when no package applies."""
        return cls(
            total=0,
            discount=0,
            package_id=None,
            package_name=package_name,
            is_toddler_pricing=is_toddler_pricing,
        )

    @property
    def package_found(self) -> bool:
        return self.package_id is not None


@dataclass(frozen=True)
class StandardPricingResult:
    """Result of the flat price-list model, with a per-tier breakdown."""

    total_price: int
    base_price: int
    discount: int
    tier_counts: dict[CourseTier, int]
    tier_prices: dict[CourseTier, int]
    is_second_dancer_in_family: bool


@dataclass(frozen=True)
class StudentData:
    """Input for adding a student to the cart."""

    first_name: str
    last_name: str
    age: int | None
    courses: tuple[Course, ...]
    schedule_ids: tuple[str, ...] = ()
    is_second_dancer_in_family: bool | None = None
    family_discount_override: bool | None = None


@dataclass(frozen=True)
class CartItem:
    """One student's enrollment draft."""

    id: CartItemId
    first_name: str
    last_name: str
    age: int | None
    courses: tuple[Course, ...]
    schedule_ids: tuple[str, ...]
    is_second_dancer_in_family: bool
    added_at: datetime
    family_discount_override: FamilyDiscountChoice = FamilyDiscountChoice.UNSET

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()

    @property
    def display_name(self) -> str:
        return self.full_name


@dataclass(frozen=True)
class PricedCartItem:
    """A cart item with its freshly computed pricing."""

    item: CartItem
    pricing: PricingCalculation


@dataclass(frozen=True)
class CartSummary:
    """Projection of the cart with pricing recomputed on every read."""

    item_count: int
    total: int
    total_discount: int
    original_total: int
    items: tuple[PricedCartItem, ...] = ()

    @property
    def has_items(self) -> bool:
        return self.item_count > 0


@dataclass(frozen=True)
class CartAnalytics:
    """Aggregate figures about a cart."""

    total_students: int
    total_classes: int
    average_classes_per_student: float
    family_discount_eligible: int
    estimated_savings: int
    cart_value: int


@dataclass(frozen=True)
class ValidationResult:
    """Pass/fail with one message per violated constraint."""

    valid: bool
    message: str = ""
    errors: tuple[str, ...] = ()


@dataclass(frozen=True)
class FamilyDetectionResult:
    """Guess whether a new student belongs to a family already in the cart."""

    is_likely_family: bool
    confidence: float
    reason: str
    existing_family_members: tuple[CartItem, ...] = ()
    suggested_last_name: str | None = None


@dataclass(frozen=True)
class CustomerInfo:
    """Contact details of the paying guardian."""

    name: str
    email: str
    phone: str = ""


@dataclass(frozen=True)
class PaymentRequest:
    """What the payment gateway needs to start a payment."""

    order_id: str
    amount_in_ore: int
    customer: CustomerInfo
    description: str = ""

    def __post_init__(self) -> None:
        ensure_ore(self.amount_in_ore, "amount_in_ore")


@dataclass(frozen=True)
class PaymentResult:
    """Outcome of starting a payment."""

    success: bool
    redirect_url: str | None = None
    external_order_id: str | None = None
    error: str | None = None
    metadata: dict[str, str] = field(default_factory=dict)
