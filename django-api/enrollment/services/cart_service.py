"""Cart service - the enrollment cart aggregator.

Services:
- Depend only on interfaces (stores)
- Validate domain invariants
- Perform orchestration and error mapping
- Return domain models or domain errors

Mutations for one cart id are serialized by a process-wide lock and each
one re-reads the stored snapshot before applying, so two service
instances for the same cart never write over each other.
"""

import logging
import threading
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from dataclasses import replace
from datetime import datetime, timedelta

from django.utils import timezone

from enrollment import conf
from enrollment.domain import (
    CartItem,
    CartItemId,
    CartSummary,
    FamilyDiscountChoice,
    StudentData,
    ValidationResult,
)
from enrollment.domain.eligibility import resolve_eligibility
from enrollment.domain.errors import (
    CartItemNotFoundError,
    DuplicateStudentError,
    InvalidStudentError,
)
from enrollment.domain.family import detect_family
from enrollment.domain.models import CartAnalytics, Course, FamilyDetectionResult
from enrollment.domain.snapshot import item_from_record, item_to_record, migrate_record
from enrollment.services.pricing_service import PricingService
from enrollment.stores.interfaces import CartStore

logger = logging.getLogger(__name__)

MIN_AGE = 3
MAX_AGE = 100
COPY_SUFFIX = " (kopi)"

_locks: dict[str, threading.Lock] = {}
_locks_guard = threading.Lock()


def cart_lock(cart_id: str) -> threading.Lock:
    """Return the lock serializing mutations of one cart."""
    with _locks_guard:
        return _locks.setdefault(cart_id, threading.Lock())


def _same_name(item: CartItem, first_name: str, last_name: str) -> bool:
    return (
        item.first_name.strip().lower() == first_name.strip().lower()
        and item.last_name.strip().lower() == last_name.strip().lower()
    )


def _is_valid_age(age: int | None) -> bool:
    return age is not None and MIN_AGE <= age <= MAX_AGE


class CartService:
    """Service for one enrollment cart."""

    def __init__(
        self,
        store: CartStore,
        pricing: PricingService,
        cart_id: str = "default",
        *,
        clock: Callable[[], datetime] = timezone.now,
        ttl: timedelta | None = None,
    ) -> None:
        self._store = store
        self._pricing = pricing
        self._cart_id = cart_id
        self._clock = clock
        self._ttl = ttl if ttl is not None else conf.cart_ttl()
        self._expired_on_load = False
        with cart_lock(cart_id):
            self._items = self._load()

    @property
    def cart_id(self) -> str:
        return self._cart_id

    @property
    def items(self) -> tuple[CartItem, ...]:
        return tuple(self._items)

    @property
    def has_items(self) -> bool:
        return bool(self._items)

    # -- persistence ---------------------------------------------------------

    def _read(self) -> tuple[list[CartItem], bool]:
        """Read and migrate the stored snapshot.

        A snapshot that cannot be decoded is discarded and the cart starts
        empty. Returns the items and whether any record was upgraded.
        """
        try:
            records = self._store.load(self._cart_id)
            if records is None:
                return [], False
            now = self._clock()
            migrated = [migrate_record(record, now) for record in records]
            items = [item_from_record(record) for record in migrated]
        except (ValueError, TypeError, KeyError, AttributeError):
            logger.exception("Discarding unreadable cart snapshot for cart %s", self._cart_id)
            self._store.delete(self._cart_id)
            return [], False
        return items, migrated != records

    def _write(self, items: list[CartItem]) -> None:
        self._store.save(self._cart_id, [item_to_record(item) for item in items])

    def _load(self) -> list[CartItem]:
        items, upgraded = self._read()
        valid = [item for item in items if not self._is_item_expired(item)]
        self._expired_on_load = len(valid) != len(items)
        if upgraded or self._expired_on_load:
            logger.info(
                "Loaded cart %s: %d items, %d expired",
                self._cart_id,
                len(valid),
                len(items) - len(valid),
            )
            self._write(valid)
        return valid

    @contextmanager
    def _transaction(self) -> Iterator[list[CartItem]]:
        """Apply one mutation to a fresh read of the snapshot, then persist it."""
        with cart_lock(self._cart_id):
            items, _ = self._read()
            yield items
            self._write(items)
            self._items = items

    @staticmethod
    def _index_of(items: list[CartItem], item_id: CartItemId) -> int:
        for index, item in enumerate(items):
            if item.id == item_id:
                return index
        raise CartItemNotFoundError(str(item_id))

    def _is_item_expired(self, item: CartItem) -> bool:
        return self._clock() - item.added_at >= self._ttl

    # -- mutations -----------------------------------------------------------

    def add_student(self, data: StudentData) -> CartItemId:
        """Add a student and decide family-discount eligibility.

        Raises:
            InvalidStudentError: If a required field is missing or invalid.
            DuplicateStudentError: If the same name is already in the cart.
        """
        if not (data.first_name or "").strip():
            raise InvalidStudentError("Fornavn er påkrevd")
        if not (data.last_name or "").strip():
            raise InvalidStudentError("Etternavn er påkrevd")
        if not _is_valid_age(data.age):
            raise InvalidStudentError(f"Ugyldig alder (må være mellom {MIN_AGE}-{MAX_AGE} år)")
        if not data.courses:
            raise InvalidStudentError("Minst én klasse må velges")

        with self._transaction() as items:
            if any(_same_name(item, data.first_name, data.last_name) for item in items):
                raise DuplicateStudentError(data.first_name.strip(), data.last_name.strip())

            override = FamilyDiscountChoice.from_flag(data.family_discount_override)
            eligible = resolve_eligibility(
                explicit=FamilyDiscountChoice.from_flag(data.is_second_dancer_in_family),
                override=override,
                current_cart_size=len(items),
            )
            item = CartItem(
                id=CartItemId.new(),
                first_name=data.first_name.strip(),
                last_name=data.last_name.strip(),
                age=data.age,
                courses=tuple(data.courses),
                schedule_ids=tuple(data.schedule_ids),
                is_second_dancer_in_family=eligible,
                family_discount_override=override,
                added_at=self._clock(),
            )
            items.append(item)

        logger.info(
            "Added %s to cart %s (family discount: %s)",
            item.full_name,
            self._cart_id,
            eligible,
        )
        return item.id

    def remove_student(self, item_id: CartItemId) -> None:
        """Raises CartItemNotFoundError for an unknown id."""
        with self._transaction() as items:
            del items[self._index_of(items, item_id)]

    def update_student(
        self,
        item_id: CartItemId,
        *,
        first_name: str | None = None,
        last_name: str | None = None,
        age: int | None = None,
        courses: tuple[Course, ...] | None = None,
        schedule_ids: tuple[str, ...] | None = None,
    ) -> CartItem:
        """Apply changes to one student. Blank names keep the current name.

        Raises:
            CartItemNotFoundError: If the id is unknown.
            DuplicateStudentError: If the new name clashes with another student.
        """
        with self._transaction() as items:
            index = self._index_of(items, item_id)
            current = items[index]
            new_first = (first_name or "").strip() or current.first_name
            new_last = (last_name or "").strip() or current.last_name

            if (new_first, new_last) != (current.first_name, current.last_name):
                others = items[:index] + items[index + 1:]
                if any(_same_name(item, new_first, new_last) for item in others):
                    raise DuplicateStudentError(new_first, new_last)

            updated = replace(
                current,
                first_name=new_first,
                last_name=new_last,
                age=current.age if age is None else age,
                courses=current.courses if courses is None else tuple(courses),
                schedule_ids=current.schedule_ids if schedule_ids is None else tuple(schedule_ids),
            )
            items[index] = updated
        return updated

    def duplicate_student(self, item_id: CartItemId) -> CartItemId:
        """Copy a student as an additional family member."""
        with self._transaction() as items:
            original = items[self._index_of(items, item_id)]
            copy = replace(
                original,
                id=CartItemId.new(),
                last_name=f"{original.last_name}{COPY_SUFFIX}",
                is_second_dancer_in_family=True,
                family_discount_override=FamilyDiscountChoice.ELIGIBLE,
                added_at=self._clock(),
            )
            items.append(copy)
        return copy.id

    def toggle_family_discount(self, item_id: CartItemId) -> bool:
        """Flip eligibility and pin it with an override. Returns the new value."""
        with self._transaction() as items:
            index = self._index_of(items, item_id)
            current = items[index]
            new_value = not current.is_second_dancer_in_family
            items[index] = replace(
                current,
                is_second_dancer_in_family=new_value,
                family_discount_override=FamilyDiscountChoice.from_flag(new_value),
            )
        logger.info(
            "Toggled family discount for %s: %s -> %s",
            current.first_name,
            current.is_second_dancer_in_family,
            new_value,
        )
        return new_value

    def reset_family_discount_by_position(self) -> None:
        """Mark every student after the first as a second dancer."""
        with self._transaction() as items:
            items[:] = [
                replace(item, is_second_dancer_in_family=index > 0)
                for index, item in enumerate(items)
            ]

    def clear(self) -> None:
        with cart_lock(self._cart_id):
            self._store.delete(self._cart_id)
            self._items = []
            self._expired_on_load = False
        logger.info("Cart %s cleared", self._cart_id)

    def refresh(self) -> int:
        """Drop expired students. Returns how many were removed."""
        with self._transaction() as items:
            valid = [item for item in items if not self._is_item_expired(item)]
            removed = len(items) - len(valid)
            items[:] = valid
        if removed:
            logger.info("Removed %d expired items from cart %s", removed, self._cart_id)
        return removed

    # -- queries -------------------------------------------------------------

    def is_expired(self) -> bool:
        """True when a student was dropped on load or is now past its time to live."""
        return self._expired_on_load or any(self._is_item_expired(item) for item in self._items)

    def summary(self) -> CartSummary:
        """Reprice every student and total the cart."""
        if not self._items:
            return CartSummary(item_count=0, total=0, total_discount=0, original_total=0)

        priced = self._pricing.price_items(self._items)
        total = sum(entry.pricing.total for entry in priced)
        total_discount = sum(entry.pricing.discount for entry in priced)
        original_total = sum(
            entry.pricing.original_price
            if entry.pricing.original_price is not None
            else entry.pricing.total + entry.pricing.discount
            for entry in priced
        )
        return CartSummary(
            item_count=len(self._items),
            total=total,
            total_discount=total_discount,
            original_total=original_total,
            items=tuple(priced),
        )

    def validate(self) -> ValidationResult:
        """Pre-checkout gate. Never mutates the cart."""
        if not self._items:
            return ValidationResult(
                valid=False,
                message="Handlekurven er tom",
                errors=("Legg til minst én student for å fortsette",),
            )

        errors = []
        for position, item in enumerate(self._items, start=1):
            label = f"Student {position} ({item.full_name})"
            if not item.first_name.strip():
                errors.append(f"{label}: Fornavn er påkrevd")
            if not item.last_name.strip():
                errors.append(f"{label}: Etternavn er påkrevd")
            if not _is_valid_age(item.age):
                errors.append(f"{label}: Ugyldig alder")
            if not item.courses:
                errors.append(f"{label}: Ingen klasser valgt")

        names = [item.full_name.lower() for item in self._items]
        if len(set(names)) != len(names):
            errors.append("Duplikate studentnavn er ikke tillatt")

        return ValidationResult(
            valid=not errors,
            message="Feil i handlekurven" if errors else "Handlekurven er gyldig",
            errors=tuple(errors),
        )

    def total_class_count(self) -> int:
        return sum(len(item.courses) for item in self._items)

    def has_potential_family_discount(self) -> bool:
        return len(self._items) > 1 and any(
            item.is_second_dancer_in_family for item in self._items
        )

    def can_apply_family_discount(self) -> bool:
        return len(self._items) > 1

    def detect_family(self, first_name: str, last_name: str) -> FamilyDetectionResult:
        return detect_family(first_name, last_name, self._items)

    def analytics(self) -> CartAnalytics:
        summary = self.summary()
        total_classes = self.total_class_count()
        count = len(self._items)
        return CartAnalytics(
            total_students=count,
            total_classes=total_classes,
            average_classes_per_student=total_classes / count if count else 0.0,
            family_discount_eligible=sum(
                1 for item in self._items if item.is_second_dancer_in_family
            ),
            estimated_savings=summary.total_discount,
            cart_value=summary.total,
        )
