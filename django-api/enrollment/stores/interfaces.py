"""Store interfaces (repository pattern).

Stores must be swappable and return domain models or plain records.
"""

from abc import ABC, abstractmethod
from typing import Any

from enrollment.domain import Course, CourseId, PricingPackage


class CatalogStore(ABC):
    """Interface for the pricing catalog and course offering."""

    @abstractmethod
    def list_packages(self) -> list[PricingPackage]:
        """Return active pricing packages ordered by their ordering hint."""
        ...

    @abstractmethod
    def list_courses(self) -> list[Course]:
        """Return all courses offered."""
        ...

    @abstractmethod
    def get_courses(self, course_ids: list[CourseId]) -> list[Course]:
        """Return the courses with the given ids, in the given order, skipping unknown ids."""
        ...


class CartStore(ABC):
    """Interface for cart snapshot persistence.

    A snapshot is a JSON-serializable list of cart item records.
    """

    @abstractmethod
    def load(self, cart_id: str) -> list[dict[str, Any]] | None:
        """Return the stored records, or None when nothing is stored.

        Raises:
            ValueError: If the stored snapshot cannot be decoded.
        """
        ...

    @abstractmethod
    def save(self, cart_id: str, records: list[dict[str, Any]]) -> None:
        """Replace the stored snapshot."""
        ...

    @abstractmethod
    def delete(self, cart_id: str) -> None:
        """Remove the stored snapshot."""
        ...

    @abstractmethod
    def cart_ids(self) -> list[str]:
        """Return the ids of all carts with a stored snapshot."""
        ...
