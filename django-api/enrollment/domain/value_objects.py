"""Domain primitives that enforce validity at creation time."""

from dataclasses import dataclass
from typing import Self
from uuid import UUID, uuid4


@dataclass(frozen=True)
class CourseId:
    """Identifier of a dance class in the external catalog."""

    value: str

    def __post_init__(self) -> None:
        if not self.value:
            raise ValueError("CourseId cannot be empty")

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class PackageId:
    """Identifier of a pricing package in the external catalog."""

    value: str

    def __post_init__(self) -> None:
        if not self.value:
            raise ValueError("PackageId cannot be empty")

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class CartItemId:
    """Unique identifier for a student enrollment draft in a cart."""

    value: UUID

    @classmethod
    def new(cls) -> Self:
        return cls(value=uuid4())

    @classmethod
    def from_string(cls, value: str) -> Self:
        return cls(value=UUID(value))

    def __str__(self) -> str:
        return str(self.value)


def ensure_ore(amount: int, field: str = "amount") -> int:
    """Validate a monetary amount in øre and return it unchanged."""
    if isinstance(amount, bool) or not isinstance(amount, int):
        raise TypeError(f"{field} must be an integer number of øre")
    if amount < 0:
        raise ValueError(f"{field} cannot be negative")
    return amount


@dataclass(frozen=True)
class Money:
    """Amount in øre (1/100 NOK). Never a float."""

    ore: int

    def __post_init__(self) -> None:
        ensure_ore(self.ore, "Money amount")

    @property
    def kroner(self) -> int:
        return self.ore // 100

    def __str__(self) -> str:
        # Norwegian grouping uses a space as thousands separator
        return f"{self.kroner:,} kr".replace(",", " ")
