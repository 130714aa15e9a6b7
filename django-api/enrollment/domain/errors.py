"""Domain error codes for the enrollment module."""

from dataclasses import dataclass
from enum import Enum


class ErrorCode(Enum):
    """Domain error codes."""

    INVALID_STUDENT = "INVALID_STUDENT"
    DUPLICATE_STUDENT = "DUPLICATE_STUDENT"
    CART_ITEM_NOT_FOUND = "CART_ITEM_NOT_FOUND"
    INVALID_CART_ITEM_ID = "INVALID_CART_ITEM_ID"
    CART_INVALID = "CART_INVALID"
    PAYMENT_FAILED = "PAYMENT_FAILED"


@dataclass(frozen=True)
class DomainError(Exception):
    """Base domain error with code and user-safe message."""

    code: ErrorCode
    message: str

    def __str__(self) -> str:
        return f"{self.code.value}: {self.message}"


class InvalidStudentError(DomainError):
    """Raised when student data fails the add-to-cart checks."""

    def __init__(self, message: str) -> None:
        super().__init__(code=ErrorCode.INVALID_STUDENT, message=message)


class DuplicateStudentError(DomainError):
    """Raised when a student with the same name is already in the cart."""

    def __init__(self, first_name: str, last_name: str) -> None:
        super().__init__(
            code=ErrorCode.DUPLICATE_STUDENT,
            message=f'En student med navn "{first_name} {last_name}" finnes allerede i handlekurven',
        )
        self.first_name = first_name
        self.last_name = last_name


class CartItemNotFoundError(DomainError):
    """Raised when a cart item id does not exist in the cart."""

    def __init__(self, item_id: str) -> None:
        super().__init__(
            code=ErrorCode.CART_ITEM_NOT_FOUND,
            message="Student ikke funnet",
        )
        self.item_id = item_id


class InvalidCartItemIdError(DomainError):
    """Raised when a cart item id is malformed."""

    def __init__(self) -> None:
        super().__init__(
            code=ErrorCode.INVALID_CART_ITEM_ID,
            message="Ugyldig ID for student i handlekurven",
        )


class CartValidationError(DomainError):
    """Raised when checkout is attempted on a cart that fails validation."""

    def __init__(self, errors: tuple[str, ...]) -> None:
        super().__init__(
            code=ErrorCode.CART_INVALID,
            message="Feil i handlekurven",
        )
        self.errors = errors


class PaymentFailedError(DomainError):
    """Raised when the payment gateway refuses to start a payment."""

    def __init__(self, order_id: str) -> None:
        super().__init__(
            code=ErrorCode.PAYMENT_FAILED,
            message="Betalingen kunne ikke startes",
        )
        self.order_id = order_id
