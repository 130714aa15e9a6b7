"""Payment gateway interface.

Gateways must be swappable; the core only supplies a correct amount.
"""

from abc import ABC, abstractmethod

from enrollment.domain.models import PaymentRequest, PaymentResult


class PaymentGateway(ABC):
    """Interface for starting a payment with an external provider."""

    @abstractmethod
    def initiate_payment(self, request: PaymentRequest) -> PaymentResult:
        """Start a payment and return where to redirect the customer.

        Transport failures are reported as an unsuccessful result, not raised.
        """
        ...
