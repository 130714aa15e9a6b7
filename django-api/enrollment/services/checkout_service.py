"""Checkout service - hands the cart total to the payment gateway."""

import logging
from uuid import uuid4

from enrollment.domain.errors import CartValidationError, PaymentFailedError
from enrollment.domain.models import CustomerInfo, PaymentRequest, PaymentResult
from enrollment.gateways.interfaces import PaymentGateway
from enrollment.services.cart_service import CartService

logger = logging.getLogger(__name__)


def new_order_id() -> str:
    return f"order-{uuid4().hex}"


class CheckoutService:
    """Service for starting payment of a cart."""

    def __init__(self, gateway: PaymentGateway) -> None:
        self._gateway = gateway

    def build_payment_request(
        self, cart: CartService, customer: CustomerInfo, order_id: str | None = None
    ) -> PaymentRequest:
        """Validate the cart and build the request from its summary.

        Raises:
            CartValidationError: If the cart fails validation or a student
                could not be priced.
        """
        validation = cart.validate()
        if not validation.valid:
            raise CartValidationError(validation.errors)

        summary = cart.summary()
        unpriced = tuple(
            f"{entry.item.full_name}: {entry.pricing.package_name}"
            for entry in summary.items
            if not entry.pricing.package_found
        )
        if unpriced:
            raise CartValidationError(unpriced)

        names = ", ".join(entry.item.full_name for entry in summary.items)
        return PaymentRequest(
            order_id=order_id or new_order_id(),
            amount_in_ore=summary.total,
            customer=customer,
            description=f"Danseklasser: {names}",
        )

    def start_checkout(
        self, cart: CartService, customer: CustomerInfo, order_id: str | None = None
    ) -> PaymentResult:
        """Start payment for the cart.

        Raises:
            CartValidationError: If the cart is not ready for checkout.
            PaymentFailedError: If the gateway did not accept the payment.
        """
        request = self.build_payment_request(cart, customer, order_id)
        result = self._gateway.initiate_payment(request)
        if not result.success:
            logger.error("Payment for order %s failed: %s", request.order_id, result.error)
            raise PaymentFailedError(request.order_id)

        logger.info(
            "Started payment %s for order %s: %d øre",
            result.external_order_id,
            request.order_id,
            request.amount_in_ore,
        )
        return result
