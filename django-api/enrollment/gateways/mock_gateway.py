"""Mock gateway for development and tests."""

import logging
from urllib.parse import urlencode
from uuid import uuid4

from enrollment.domain.models import PaymentRequest, PaymentResult
from enrollment.gateways.interfaces import PaymentGateway

logger = logging.getLogger(__name__)


class MockPaymentGateway(PaymentGateway):
    """Always succeeds and redirects to a local payment simulation page."""

    def __init__(self, simulation_url: str = "/payment-simulation") -> None:
        self.simulation_url = simulation_url
        self.requests: list[PaymentRequest] = []

    def initiate_payment(self, request: PaymentRequest) -> PaymentResult:
        self.requests.append(request)
        external_order_id = f"vipps_{uuid4().hex[:12]}"
        query = urlencode({"orderId": external_order_id, "amount": request.amount_in_ore})
        logger.info("Mock payment for order %s: %d øre", request.order_id, request.amount_in_ore)
        return PaymentResult(
            success=True,
            redirect_url=f"{self.simulation_url}?{query}",
            external_order_id=external_order_id,
        )
