"""Vipps gateway over an HTTP initiate endpoint."""

import logging

import requests

from enrollment.domain.models import PaymentRequest, PaymentResult
from enrollment.gateways.interfaces import PaymentGateway

logger = logging.getLogger(__name__)


class VippsGateway(PaymentGateway):
    """Posts the payment request to the Vipps initiate function."""

    def __init__(
        self,
        initiate_url: str,
        timeout: float = 10.0,
        session: requests.Session | None = None,
    ) -> None:
        self.initiate_url = initiate_url
        self.timeout = timeout
        self.session = session or requests.Session()

    def _payload(self, request: PaymentRequest) -> dict:
        return {
            "orderId": request.order_id,
            "amount": request.amount_in_ore,
            "description": request.description,
            "customerInfo": {
                "name": request.customer.name,
                "email": request.customer.email,
                "phone": request.customer.phone,
            },
        }

    def initiate_payment(self, request: PaymentRequest) -> PaymentResult:
        try:
            response = self.session.post(
                self.initiate_url,
                json=self._payload(request),
                timeout=self.timeout,
            )
            response.raise_for_status()
            data = response.json()
        except (requests.RequestException, ValueError) as exc:
            logger.error("Vipps initiate failed for order %s: %s", request.order_id, exc)
            return PaymentResult(success=False, error="Kunne ikke starte Vipps-betaling")

        if not data.get("success") or not data.get("url"):
            logger.error("Vipps refused order %s: %s", request.order_id, data)
            return PaymentResult(success=False, error=data.get("error") or "Betalingen ble ikke godkjent")

        return PaymentResult(
            success=True,
            redirect_url=data["url"],
            external_order_id=data.get("orderId"),
        )
