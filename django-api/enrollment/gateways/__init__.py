from django.conf import settings

from enrollment import conf
from enrollment.gateways.interfaces import PaymentGateway
from enrollment.gateways.mock_gateway import MockPaymentGateway
from enrollment.gateways.vipps_gateway import VippsGateway


def get_payment_gateway() -> PaymentGateway:
    """Build the gateway selected by STUDIO_PAYMENT_GATEWAY."""
    if conf.payment_gateway_name() == "vipps":
        return VippsGateway(
            initiate_url=settings.VIPPS_INITIATE_URL,
            timeout=getattr(settings, "VIPPS_TIMEOUT", 10.0),
        )
    return MockPaymentGateway()


__all__ = [
    "PaymentGateway",
    "MockPaymentGateway",
    "VippsGateway",
    "get_payment_gateway",
]
