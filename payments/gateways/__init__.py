from django.conf import settings
from django.core.exceptions import ImproperlyConfigured

from .base import PaymentGateway, PaymentGatewayError, PaymentIntent


def get_payment_gateway():
    """Return the configured gateway, or None when payments are disabled."""
    name = settings.PAYMENT_GATEWAY
    if not name:
        return None
    if name == "stripe":
        from .stripe_gateway import StripeGateway

        return StripeGateway()
    raise ImproperlyConfigured(f"Unsupported PAYMENT_GATEWAY: {name}")


__all__ = [
    "PaymentGateway",
    "PaymentGatewayError",
    "PaymentIntent",
    "get_payment_gateway",
]
