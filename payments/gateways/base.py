from abc import ABC, abstractmethod
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal


class PaymentGatewayError(Exception):
    """Raised when the gateway cannot create a payment authorization."""


@dataclass(frozen=True)
class PaymentIntent:
    id: str
    client_secret: str
    amount: Decimal
    currency: str
    status: str = "requires_payment_method"


def to_minor_units(amount):
    return int((Decimal(amount) * 100).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


class PaymentGateway(ABC):
    name = None

    @abstractmethod
    def create_payment_intent(self, amount, currency, metadata=None, idempotency_key=None):
        """Authorize ``amount`` and return a ``PaymentIntent`` for the client."""
        ...
