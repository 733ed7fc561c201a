import logging

import stripe
from django.conf import settings

from .base import PaymentGateway, PaymentGatewayError, PaymentIntent, to_minor_units

logger = logging.getLogger(__name__)

stripe.api_key = settings.STRIPE_SECRET_KEY
stripe.max_network_retries = settings.STRIPE_MAX_NETWORK_RETRIES


class StripeGateway(PaymentGateway):
    name = "stripe"

    def create_payment_intent(self, amount, currency, metadata=None, idempotency_key=None):
        try:
            intent = stripe.PaymentIntent.create(
                amount=to_minor_units(amount),
                currency=currency,
                automatic_payment_methods={"enabled": True},
                metadata=metadata or {},
                idempotency_key=idempotency_key,
            )
        except stripe.StripeError as e:
            logger.error(f"[Stripe] PaymentIntent creation failed: {e}")
            raise PaymentGatewayError(str(e)) from e

        return PaymentIntent(
            id=intent.id,
            client_secret=intent.client_secret,
            amount=amount,
            currency=currency,
            status=intent.status,
        )
