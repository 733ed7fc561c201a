import hashlib
import hmac
import json
import time
from decimal import Decimal
from types import SimpleNamespace

import pytest
import stripe
from django.core.exceptions import ImproperlyConfigured

from orders.models import Order
from orders.services import checkout_service
from payments.gateways import PaymentGatewayError, get_payment_gateway
from payments.gateways.base import to_minor_units
from payments.gateways.stripe_gateway import StripeGateway
from payments.models import Payment, PaymentEvent
from payments.services.payment_update_service import update_payment_status
from tests.conftest import StubGateway
from users.authentication import Identity

WEBHOOK_URL = "/payments/webhooks/stripe/"
ENDPOINT_SECRET = "whsec_test_secret"


def signed_header(payload, secret=ENDPOINT_SECRET):
    timestamp = int(time.time())
    signature = hmac.new(
        secret.encode(), f"{timestamp}.{payload}".encode(), hashlib.sha256
    ).hexdigest()
    return f"t={timestamp},v1={signature}"


def event_payload(event_type, intent_id):
    return json.dumps(
        {
            "id": "evt_test_1",
            "object": "event",
            "type": event_type,
            "data": {"object": {"id": intent_id, "object": "payment_intent"}},
        }
    )


@pytest.fixture
def paid_checkout(user, make_product, make_cart, make_address):
    """An order placed through the stub gateway, awaiting the webhook."""
    cart = make_cart(user, [(make_product(price="12.00"), 2)])
    address = make_address(user)
    result = checkout_service.checkout(
        Identity.from_user(user), cart.id, address.id, address.id, gateway=StubGateway()
    )
    return Payment.objects.get(order_id=result.order_id)


class TestStripeGateway:
    def test_creates_intent_in_minor_units(self, monkeypatch):
        captured = {}

        def fake_create(**kwargs):
            captured.update(kwargs)
            return SimpleNamespace(
                id="pi_123", client_secret="pi_123_secret", status="requires_payment_method"
            )

        monkeypatch.setattr(stripe.PaymentIntent, "create", fake_create)

        intent = StripeGateway().create_payment_intent(
            Decimal("40.00"), "usd", metadata={"order_id": "7"}, idempotency_key="order-7"
        )

        assert captured["amount"] == 4000
        assert captured["currency"] == "usd"
        assert captured["idempotency_key"] == "order-7"
        assert captured["metadata"] == {"order_id": "7"}
        assert intent.id == "pi_123"
        assert intent.client_secret == "pi_123_secret"

    def test_wraps_stripe_errors(self, monkeypatch):
        def fail(**kwargs):
            raise stripe.StripeError("connection reset")

        monkeypatch.setattr(stripe.PaymentIntent, "create", fail)

        with pytest.raises(PaymentGatewayError):
            StripeGateway().create_payment_intent(Decimal("1.00"), "usd")

    def test_minor_units_rounding(self):
        assert to_minor_units(Decimal("19.99")) == 1999
        assert to_minor_units(Decimal("0.005")) == 1


class TestGatewaySelection:
    def test_disabled_by_default(self, settings):
        settings.PAYMENT_GATEWAY = ""
        assert get_payment_gateway() is None

    def test_stripe(self, settings):
        settings.PAYMENT_GATEWAY = "stripe"
        assert isinstance(get_payment_gateway(), StripeGateway)

    def test_unknown(self, settings):
        settings.PAYMENT_GATEWAY = "barter"
        with pytest.raises(ImproperlyConfigured):
            get_payment_gateway()


@pytest.mark.django_db
class TestStripeWebhook:
    @pytest.fixture(autouse=True)
    def endpoint_secret(self, settings):
        settings.STRIPE_ENDPOINT_SECRET = ENDPOINT_SECRET

    def post(self, client, payload, header=None):
        return client.post(
            WEBHOOK_URL,
            data=payload,
            content_type="application/json",
            HTTP_STRIPE_SIGNATURE=header or signed_header(payload),
        )

    def test_succeeded_marks_order_paid(self, client, paid_checkout):
        payload = event_payload("payment_intent.succeeded", paid_checkout.external_id)

        response = self.post(client, payload)

        assert response.status_code == 200
        paid_checkout.refresh_from_db()
        assert paid_checkout.status == "completed"
        assert Order.objects.get(pk=paid_checkout.order_id).order_status == "paid"
        event = PaymentEvent.objects.get(payment=paid_checkout)
        assert event.event_type == "payment_intent.succeeded"
        assert event.payload["id"] == paid_checkout.external_id

    def test_failed_marks_payment_failed(self, client, paid_checkout):
        payload = event_payload("payment_intent.payment_failed", paid_checkout.external_id)

        assert self.post(client, payload).status_code == 200

        paid_checkout.refresh_from_db()
        assert paid_checkout.status == "failed"
        assert Order.objects.get(pk=paid_checkout.order_id).order_status == "pending"

    def test_bad_signature(self, client, paid_checkout):
        payload = event_payload("payment_intent.succeeded", paid_checkout.external_id)

        response = self.post(client, payload, header=signed_header(payload, "whsec_wrong"))

        assert response.status_code == 400
        paid_checkout.refresh_from_db()
        assert paid_checkout.status == "created"
        assert not PaymentEvent.objects.exists()

    def test_unknown_intent_is_acknowledged(self, client):
        payload = event_payload("payment_intent.succeeded", "pi_unknown")
        assert self.post(client, payload).status_code == 200
        assert not PaymentEvent.objects.exists()

    def test_other_events_are_recorded_only(self, client, paid_checkout):
        payload = event_payload("payment_intent.created", paid_checkout.external_id)

        assert self.post(client, payload).status_code == 200

        paid_checkout.refresh_from_db()
        assert paid_checkout.status == "created"
        assert PaymentEvent.objects.filter(payment=paid_checkout).count() == 1

    def test_get_not_allowed(self, client):
        assert client.get(WEBHOOK_URL).status_code == 405


@pytest.mark.django_db
class TestPaymentUpdate:
    def test_redelivery_is_a_noop(self, paid_checkout):
        update_payment_status(paid_checkout.external_id, "completed", "stripe")
        order = Order.objects.get(pk=paid_checkout.order_id)
        Order.objects.filter(pk=order.pk).update(order_status="shipped")

        payment = update_payment_status(paid_checkout.external_id, "completed", "stripe")

        assert payment.status == "completed"
        assert Order.objects.get(pk=order.pk).order_status == "shipped"

    def test_does_not_regress_advanced_orders(self, paid_checkout):
        Order.objects.filter(pk=paid_checkout.order_id).update(order_status="cancelled")

        update_payment_status(paid_checkout.external_id, "completed", "stripe")

        assert Order.objects.get(pk=paid_checkout.order_id).order_status == "cancelled"

    def test_unknown_payment(self):
        assert update_payment_status("pi_missing", "completed", "stripe") is None
