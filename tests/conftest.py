import itertools
from decimal import Decimal

import pytest
from django.contrib.auth import get_user_model
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import AccessToken

from addresses.models import Address
from cart.models import Cart, CartItem
from catalog.models import Product
from orders.services import checkout_service
from payments.gateways import PaymentGateway, PaymentGatewayError, PaymentIntent
from users.authentication import Identity
from users.choices import Role

_sequence = itertools.count(1)


class StubGateway(PaymentGateway):
    """Records intent requests instead of calling a payment network."""

    name = "stripe"

    def __init__(self, fail=False):
        self.fail = fail
        self.calls = []

    def create_payment_intent(self, amount, currency, metadata=None, idempotency_key=None):
        self.calls.append(
            {
                "amount": amount,
                "currency": currency,
                "metadata": metadata,
                "idempotency_key": idempotency_key,
            }
        )
        if self.fail:
            raise PaymentGatewayError("card network unavailable")
        n = len(self.calls)
        return PaymentIntent(
            id=f"pi_test_{n}",
            client_secret=f"pi_test_{n}_secret_abc",
            amount=amount,
            currency=currency,
        )


class RecordingTask:
    def __init__(self):
        self.queued = []

    def delay(self, *args):
        self.queued.append(args)


@pytest.fixture
def make_user(db):
    def _make(role=Role.ORDINARY, **kwargs):
        n = next(_sequence)
        kwargs.setdefault("username", f"shopper{n}")
        kwargs.setdefault("email", f"shopper{n}@example.com")
        kwargs.setdefault("password", "correct-horse-1")
        return get_user_model().objects.create_user(role=role, **kwargs)

    return _make


@pytest.fixture
def user(make_user):
    return make_user()


@pytest.fixture
def other_user(make_user):
    return make_user()


@pytest.fixture
def admin_account(make_user):
    return make_user(role=Role.ADMIN)


@pytest.fixture
def identity_for():
    return Identity.from_user


@pytest.fixture
def api_client():
    return APIClient()


@pytest.fixture
def client_for():
    def _client(user):
        client = APIClient()
        client.credentials(HTTP_AUTHORIZATION=f"Bearer {AccessToken.for_user(user)}")
        return client

    return _client


@pytest.fixture
def make_product(db):
    def _make(name=None, price="10.00", stock=10, **kwargs):
        return Product.objects.create(
            name=name or f"Product {next(_sequence)}",
            price=Decimal(price),
            stock=stock,
            **kwargs,
        )

    return _make


@pytest.fixture
def make_address(db):
    def _make(user, is_shipping=True, is_billing=True, **kwargs):
        fields = {
            "street": "1 Market St",
            "city": "Springfield",
            "state": "IL",
            "zip_code": "62701",
            "country": "US",
        }
        fields.update(kwargs)
        return Address.objects.create(
            user=user, is_shipping=is_shipping, is_billing=is_billing, **fields
        )

    return _make


@pytest.fixture
def make_cart(db):
    def _make(user, lines=()):
        cart, _ = Cart.objects.get_or_create(user=user)
        for product, quantity in lines:
            CartItem.objects.create(cart=cart, product=product, quantity=quantity)
        return cart

    return _make


@pytest.fixture
def stub_gateway():
    return StubGateway()


@pytest.fixture
def email_task(monkeypatch):
    task = RecordingTask()
    monkeypatch.setattr(checkout_service, "send_order_confirmation_email", task)
    return task


@pytest.fixture
def place_order(make_cart, make_address):
    """Check out a fresh cart for ``user`` and return the created order id."""

    def _place(user, lines):
        cart = make_cart(user, lines)
        address = make_address(user)
        result = checkout_service.checkout(
            Identity.from_user(user), cart.id, address.id, address.id
        )
        return result.order_id

    return _place
