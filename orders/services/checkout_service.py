"""Turns a user's cart into an order in a single database transaction.

Every read and write below runs inside one ``transaction.atomic()`` block:
either the order, its lines, the stock decrements, the payment record and the
cart deletion all commit together, or none of them do.
"""

import logging
from dataclasses import dataclass
from decimal import Decimal
from typing import Optional

from django.conf import settings
from django.db import transaction

from addresses.models import Address
from backend.exceptions import (
    EmptyCart,
    InsufficientStock,
    InvalidRequest,
    NotFound,
    PaymentInitiationFailed,
)
from cart.models import Cart, CartItem
from catalog.services.catalog_reader import decrement_stock, lock_products
from orders.models import Order, OrderItem, OrderStatus
from orders.tasks import send_order_confirmation_email
from payments.gateways import PaymentGatewayError
from payments.models import Payment

logger = logging.getLogger(__name__)

CENT = Decimal("0.01")


@dataclass(frozen=True)
class CheckoutResult:
    order_id: int
    payment_client_secret: Optional[str] = None


def _require_id(value, name):
    if value is None:
        raise InvalidRequest(
            "Missing required fields: shipping_address_id, billing_address_id, and cart_id"
        )
    if isinstance(value, bool) or not isinstance(value, int) or value < 1:
        raise InvalidRequest(f"Invalid {name}.")
    return value


def _load_addresses(user_id, shipping_address_id, billing_address_id):
    addresses = {
        address.pk: address
        for address in Address.objects.filter(
            pk__in={shipping_address_id, billing_address_id}, user_id=user_id
        )
    }
    shipping = addresses.get(shipping_address_id)
    billing = addresses.get(billing_address_id)
    if shipping is None or billing is None:
        raise NotFound("Address not found or unauthorized")
    if not shipping.is_shipping:
        raise InvalidRequest("Address cannot be used for shipping.")
    if not billing.is_billing:
        raise InvalidRequest("Address cannot be used for billing.")
    return shipping, billing


def checkout(identity, cart_id, shipping_address_id, billing_address_id, gateway=None):
    """Create an order from ``cart_id`` for the acting ``identity``.

    ``gateway`` is a ``PaymentGateway``; when given, a payment intent for the
    order total is created before commit and its client secret is returned.
    Raises ``InvalidRequest``, ``NotFound``, ``EmptyCart``,
    ``InsufficientStock`` or ``PaymentInitiationFailed``; on any error nothing
    is persisted.
    """
    for value, name in (
        (cart_id, "cart_id"),
        (shipping_address_id, "shipping_address_id"),
        (billing_address_id, "billing_address_id"),
    ):
        _require_id(value, name)

    user_id = identity.id
    currency = settings.STOREFRONT_CURRENCY

    with transaction.atomic():
        cart = (
            Cart.objects.select_for_update()
            .filter(pk=cart_id, user_id=user_id)
            .first()
        )
        if cart is None:
            raise NotFound("Cart not found")

        lines = list(CartItem.objects.filter(cart=cart).order_by("product_id"))
        if not lines:
            raise EmptyCart()

        products = lock_products(line.product_id for line in lines)
        for line in lines:
            product = products.get(line.product_id)
            if product is None or line.quantity > product.stock:
                raise InsufficientStock(line.product_id)

        total_amount = sum(
            (products[line.product_id].price * line.quantity for line in lines),
            Decimal("0"),
        ).quantize(CENT)

        shipping, billing = _load_addresses(
            user_id, shipping_address_id, billing_address_id
        )

        order = Order.objects.create(
            user_id=user_id,
            shipping_address=shipping,
            billing_address=billing,
            total_amount=total_amount,
            currency=currency,
            order_status=OrderStatus.PENDING,
        )
        OrderItem.objects.bulk_create(
            [
                OrderItem(
                    order=order,
                    product_id=line.product_id,
                    quantity=line.quantity,
                    price=products[line.product_id].price,
                )
                for line in lines
            ]
        )

        for line in lines:
            if not decrement_stock(line.product_id, line.quantity):
                raise InsufficientStock(line.product_id)

        client_secret = None
        if gateway is not None:
            try:
                intent = gateway.create_payment_intent(
                    total_amount,
                    currency,
                    metadata={"order_id": str(order.id), "user_id": str(user_id)},
                    idempotency_key=f"order-{order.id}",
                )
            except PaymentGatewayError as e:
                logger.error(
                    f"[Checkout] Payment initiation failed for order {order.id}: {e}"
                )
                raise PaymentInitiationFailed()

            Payment.objects.create(
                order=order,
                gateway=gateway.name,
                external_id=intent.id,
                amount=total_amount,
                currency=currency,
            )
            client_secret = intent.client_secret

        CartItem.objects.filter(cart=cart).delete()
        cart.delete()

        order_id = order.id
        transaction.on_commit(
            lambda: send_order_confirmation_email.delay(order_id), robust=True
        )

    logger.info(
        f"[Checkout] Order {order_id} created for user {user_id} "
        f"({len(lines)} lines, total {total_amount} {currency})"
    )
    return CheckoutResult(order_id=order_id, payment_client_secret=client_secret)
