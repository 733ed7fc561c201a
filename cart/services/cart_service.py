"""Reads and writes the single active cart owned by each user."""

import logging

from django.db import transaction

from backend.exceptions import InsufficientStock, InvalidRequest, NotFound
from cart.models import Cart, CartItem
from catalog.services.catalog_reader import get_product

logger = logging.getLogger(__name__)


def get_cart(user_id):
    cart = (
        Cart.objects.filter(user_id=user_id)
        .prefetch_related("items__product")
        .first()
    )
    if cart is None:
        raise NotFound("No Items in Cart!")
    return cart


def add_item(user_id, product_id, quantity):
    """Add ``quantity`` of a product, creating the cart on first use.

    Returns ``(item, created)`` where ``created`` is False when an existing
    line was incremented.
    """
    if quantity is None or quantity < 1:
        raise InvalidRequest("Quantity must be at least 1.")

    with transaction.atomic():
        product = get_product(product_id)
        cart, cart_created = Cart.objects.get_or_create(user_id=user_id)
        if cart_created:
            logger.info(f"[Cart] Created cart {cart.id} for user {user_id}")
        # Serialises concurrent adds for the same user.
        Cart.objects.select_for_update().filter(pk=cart.pk).first()

        item = CartItem.objects.filter(cart=cart, product_id=product.pk).first()
        new_quantity = quantity + (item.quantity if item else 0)
        if new_quantity > product.stock:
            raise InsufficientStock(product.pk)

        if item is not None:
            item.quantity = new_quantity
            item.save(update_fields=["quantity"])
            return item, False

        item = CartItem.objects.create(cart=cart, product=product, quantity=quantity)
        return item, True


def update_item_quantity(user_id, cart_item_id, quantity):
    if quantity is None or quantity <= 0:
        raise InvalidRequest("Quantity must be greater than zero")

    with transaction.atomic():
        item = (
            CartItem.objects.select_for_update(of=("self",))
            .select_related("product")
            .filter(pk=cart_item_id, cart__user_id=user_id)
            .first()
        )
        if item is None:
            raise NotFound("Cart item not found")
        if quantity > item.product.stock:
            raise InsufficientStock(item.product_id)

        item.quantity = quantity
        item.save(update_fields=["quantity"])
        return item


def remove_item(user_id, cart_item_id):
    deleted, _ = CartItem.objects.filter(pk=cart_item_id, cart__user_id=user_id).delete()
    if not deleted:
        raise NotFound("Cart item not found")
    logger.info(f"[Cart] Removed item {cart_item_id} for user {user_id}")
