"""Product lookups used by the cart and the checkout flow.

The locking helpers must run inside ``transaction.atomic()``.
"""

import logging

from django.db.models import F
from django.utils import timezone

from backend.exceptions import NotFound
from catalog.models import Product

logger = logging.getLogger(__name__)


def get_product(product_id):
    product = (
        Product.objects.filter(pk=product_id)
        .only("id", "name", "price", "stock", "main_image_url")
        .first()
    )
    if product is None:
        raise NotFound("Product not found")
    return product


def lock_products(product_ids):
    """Lock the given product rows and return them keyed by id.

    Rows are locked in primary-key order so that two checkouts touching the
    same products cannot deadlock each other.
    """
    ids = sorted(set(product_ids))
    products = list(
        Product.objects.select_for_update()
        .filter(pk__in=ids)
        .order_by("pk")
        .only("id", "name", "price", "stock")
    )
    return {product.pk: product for product in products}


def decrement_stock(product_id, quantity):
    """Atomically take ``quantity`` units; False if stock would go negative."""
    updated = Product.objects.filter(pk=product_id, stock__gte=quantity).update(
        stock=F("stock") - quantity, updated_at=timezone.now()
    )
    if not updated:
        logger.warning(
            f"[Catalog] Conditional stock decrement refused for product {product_id} (qty {quantity})"
        )
    return bool(updated)
