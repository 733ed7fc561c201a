import logging

from django.conf import settings
from django.db.models import Prefetch
from django.utils import timezone

from backend.exceptions import InvalidRequest, NotFound
from orders.models import Order, OrderItem
from users.roles import Capability, require_capability

logger = logging.getLogger(__name__)


def _orders_with_lines():
    return Order.objects.prefetch_related(
        Prefetch(
            "items",
            queryset=OrderItem.objects.select_related("product").only(
                "id",
                "order_id",
                "quantity",
                "price",
                "product__id",
                "product__name",
                "product__main_image_url",
            ),
        )
    )


def list_orders(user_id):
    return list(_orders_with_lines().filter(user_id=user_id).order_by("-created_at", "-id"))


def get_order(user_id, order_id):
    order = _orders_with_lines().filter(pk=order_id, user_id=user_id).first()
    if order is None:
        raise NotFound("Order not found")
    return order


def update_order_status(identity, order_id, new_status):
    require_capability(identity, Capability.MANAGE_ORDERS)

    if not isinstance(new_status, str) or not new_status.strip():
        raise InvalidRequest("Order status is required")
    new_status = new_status.strip()
    if new_status not in settings.STOREFRONT_ORDER_STATUSES:
        raise InvalidRequest(
            f"Invalid order status. Use one of: {', '.join(settings.STOREFRONT_ORDER_STATUSES)}."
        )

    updated = Order.objects.filter(pk=order_id).update(
        order_status=new_status, updated_at=timezone.now()
    )
    if not updated:
        raise NotFound("Order not found")

    logger.info(
        f"[Orders] Order {order_id} set to {new_status} by user {identity.id}"
    )
    return _orders_with_lines().get(pk=order_id)
