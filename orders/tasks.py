import logging
from datetime import datetime

from celery import shared_task
from django.conf import settings
from django.core.mail import EmailMultiAlternatives
from django.template.loader import render_to_string

from orders.models import Order

logger = logging.getLogger(__name__)


@shared_task
def send_order_confirmation_email(order_id):
    order = (
        Order.objects.select_related("user", "shipping_address")
        .prefetch_related("items__product")
        .filter(pk=order_id)
        .first()
    )
    if order is None:
        logger.warning(f"[Order Email] Order {order_id} no longer exists")
        return

    items = list(order.items.all())
    html_content = render_to_string(
        "emails/order_confirmation_email.html",
        {
            "user": order.user,
            "order": order,
            "items": items,
            "year": datetime.now().year,
        },
    )
    text_content = (
        f"Hi {order.user.username},\n\n"
        f"Thank you for your order #{order.id}.\n\n"
        + "\n".join(
            f"- {item.product.name} x {item.quantity} @ {item.price}" for item in items
        )
        + f"\n\nTotal: {order.total_amount} {order.currency.upper()}\n"
    )

    msg = EmailMultiAlternatives(
        f"Order #{order.id} confirmed",
        text_content,
        settings.DEFAULT_FROM_EMAIL,
        [order.user.email],
    )
    msg.attach_alternative(html_content, "text/html")
    msg.send()
    logger.info(f"[Order Email] Confirmation sent for order {order.id}")
