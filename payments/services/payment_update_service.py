import logging

from django.db import transaction
from django.utils import timezone

from payments.models import Payment

logger = logging.getLogger(__name__)

ORDER_STATUS_FOR_PAYMENT = {
    "completed": "paid",
}


def update_payment_status(external_id, status, gateway):
    """Record the gateway's verdict on a payment and promote its order.

    Returns the updated ``Payment`` or ``None`` when no payment matches.
    Repeated deliveries of the same verdict are no-ops.
    """
    with transaction.atomic():
        payment = (
            Payment.objects.select_for_update()
            .select_related("order")
            .filter(external_id=external_id, gateway=gateway)
            .first()
        )
        if payment is None:
            logger.error(
                f"[Payment Update] Payment with external_id={external_id}, gateway={gateway} not found."
            )
            return None

        if payment.status == status:
            logger.info(f"[Payment Update] Payment {payment.id} already {status}")
            return payment

        payment.status = status
        payment.save(update_fields=["status", "updated_at"])
        logger.info(f"[Payment Update] Payment {payment.id} set to {status}")

        order_status = ORDER_STATUS_FOR_PAYMENT.get(status)
        order = payment.order
        if order_status and order.order_status == "pending":
            order.order_status = order_status
            order.updated_at = timezone.now()
            order.save(update_fields=["order_status", "updated_at"])
            logger.info(f"[Order Update] Order {order.id} set to {order_status}")

    return payment
