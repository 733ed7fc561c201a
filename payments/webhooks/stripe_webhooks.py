import json
import logging

import stripe
from django.conf import settings
from django.http import HttpResponse
from django.views.decorators.csrf import csrf_exempt
from django.views.decorators.http import require_POST

from payments.models import Payment, PaymentEvent
from payments.services.payment_update_service import update_payment_status

logger = logging.getLogger(__name__)

PAYMENT_STATUS_FOR_EVENT = {
    "payment_intent.succeeded": "completed",
    "payment_intent.payment_failed": "failed",
}


@csrf_exempt
@require_POST
def handle_stripe_event(request):
    payload = request.body
    sig_header = request.META.get("HTTP_STRIPE_SIGNATURE")

    try:
        stripe.Webhook.construct_event(
            payload, sig_header, settings.STRIPE_ENDPOINT_SECRET
        )
        event = json.loads(payload)
    except (ValueError, stripe.SignatureVerificationError) as e:
        logger.error(f"[Stripe Webhook] Signature Error: {e}")
        return HttpResponse(status=400)

    event_type = event.get("type")
    intent = event.get("data", {}).get("object", {})
    external_id = intent.get("id")

    payment = Payment.objects.filter(external_id=external_id, gateway="stripe").first()
    if payment is None:
        logger.warning(
            f"[Stripe Webhook] No Payment found for intent id: {external_id}"
        )
        return HttpResponse(status=200)

    PaymentEvent.objects.create(
        payment=payment,
        gateway="stripe",
        event_type=event_type,
        payload=intent,
    )

    status = PAYMENT_STATUS_FOR_EVENT.get(event_type)
    if status:
        update_payment_status(external_id, status, gateway="stripe")
    else:
        logger.info(f"[Stripe Webhook] Ignoring event {event_type}")

    return HttpResponse(status=200)
