from django.urls import path

from payments.webhooks.stripe_webhooks import handle_stripe_event

urlpatterns = [
    path("webhooks/stripe/", handle_stripe_event, name="stripe_webhook"),
]
