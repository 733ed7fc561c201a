from django.db import models
from django.utils import timezone


class Payment(models.Model):
    GATEWAY_CHOICES = (("stripe", "Stripe"),)

    STATUS_CHOICES = (
        ("created", "Created"),
        ("completed", "Completed"),
        ("failed", "Failed"),
    )

    order = models.OneToOneField(
        "orders.Order", on_delete=models.PROTECT, related_name="payment"
    )
    gateway = models.CharField(max_length=20, choices=GATEWAY_CHOICES)
    external_id = models.CharField(max_length=100, unique=True)
    amount = models.DecimalField(max_digits=10, decimal_places=2)
    currency = models.CharField(max_length=10, default="usd")
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default="created")
    created_at = models.DateTimeField(default=timezone.now)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-created_at"]

    def __str__(self):
        return f"{self.gateway.upper()} Payment {self.external_id}"


class PaymentEvent(models.Model):
    payment = models.ForeignKey(Payment, on_delete=models.CASCADE, related_name="events")
    gateway = models.CharField(max_length=50)
    event_type = models.CharField(max_length=100)
    payload = models.JSONField(blank=True, null=True)
    created_at = models.DateTimeField(auto_now_add=True)

    def __str__(self):
        return f"{self.gateway} | {self.event_type} | {self.payment_id}"
