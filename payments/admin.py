from django.contrib import admin

from .models import Payment, PaymentEvent


@admin.register(Payment)
class PaymentAdmin(admin.ModelAdmin):
    list_display = ("id", "order_id", "gateway", "amount", "currency", "status")
    list_filter = ("gateway", "status", "currency")
    search_fields = ("id", "external_id")
    ordering = ("-created_at",)
    readonly_fields = ("created_at", "updated_at")


@admin.register(PaymentEvent)
class PaymentEventAdmin(admin.ModelAdmin):
    list_display = ["id", "payment", "gateway", "event_type", "created_at"]
    list_filter = ["gateway", "event_type"]
    search_fields = ["payment__external_id"]
