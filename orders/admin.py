from django.contrib import admin

from .models import Order, OrderItem


class OrderItemInline(admin.TabularInline):
    model = OrderItem
    extra = 0
    readonly_fields = ("product", "quantity", "price")
    can_delete = False


@admin.register(Order)
class OrderAdmin(admin.ModelAdmin):
    list_display = ("id", "user", "total_amount", "currency", "order_status", "created_at")
    list_filter = ("order_status", "currency")
    search_fields = ("id", "user__email", "user__username")
    readonly_fields = ("total_amount", "created_at", "updated_at")
    inlines = [OrderItemInline]

    def has_delete_permission(self, request, obj=None):
        return False
