from django.contrib import admin

from .models import Address


@admin.register(Address)
class AddressAdmin(admin.ModelAdmin):
    list_display = ("id", "user", "city", "country", "is_billing", "is_shipping")
    list_filter = ("is_billing", "is_shipping", "country")
    search_fields = ("user__email", "street", "city", "zip_code")
