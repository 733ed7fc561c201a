from django.contrib import admin

from .models import Category, Product, Tag


@admin.register(Product)
class ProductAdmin(admin.ModelAdmin):
    list_display = ("id", "name", "price", "stock", "created_at")
    list_filter = ("categories",)
    search_fields = ("name", "description")
    ordering = ("-created_at",)
    filter_horizontal = ("categories", "tags")


admin.site.register(Category)
admin.site.register(Tag)
