from django.urls import path

from .views import ProductDetailView, ProductListCreateView

urlpatterns = [
    path("", ProductListCreateView.as_view(), name="product-list"),
    path("<str:product_id>/", ProductDetailView.as_view(), name="product-detail"),
]
