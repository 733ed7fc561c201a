from django.urls import path

from .views import AddressDetailView, AddressListCreateView

urlpatterns = [
    path("", AddressListCreateView.as_view(), name="address-list"),
    path("<int:address_id>/", AddressDetailView.as_view(), name="address-detail"),
]
