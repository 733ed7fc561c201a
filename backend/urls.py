from django.contrib import admin
from django.http import JsonResponse
from django.urls import include, path


def health(request):
    return JsonResponse({"message": "Backend is running!"})


urlpatterns = [
    path("", health, name="health"),
    path("admin/", admin.site.urls),
    path("auth/", include("users.urls")),
    path("user/", include("users.profile_urls")),
    path("products/", include("catalog.urls")),
    path("cart/", include("cart.urls")),
    path("", include("orders.urls")),
    path("addresses/", include("addresses.urls")),
    path("payments/", include("payments.urls")),
]
