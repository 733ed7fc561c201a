from rest_framework import serializers

from .models import Address


class AddressSerializer(serializers.ModelSerializer):
    is_billing = serializers.BooleanField(required=True)
    is_shipping = serializers.BooleanField(required=True)

    class Meta:
        model = Address
        fields = [
            "id",
            "user_id",
            "street",
            "city",
            "state",
            "zip_code",
            "country",
            "is_billing",
            "is_shipping",
            "created_at",
            "updated_at",
        ]
        read_only_fields = ["id", "user_id", "created_at", "updated_at"]
