from rest_framework import serializers

from .models import Order, OrderItem


class CheckoutSerializer(serializers.Serializer):
    cart_id = serializers.IntegerField(min_value=1)
    shipping_address_id = serializers.IntegerField(min_value=1)
    billing_address_id = serializers.IntegerField(min_value=1)


class OrderItemSerializer(serializers.ModelSerializer):
    product_id = serializers.IntegerField(read_only=True)
    name = serializers.CharField(source="product.name", read_only=True)
    main_image_url = serializers.CharField(source="product.main_image_url", read_only=True)

    class Meta:
        model = OrderItem
        fields = ["product_id", "name", "main_image_url", "quantity", "price"]


class OrderSerializer(serializers.ModelSerializer):
    order_id = serializers.IntegerField(source="id", read_only=True)
    user_id = serializers.IntegerField(read_only=True)
    shipping_address_id = serializers.IntegerField(read_only=True)
    billing_address_id = serializers.IntegerField(read_only=True)
    items = OrderItemSerializer(many=True, read_only=True)

    class Meta:
        model = Order
        fields = [
            "order_id",
            "user_id",
            "shipping_address_id",
            "billing_address_id",
            "total_amount",
            "currency",
            "order_status",
            "created_at",
            "updated_at",
            "items",
        ]


class OrderStatusSerializer(serializers.Serializer):
    order_status = serializers.CharField(
        required=False, allow_blank=True, allow_null=True
    )
