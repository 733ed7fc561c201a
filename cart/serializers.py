from rest_framework import serializers

from .models import Cart, CartItem


class CartItemSerializer(serializers.ModelSerializer):
    cart_item_id = serializers.IntegerField(source="id", read_only=True)
    product_id = serializers.IntegerField(read_only=True)
    name = serializers.CharField(source="product.name", read_only=True)
    price = serializers.DecimalField(
        source="product.price", max_digits=10, decimal_places=2, read_only=True
    )
    main_image_url = serializers.CharField(source="product.main_image_url", read_only=True)
    stock = serializers.IntegerField(source="product.stock", read_only=True)

    class Meta:
        model = CartItem
        fields = [
            "cart_item_id",
            "quantity",
            "product_id",
            "name",
            "price",
            "main_image_url",
            "stock",
        ]


class CartSerializer(serializers.ModelSerializer):
    cart_id = serializers.IntegerField(source="id", read_only=True)
    user_id = serializers.IntegerField(read_only=True)
    items = CartItemSerializer(many=True, read_only=True)

    class Meta:
        model = Cart
        fields = ["cart_id", "user_id", "items"]


class AddCartItemSerializer(serializers.Serializer):
    product_id = serializers.IntegerField(
        min_value=1, error_messages={"required": "Product ID is required."}
    )
    quantity = serializers.IntegerField(
        min_value=1, error_messages={"required": "Quantity is required."}
    )


class UpdateCartItemSerializer(serializers.Serializer):
    quantity = serializers.IntegerField(
        min_value=1, error_messages={"required": "Quantity is required."}
    )
