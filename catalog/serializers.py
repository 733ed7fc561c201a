from rest_framework import serializers

from .models import Product


class ProductSerializer(serializers.ModelSerializer):
    categories = serializers.SlugRelatedField(many=True, read_only=True, slug_field="name")
    tags = serializers.SlugRelatedField(many=True, read_only=True, slug_field="name")

    class Meta:
        model = Product
        fields = [
            "id",
            "name",
            "description",
            "price",
            "stock",
            "main_image_url",
            "categories",
            "tags",
            "created_at",
            "updated_at",
        ]


class ProductWriteSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=255)
    description = serializers.CharField(allow_blank=True)
    price = serializers.DecimalField(max_digits=10, decimal_places=2, min_value=0)
    stock = serializers.IntegerField(min_value=0)
    main_image_url = serializers.URLField(
        max_length=500, required=False, allow_null=True, allow_blank=True
    )
    categories = serializers.ListField(
        child=serializers.CharField(max_length=100), required=False
    )
    tags = serializers.ListField(
        child=serializers.CharField(max_length=50), required=False
    )
