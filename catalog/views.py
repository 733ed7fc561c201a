import logging

from django.db import transaction
from django.utils import timezone
from django_filters.rest_framework import DjangoFilterBackend
from rest_framework import generics, status
from rest_framework.permissions import AllowAny
from rest_framework.response import Response

from backend.exceptions import InvalidRequest, NotFound
from backend.field_sets import FieldSet
from users.permissions import IsAdminRole

from .filters import ProductFilter
from .models import Category, Product, Tag
from .pagination import ProductPagination
from .serializers import ProductSerializer, ProductWriteSerializer

logger = logging.getLogger(__name__)

PRODUCT_FIELDS = FieldSet("name", "description", "price", "stock", "main_image_url")

SORTABLE_FIELDS = ("created_at", "price", "name", "stock")


def parse_product_id(raw):
    try:
        product_id = int(raw)
    except (TypeError, ValueError):
        raise InvalidRequest("Invalid product ID.")
    if product_id < 1:
        raise InvalidRequest("Invalid product ID.")
    return product_id


def _set_labels(product, categories=None, tags=None):
    if categories is not None:
        product.categories.set(
            [Category.objects.get_or_create(name=name)[0] for name in categories]
        )
    if tags is not None:
        product.tags.set([Tag.objects.get_or_create(name=name)[0] for name in tags])


class ProductListCreateView(generics.ListCreateAPIView):
    serializer_class = ProductSerializer
    pagination_class = ProductPagination
    filter_backends = [DjangoFilterBackend]
    filterset_class = ProductFilter

    def get_permissions(self):
        if self.request.method == "POST":
            return [IsAdminRole()]
        return [AllowAny()]

    def get_queryset(self):
        sort_by = self.request.query_params.get("sort_by", "created_at")
        sort_order = self.request.query_params.get("sort_order", "desc").lower()

        if sort_by not in SORTABLE_FIELDS:
            raise InvalidRequest(
                f"Invalid sort_by. Use one of: {', '.join(SORTABLE_FIELDS)}."
            )
        if sort_order not in ("asc", "desc"):
            raise InvalidRequest("Invalid sort_order. Use 'asc' or 'desc'.")

        ordering = sort_by if sort_order == "asc" else f"-{sort_by}"
        return Product.objects.prefetch_related("categories", "tags").order_by(
            ordering, "-id"
        )

    def create(self, request, *args, **kwargs):
        serializer = ProductWriteSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = dict(serializer.validated_data)
        categories = data.pop("categories", None)
        tags = data.pop("tags", None)

        with transaction.atomic():
            product = Product.objects.create(**data)
            _set_labels(product, categories, tags)

        logger.info(f"[Catalog] Product {product.id} created by user {request.user.id}")
        return Response(
            {
                "message": "Product created successfully.",
                "product": ProductSerializer(product).data,
            },
            status=status.HTTP_201_CREATED,
        )


class ProductDetailView(generics.GenericAPIView):
    serializer_class = ProductSerializer

    def get_permissions(self):
        if self.request.method == "GET":
            return [AllowAny()]
        return [IsAdminRole()]

    def get_object(self):
        product_id = parse_product_id(self.kwargs["product_id"])
        product = (
            Product.objects.prefetch_related("categories", "tags")
            .filter(pk=product_id)
            .first()
        )
        if product is None:
            raise NotFound("Product not found.")
        return product

    def get(self, request, product_id):
        return Response({"product": ProductSerializer(self.get_object()).data})

    def patch(self, request, product_id):
        product_id = parse_product_id(product_id)
        serializer = ProductWriteSerializer(data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        with transaction.atomic():
            product = self.get_object()
            if any(name in data for name in PRODUCT_FIELDS.fields):
                PRODUCT_FIELDS.apply(
                    Product.objects.filter(pk=product.pk),
                    data,
                    updated_at=timezone.now(),
                )
            elif "categories" not in data and "tags" not in data:
                raise InvalidRequest("No valid fields provided for update.")
            _set_labels(product, data.get("categories"), data.get("tags"))

        logger.info(f"[Catalog] Product {product_id} updated by user {request.user.id}")
        return Response(
            {
                "message": "Product updated successfully.",
                "product": ProductSerializer(self.get_object()).data,
            }
        )

    def delete(self, request, product_id):
        product = self.get_object()
        deleted_id = product.pk
        product.delete()
        logger.info(f"[Catalog] Product {deleted_id} deleted by user {request.user.id}")
        return Response({"message": "Product deleted successfully."})
