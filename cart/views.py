from rest_framework import status
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from .serializers import AddCartItemSerializer, CartSerializer, UpdateCartItemSerializer
from .services import cart_service


class CartView(APIView):
    permission_classes = [IsAuthenticated]

    def get(self, request):
        cart = cart_service.get_cart(request.user.id)
        return Response(CartSerializer(cart).data)


class CartItemListView(APIView):
    permission_classes = [IsAuthenticated]

    def post(self, request):
        serializer = AddCartItemSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        item, created = cart_service.add_item(
            request.user.id,
            serializer.validated_data["product_id"],
            serializer.validated_data["quantity"],
        )
        if created:
            return Response(
                {"message": "Item added to cart", "cart_item_id": item.id},
                status=status.HTTP_201_CREATED,
            )
        return Response(
            {"message": "Cart item quantity updated", "cart_item_id": item.id}
        )


class CartItemDetailView(APIView):
    permission_classes = [IsAuthenticated]

    def patch(self, request, item_id):
        serializer = UpdateCartItemSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        cart_service.update_item_quantity(
            request.user.id, item_id, serializer.validated_data["quantity"]
        )
        return Response({"message": "Cart item updated"})

    def delete(self, request, item_id):
        cart_service.remove_item(request.user.id, item_id)
        return Response({"message": "Cart item removed"})
