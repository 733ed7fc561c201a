from rest_framework import status
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from payments.gateways import get_payment_gateway

from .serializers import CheckoutSerializer, OrderSerializer, OrderStatusSerializer
from .services import checkout_service, order_query_service


class CheckoutView(APIView):
    permission_classes = [IsAuthenticated]

    def post(self, request):
        serializer = CheckoutSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        result = checkout_service.checkout(
            request.user,
            data["cart_id"],
            data["shipping_address_id"],
            data["billing_address_id"],
            gateway=get_payment_gateway(),
        )

        body = {"message": "Order created successfully", "orderId": result.order_id}
        if result.payment_client_secret:
            body["clientSecret"] = result.payment_client_secret
        return Response(body, status=status.HTTP_201_CREATED)


class OrderListView(APIView):
    permission_classes = [IsAuthenticated]

    def get(self, request):
        orders = order_query_service.list_orders(request.user.id)
        return Response({"orders": OrderSerializer(orders, many=True).data})


class OrderDetailView(APIView):
    permission_classes = [IsAuthenticated]

    def get(self, request, order_id):
        order = order_query_service.get_order(request.user.id, order_id)
        return Response({"order": OrderSerializer(order).data})

    def patch(self, request, order_id):
        serializer = OrderStatusSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        order = order_query_service.update_order_status(
            request.user, order_id, serializer.validated_data.get("order_status")
        )
        return Response(
            {"message": "Order status updated", "order": OrderSerializer(order).data}
        )
