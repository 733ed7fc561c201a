import logging

from django.utils import timezone
from rest_framework import status
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from backend.exceptions import NotFound
from backend.field_sets import FieldSet

from .models import Address
from .serializers import AddressSerializer

logger = logging.getLogger(__name__)

ADDRESS_FIELDS = FieldSet(
    "street", "city", "state", "zip_code", "country", "is_billing", "is_shipping"
)


class AddressListCreateView(APIView):
    permission_classes = [IsAuthenticated]

    def get(self, request):
        addresses = Address.objects.filter(user_id=request.user.id)
        return Response(AddressSerializer(addresses, many=True).data)

    def post(self, request):
        serializer = AddressSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        address = serializer.save(user_id=request.user.id)
        logger.info(f"[Address] Address {address.id} added for user {request.user.id}")
        return Response(
            {
                "message": "Address added successfully",
                "address": AddressSerializer(address).data,
            },
            status=status.HTTP_201_CREATED,
        )


class AddressDetailView(APIView):
    permission_classes = [IsAuthenticated]

    def owned(self, address_id):
        return Address.objects.filter(pk=address_id, user_id=self.request.user.id)

    def get(self, request, address_id):
        address = self.owned(address_id).first()
        if address is None:
            raise NotFound("Address not found or unauthorized")
        return Response(AddressSerializer(address).data)

    def patch(self, request, address_id):
        serializer = AddressSerializer(data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        try:
            ADDRESS_FIELDS.apply(
                self.owned(address_id),
                serializer.validated_data,
                updated_at=timezone.now(),
            )
        except NotFound:
            raise NotFound("Address not found or unauthorized")

        address = self.owned(address_id).get()
        return Response(
            {
                "message": "Address updated successfully",
                "address": AddressSerializer(address).data,
            }
        )

    def delete(self, request, address_id):
        address = self.owned(address_id).first()
        if address is None:
            raise NotFound("Address not found or unauthorized")
        address.delete()
        logger.info(f"[Address] Address {address_id} deleted for user {request.user.id}")
        return Response({"message": "Address deleted successfully"})
