"""API error taxonomy.

Kept free of ``rest_framework.views`` imports: DRF resolves the default
authentication classes while loading its views, and those classes import
from here.
"""

from django.core.exceptions import PermissionDenied
from django.db import DatabaseError, IntegrityError, InterfaceError, OperationalError
from django.db.models import ProtectedError
from django.http import Http404
from rest_framework import status
from rest_framework.exceptions import APIException

TIMEOUT_MARKERS = ("statement timeout", "lock timeout", "timed out", "timeout")


class StorefrontError(APIException):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_detail = "Request failed."
    default_code = "error"
    retryable = False


class InvalidRequest(StorefrontError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = "Invalid request."
    default_code = "invalid_request"


class Unauthenticated(StorefrontError):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_detail = "Authentication credentials were not provided or are invalid."
    default_code = "unauthenticated"


class Forbidden(StorefrontError):
    status_code = status.HTTP_403_FORBIDDEN
    default_detail = "You do not have permission to perform this action."
    default_code = "forbidden"


class NotFound(StorefrontError):
    status_code = status.HTTP_404_NOT_FOUND
    default_detail = "Not found."
    default_code = "not_found"


class Conflict(StorefrontError):
    status_code = status.HTTP_409_CONFLICT
    default_detail = "Resource already exists or is still referenced."
    default_code = "conflict"


class InsufficientStock(StorefrontError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = "Insufficient stock."
    default_code = "insufficient_stock"

    def __init__(self, product_id=None, detail=None):
        self.product_id = product_id
        if detail is None and product_id is not None:
            detail = f"Insufficient stock for product {product_id}."
        super().__init__(detail)


class EmptyCart(StorefrontError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = "Cart is empty."
    default_code = "empty_cart"


class PaymentInitiationFailed(StorefrontError):
    default_detail = "Payment initiation failed."
    default_code = "payment_initiation_failed"


class StoreUnavailable(StorefrontError):
    default_detail = "The data store is unavailable. Please retry."
    default_code = "store_unavailable"
    retryable = True


class Timeout(StorefrontError):
    default_detail = "The data store timed out. Please retry."
    default_code = "timeout"
    retryable = True


def translate_database_error(exc):
    """Map Django database exceptions onto the API error taxonomy."""
    if isinstance(exc, ProtectedError):
        return Conflict("Resource is still referenced by other records.")
    if isinstance(exc, IntegrityError):
        return Conflict()
    if isinstance(exc, OperationalError):
        text = str(exc).lower()
        if any(marker in text for marker in TIMEOUT_MARKERS):
            return Timeout()
        return StoreUnavailable()
    if isinstance(exc, (InterfaceError, DatabaseError)):
        return StoreUnavailable()
    return exc


def translate_exception(exc):
    """Map Django's own exceptions onto the API error taxonomy."""
    if isinstance(exc, Http404):
        return NotFound()
    if isinstance(exc, PermissionDenied):
        return Forbidden()
    return translate_database_error(exc)
