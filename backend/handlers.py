import logging

from django.conf import settings
from rest_framework import status
from rest_framework.exceptions import ValidationError
from rest_framework.response import Response
from rest_framework.views import exception_handler

from backend.exceptions import InsufficientStock, translate_exception

logger = logging.getLogger(__name__)


def _message_from(data):
    if isinstance(data, dict):
        if "detail" in data:
            return str(data["detail"])
        if "message" in data:
            return str(data["message"])
    if isinstance(data, list) and data:
        return str(data[0])
    return str(data)


def storefront_exception_handler(exc, context):
    view = context.get("view")
    view_name = view.__class__.__name__ if view is not None else "unknown"

    original = exc
    exc = translate_exception(exc)
    if exc is not original:
        logger.warning(
            f"[API] {view_name} raised {original.__class__.__name__}: {original}"
        )

    response = exception_handler(exc, context)

    if response is None:
        logger.exception(f"[API] Unhandled error in {view_name}", exc_info=exc)
        message = str(exc) if settings.DEBUG else "Internal server error."
        return Response(
            {"message": message, "code": "internal_error"},
            status=status.HTTP_500_INTERNAL_SERVER_ERROR,
        )

    if isinstance(exc, ValidationError):
        payload = {
            "message": "Invalid request.",
            "code": "invalid_request",
            "errors": response.data,
        }
    else:
        payload = {
            "message": _message_from(response.data),
            "code": getattr(exc, "default_code", "error"),
        }
        if isinstance(exc, InsufficientStock) and exc.product_id is not None:
            payload["product_id"] = exc.product_id
        if getattr(exc, "retryable", False):
            payload["retryable"] = True

    if response.status_code >= 500:
        logger.error(f"[API] {view_name} failed: {payload['message']}")
    else:
        logger.info(
            f"[API] {view_name} rejected with {response.status_code}: {payload['message']}"
        )

    response.data = payload
    return response
