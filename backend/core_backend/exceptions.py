"""
Domain error base class and the DRF exception handler that renders it.

Services raise subclasses of ``OrderingError``; views never catch them.
The handler turns them into::

    {"error": {"code": "MENU_EXPIRED", "message": "...", "details": {...}}}
"""
import logging

from django.core.exceptions import ValidationError as DjangoValidationError
from rest_framework import status
from rest_framework.exceptions import ValidationError as DRFValidationError
from rest_framework.response import Response
from rest_framework.views import exception_handler

logger = logging.getLogger(__name__)


class OrderingError(Exception):
    """Base exception for every domain failure in the ordering pipeline."""

    code = "ORDERING_ERROR"
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "The request could not be processed."

    def __init__(self, message=None, details=None, code=None):
        self.message = message or self.default_message
        self.details = details or {}
        if code is not None:
            self.code = code
        super().__init__(self.message)

    def as_dict(self):
        return {
            "code": self.code,
            "message": self.message,
            "details": self.details,
        }


class Forbidden(OrderingError):
    code = "FORBIDDEN"
    status_code = status.HTTP_403_FORBIDDEN
    default_message = "You do not have permission to perform this action"


def api_exception_handler(exc, context):
    """
    Project-wide exception handler.

    Domain errors get the structured envelope; everything else falls through
    to DRF's default handling.
    """
    if isinstance(exc, OrderingError):
        request = context.get("request")
        if exc.status_code >= 500:
            logger.error(
                f"{exc.code} on {getattr(request, 'path', '?')}: {exc.message}",
                extra={"details": exc.details},
            )
        else:
            logger.info(f"{exc.code} on {getattr(request, 'path', '?')}: {exc.message}")
        return Response({"error": exc.as_dict()}, status=exc.status_code)

    if isinstance(exc, DjangoValidationError):
        # Model clean() failures raised from services.
        detail = exc.message_dict if hasattr(exc, "error_dict") else {"non_field_errors": exc.messages}
        exc = DRFValidationError(detail=detail)

    return exception_handler(exc, context)
