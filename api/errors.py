"""
Exception handlers for the JSON API.

Store errors carry their own code and status; Django's ValidationError and
PermissionDenied are mapped onto the same error shape.
"""

import logging

from django.core.exceptions import PermissionDenied, ValidationError

from stores.errors import StoreError, StoreErrorCode, get_status_code

logger = logging.getLogger(__name__)


def register_exception_handlers(api):
    """Attach the store directory's error responses to a NinjaAPI instance."""

    @api.exception_handler(StoreError)
    def store_error(request, exc):
        if exc.status_code >= 500:
            logger.error(f"{exc.code.value} on {request.method} {request.path}: {exc}")
        return api.create_response(
            request,
            {"detail": str(exc), "code": exc.code.value},
            status=exc.status_code,
        )

    @api.exception_handler(ValidationError)
    def validation_error(request, exc):
        detail = exc.message_dict if hasattr(exc, "error_dict") else {"__all__": exc.messages}
        return api.create_response(
            request,
            {"detail": detail, "code": StoreErrorCode.VALIDATION_ERROR.value},
            status=get_status_code(StoreErrorCode.VALIDATION_ERROR),
        )

    @api.exception_handler(PermissionDenied)
    def permission_denied(request, exc):
        return api.create_response(
            request,
            {"detail": str(exc) or "Forbidden", "code": StoreErrorCode.FORBIDDEN.value},
            status=get_status_code(StoreErrorCode.FORBIDDEN),
        )

    return api
