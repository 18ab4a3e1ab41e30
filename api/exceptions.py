"""
API exception handling.

Every error leaves the API in the same envelope as a failed service call:
``{"success": false, "error": <message>, "code": <CODE>}``.
"""

import logging
from typing import Any, Dict, Optional

from django.http import Http404
from rest_framework import exceptions, status
from rest_framework.response import Response

from core.domain.exceptions import DomainException
from core.metrics import errors_total

logger = logging.getLogger(__name__)

# Error codes of failed service envelopes and the HTTP status they map to
STATUS_BY_CODE = {
    "VALIDATION_ERROR": status.HTTP_400_BAD_REQUEST,
    "INVALID_PRICE": status.HTTP_400_BAD_REQUEST,
    "WEBHOOK_VERIFICATION_FAILED": status.HTTP_400_BAD_REQUEST,
    "NOT_AUTHENTICATED": status.HTTP_401_UNAUTHORIZED,
    "PERMISSION_DENIED": status.HTTP_403_FORBIDDEN,
    "DUPLICATE_EMAIL": status.HTTP_409_CONFLICT,
    "DATABASE_ERROR": status.HTTP_500_INTERNAL_SERVER_ERROR,
    "PAYMENT_GATEWAY_ERROR": status.HTTP_502_BAD_GATEWAY,
}

# DRF exceptions raised by parsers, serializers and permission classes
CODE_BY_API_EXCEPTION = (
    (exceptions.ValidationError, "VALIDATION_ERROR"),
    (exceptions.ParseError, "VALIDATION_ERROR"),
    (exceptions.NotAuthenticated, "NOT_AUTHENTICATED"),
    (exceptions.AuthenticationFailed, "NOT_AUTHENTICATED"),
    (exceptions.PermissionDenied, "PERMISSION_DENIED"),
    (exceptions.NotFound, "NOT_FOUND"),
    (exceptions.MethodNotAllowed, "METHOD_NOT_ALLOWED"),
    (exceptions.UnsupportedMediaType, "UNSUPPORTED_MEDIA_TYPE"),
    (exceptions.Throttled, "RATE_LIMITED"),
)


def status_for_code(code: Optional[str]) -> int:
    """HTTP status of a failed envelope's error code; ``*_NOT_FOUND`` is 404."""
    if code and code.endswith("NOT_FOUND"):
        return status.HTTP_404_NOT_FOUND
    return STATUS_BY_CODE.get(code or "", status.HTTP_400_BAD_REQUEST)


def error_body(message: str, code: str, **extra: Any) -> Dict[str, Any]:
    body: Dict[str, Any] = {"success": False, "error": message, "code": code}
    body.update(extra)
    return body


def custom_exception_handler(exc: Exception, context: Dict[str, Any]) -> Response:
    """Render any exception raised inside a DRF view as an error envelope."""
    request = context.get("request")
    trace_id = getattr(request, "trace_id", None) or getattr(request, "correlation_id", None)

    if isinstance(exc, DomainException):
        logger.warning("Domain exception: %s - %s", exc.code, exc.message, extra={"trace_id": trace_id})
        response = Response(error_body(exc.message, exc.code), status=status_for_code(exc.code))
    elif isinstance(exc, exceptions.APIException):
        response = _api_exception_response(exc)
    elif isinstance(exc, Http404):
        response = Response(error_body("Resource not found", "NOT_FOUND"), status=status.HTTP_404_NOT_FOUND)
    else:
        logger.error("Unexpected error: %s", exc, extra={"trace_id": trace_id}, exc_info=True)
        errors_total.labels(error_type=type(exc).__name__, endpoint=getattr(request, "path", "unknown")).inc()
        response = Response(
            error_body("An internal error occurred", "INTERNAL_ERROR"),
            status=status.HTTP_500_INTERNAL_SERVER_ERROR,
        )

    if trace_id:
        response["X-Trace-ID"] = trace_id
    return response


def _api_exception_response(exc: exceptions.APIException) -> Response:
    code = next(
        (code for exc_type, code in CODE_BY_API_EXCEPTION if isinstance(exc, exc_type)),
        "API_ERROR",
    )
    if isinstance(exc, exceptions.ValidationError):
        body = error_body(_first_message(exc.detail), code, details=exc.detail)
    else:
        body = error_body(str(exc.detail), code)

    response = Response(body, status=exc.status_code)
    wait = getattr(exc, "wait", None)
    if wait:
        response["Retry-After"] = str(int(wait))
    return response


def _first_message(detail: Any) -> str:
    """First error message of a nested serializer error structure, prefixed by its field."""
    if isinstance(detail, dict):
        for field, errors in detail.items():
            message = _first_message(errors)
            return message if field == "non_field_errors" else f"{field}: {message}"
    if isinstance(detail, list) and detail:
        return _first_message(detail[0])
    return str(detail) or "Invalid request"
