"""
Envelope to HTTP response conversion.
"""

from typing import Any, Dict, Optional, Type

from rest_framework import serializers, status
from rest_framework.response import Response

from api.exceptions import status_for_code
from core.application.result import ServiceResult
from core.instrumentation import Status, StatusCode


def envelope_response(
    result: ServiceResult,
    serializer_class: Optional[Type[serializers.Serializer]] = None,
    many: bool = False,
    success_status: int = status.HTTP_200_OK,
    span=None,
) -> Response:
    """
    Build the JSON response for a service envelope.

    Successful results answer ``{"success": true, "data": ..., "message"?,
    "pagination"?}``; failed ones ``{"success": false, "error", "code"}``
    with the status of their error code.
    """
    if not result.success:
        if span is not None:
            span.set_attribute("error", result.error_code or "error")
            span.set_status(Status(StatusCode.ERROR, result.error or ""))
        return Response(
            {"success": False, "error": result.error, "code": result.error_code},
            status=status_for_code(result.error_code),
        )

    data: Any = result.data
    if serializer_class is not None and data is not None:
        data = serializer_class(data, many=many).data
    body: Dict[str, Any] = {"success": True, "data": data}
    if result.message:
        body["message"] = result.message
    if result.pagination is not None:
        body["pagination"] = {
            "total": result.pagination.total,
            "page": result.pagination.page,
            "per_page": result.pagination.per_page,
            "total_pages": result.pagination.total_pages,
        }
    body.update(result.extra)
    return Response(body, status=success_status)


def actor_of(request) -> Optional[str]:
    """Audit actor for the signed-in user."""
    user = getattr(request, "user", None)
    if user is None or not user.is_authenticated:
        return None
    return user.get_username()


def user_id_of(request) -> Optional[int]:
    user = getattr(request, "user", None)
    if user is None or not user.is_authenticated:
        return None
    return user.pk
