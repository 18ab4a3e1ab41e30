"""
Request logging middleware.

Every request gets a correlation id (taken from ``X-Correlation-ID`` when
the caller sends one) and one structured log line when it finishes. The
OpenTelemetry trace id of the request span is attached when tracing is on.
"""

import logging
import time
import uuid
from typing import Callable, Dict, Optional

from django.http import HttpRequest, HttpResponse

from core.instrumentation import current_trace_id

logger = logging.getLogger(__name__)

QUIET_PATHS = ("/health", "/metrics")


def outcome_of(status_code: int) -> str:
    if status_code >= 500:
        return "server_error"
    if status_code >= 400:
        return "client_error"
    return "success"


class ObservabilityMiddleware:
    """
    Correlation ids, request duration and structured access logs.

    Health checks and metric scrapes are served without a log line; they
    still get the response headers.
    """

    def __init__(self, get_response: Callable):
        self.get_response = get_response

    def __call__(self, request: HttpRequest) -> HttpResponse:
        correlation_id = request.headers.get("X-Correlation-ID") or str(uuid.uuid4())
        request.correlation_id = correlation_id  # type: ignore
        quiet = request.path.startswith(QUIET_PATHS)
        started = time.monotonic()

        try:
            response = self.get_response(request)
        except Exception as exc:
            logger.error(
                "%s %s raised %s",
                request.method,
                request.path,
                type(exc).__name__,
                extra=self._context(request, correlation_id, started, error=str(exc)),
                exc_info=True,
            )
            raise

        duration = time.monotonic() - started
        outcome = outcome_of(response.status_code)
        trace_id = current_trace_id()
        if not quiet:
            extra = self._context(request, correlation_id, started, status_code=response.status_code)
            extra["request_status"] = outcome
            if response.status_code >= 500:
                level = logging.ERROR
            elif response.status_code >= 400:
                level = logging.WARNING
            else:
                level = logging.INFO
            logger.log(level, "%s %s -> %s", request.method, request.path, response.status_code, extra=extra)

        response["X-Correlation-ID"] = correlation_id
        response["X-Request-Status"] = outcome
        response["X-Request-Duration"] = f"{duration:.3f}"
        if trace_id:
            response["X-Trace-ID"] = trace_id
        return response

    def _context(
        self,
        request: HttpRequest,
        correlation_id: str,
        started: float,
        status_code: Optional[int] = None,
        error: Optional[str] = None,
    ) -> Dict[str, object]:
        """Fields shared by every log line of the request."""
        context: Dict[str, object] = {
            "correlation_id": correlation_id,
            "method": request.method,
            "path": request.path,
            "remote_addr": request.META.get("REMOTE_ADDR"),
            "duration_ms": round((time.monotonic() - started) * 1000, 2),
        }
        if status_code is not None:
            context["status_code"] = status_code
        if error is not None:
            context["error"] = error
        trace_id = current_trace_id()
        if trace_id:
            context["trace_id"] = trace_id

        user = getattr(request, "user", None)
        if user is not None and user.is_authenticated:
            context["user_id"] = str(user.pk)
            profile = getattr(user, "profile", None)
            if profile is not None:
                context["user_role"] = profile.role
        return context
