"""
Tracing middleware for OpenTelemetry.

Opens a span per request carrying the route, the user and the outcome.
Request bodies are never attached: they hold passwords and payment data.
"""

import time
from typing import Callable

from django.http import HttpRequest, HttpResponse

from core.instrumentation import Status, StatusCode, get_tracer

tracer = get_tracer(__name__)

SENSITIVE_QUERY_KEYS = {"password", "secret", "token", "key", "session_id"}


class TracingMiddleware:
    """
    Middleware to add distributed tracing to requests.

    Stores the trace id on the request so error responses can echo it.
    """

    def __init__(self, get_response: Callable):
        """Initialize middleware."""
        self.get_response = get_response

    def __call__(self, request: HttpRequest) -> HttpResponse:
        """Process request with tracing."""
        span_name = f"{request.method} {request.path}"
        with tracer.start_as_current_span(span_name) as span:
            self._set_request_attributes(span, request)

            span_context = span.get_span_context()
            if span_context.is_valid:
                request.trace_id = format(span_context.trace_id, "032x")  # type: ignore

            start_time = time.time()
            try:
                response = self.get_response(request)
            except Exception as e:
                span.set_attribute("http.duration_ms", round((time.time() - start_time) * 1000, 2))
                span.record_exception(e)
                span.set_status(Status(StatusCode.ERROR, f"{type(e).__name__}: {e}"))
                raise

            self._set_response_attributes(span, response, time.time() - start_time)
            return response

    def _set_request_attributes(self, span, request: HttpRequest):
        """Set attributes from the request."""
        span.set_attribute("http.method", request.method)
        span.set_attribute("http.route", request.path)
        span.set_attribute("http.scheme", request.scheme)
        span.set_attribute("http.user_agent", request.META.get("HTTP_USER_AGENT", ""))
        span.set_attribute("http.remote_addr", request.META.get("REMOTE_ADDR", ""))
        if request.content_type:
            span.set_attribute("http.request.content_type", request.content_type)
        if "Stripe-Signature" in request.headers:
            span.set_attribute("http.request.has_stripe_signature", True)

        for key, value in list(request.GET.items())[:10]:
            if key.lower() not in SENSITIVE_QUERY_KEYS:
                span.set_attribute(f"http.request.query.{key}", str(value)[:200])

        user = getattr(request, "user", None)
        if user is not None and user.is_authenticated:
            span.set_attribute("user.id", str(user.pk))

    def _set_response_attributes(self, span, response, duration: float):
        """Set attributes from the response."""
        span.set_attribute("http.status_code", response.status_code)
        span.set_attribute("http.duration_ms", round(duration * 1000, 2))
        if response.status_code >= 400:
            span.set_status(Status(StatusCode.ERROR, f"HTTP {response.status_code}"))
        else:
            span.set_status(Status(StatusCode.OK))
