"""
Prometheus request metrics.

Requests are labelled by their URL pattern (``api/clients/<uuid:client_id>``)
rather than the raw path so ids do not explode label cardinality.
"""

import time
from typing import Callable

from django.http import HttpRequest, HttpResponse

from core.metrics import http_request_duration_seconds, http_requests_total

UNMATCHED = "unmatched"


def endpoint_of(request: HttpRequest) -> str:
    match = getattr(request, "resolver_match", None)
    if match is None or not match.route:
        return UNMATCHED
    return "/" + match.route


class MetricsMiddleware:
    """Counts requests and observes their duration; the scrape endpoint itself is skipped."""

    def __init__(self, get_response: Callable):
        self.get_response = get_response

    def __call__(self, request: HttpRequest) -> HttpResponse:
        if request.path == "/metrics":
            return self.get_response(request)

        started = time.monotonic()
        status_code = 500
        try:
            response = self.get_response(request)
            status_code = response.status_code
            return response
        finally:
            endpoint = endpoint_of(request)
            http_requests_total.labels(method=request.method, endpoint=endpoint, status_code=status_code).inc()
            http_request_duration_seconds.labels(method=request.method, endpoint=endpoint).observe(
                time.monotonic() - started
            )
