"""
Login throttling.

Sign-in attempts are counted per client address in fixed one minute
windows. Over the limit, form posts are sent back to the login page with
``?error=rate_limited`` and JSON posts get a 429 envelope.
"""

import hashlib
import logging
import time
from typing import Callable

from django.conf import settings
from django.core.cache import cache
from django.http import HttpRequest, HttpResponse, HttpResponseRedirect, JsonResponse

from core.metrics import errors_total

logger = logging.getLogger(__name__)

LOGIN_PATH = "/api/auth/login"
WINDOW_SECONDS = 60


def client_address(request: HttpRequest) -> str:
    forwarded = request.META.get("HTTP_X_FORWARDED_FOR", "")
    if forwarded:
        return forwarded.split(",")[0].strip()
    return request.META.get("REMOTE_ADDR", "unknown")


class LoginRateLimitMiddleware:
    """Caps POSTs to the login endpoint at ``CRM_LOGIN_RATE_LIMIT`` per minute per address."""

    def __init__(self, get_response: Callable):
        self.get_response = get_response
        self.limit = settings.CRM_LOGIN_RATE_LIMIT

    def __call__(self, request: HttpRequest) -> HttpResponse:
        if request.method != "POST" or request.path.rstrip("/") != LOGIN_PATH:
            return self.get_response(request)

        address = client_address(request)
        window = int(time.time() // WINDOW_SECONDS)
        reset_at = (window + 1) * WINDOW_SECONDS
        attempts = self._count_attempt(address, window)

        if attempts > self.limit:
            logger.warning("Login attempts from %s over the limit", address)
            errors_total.labels(error_type="rate_limit_exceeded", endpoint=request.path).inc()
            response = self._rejected(request)
            response["Retry-After"] = str(max(1, reset_at - int(time.time())))
        else:
            response = self.get_response(request)

        response["X-RateLimit-Limit"] = str(self.limit)
        response["X-RateLimit-Remaining"] = str(max(0, self.limit - attempts))
        response["X-RateLimit-Reset"] = str(reset_at)
        return response

    def _count_attempt(self, address: str, window: int) -> int:
        """Record one attempt and return the attempts made in this window."""
        digest = hashlib.sha256(address.encode()).hexdigest()[:16]
        key = f"rate_limit:login:{digest}:{window}"
        if cache.add(key, 1, timeout=WINDOW_SECONDS):
            return 1
        try:
            return cache.incr(key)
        except ValueError:
            # Window expired between add and incr
            cache.set(key, 1, timeout=WINDOW_SECONDS)
            return 1

    def _rejected(self, request: HttpRequest) -> HttpResponse:
        if request.content_type == "application/json":
            return JsonResponse(
                {
                    "success": False,
                    "error": "Too many login attempts. Please try again later.",
                    "code": "RATE_LIMITED",
                },
                status=429,
            )
        return HttpResponseRedirect(f"{settings.CRM_LOGIN_URL}?error=rate_limited")
