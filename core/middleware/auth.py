"""
Session authentication middleware.

Every path except the public ones needs a logged-in session. Page requests
without a session are redirected to the login page; API requests get a
401 JSON body instead.
"""

import logging
from typing import Optional

from django.conf import settings
from django.http import HttpRequest, HttpResponse, HttpResponseRedirect, JsonResponse
from django.utils.deprecation import MiddlewareMixin

logger = logging.getLogger(__name__)

DEFAULT_PUBLIC_PATHS = [
    "/auth/login",
    "/api/auth/login",
    "/api/auth/logout",
    "/api/stripe/webhook",
]

DEFAULT_PUBLIC_PREFIXES = [
    "/admin/",
    "/health",
    "/ready",
    "/api/docs/",
    "/metrics",
    "/api/schema/",
    "/static/",
    "/media/",
]


class SessionAuthenticationMiddleware(MiddlewareMixin):
    """
    Middleware enforcing a session on private paths.

    Must run after ``django.contrib.auth.middleware.AuthenticationMiddleware``
    so that ``request.user`` is populated.
    """

    def process_request(self, request: HttpRequest) -> Optional[HttpResponse]:
        """
        Process request and check the session.

        Args:
            request: HTTP request

        Returns:
            Redirect or 401 response when unauthenticated, None otherwise
        """
        if self._should_skip_auth(request.path):
            return None

        user = getattr(request, "user", None)
        if user is not None and user.is_authenticated:
            return None

        login_url = getattr(settings, "CRM_LOGIN_URL", "/auth/login")
        if request.path.startswith("/api/"):
            logger.info("Rejected unauthenticated API request to %s", request.path)
            return JsonResponse(
                {"success": False, "error": "Not authenticated"},
                status=401,
            )

        return HttpResponseRedirect(login_url)

    def _should_skip_auth(self, path: str) -> bool:
        """
        Check if authentication should be skipped for this path.

        Args:
            path: Request path

        Returns:
            True if auth should be skipped
        """
        public_paths = getattr(settings, "CRM_PUBLIC_PATHS", DEFAULT_PUBLIC_PATHS)
        normalized = path.rstrip("/") or "/"
        if normalized in public_paths:
            return True
        return any(path.startswith(prefix) for prefix in DEFAULT_PUBLIC_PREFIXES)
