"""
Operational endpoints: liveness, readiness and Prometheus scrape.

They live outside ``/api/`` so the session middleware lets them through.
"""

import logging
from typing import Callable, Dict

from django.conf import settings
from django.core.cache import cache
from django.db import DatabaseError, connection
from django.http import HttpResponse, JsonResponse
from django.views import View
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest
from redis.exceptions import RedisError

logger = logging.getLogger(__name__)

SERVICE_NAME = "softcontrol-crm"


def check_database() -> bool:
    try:
        with connection.cursor() as cursor:
            cursor.execute("SELECT 1")
    except DatabaseError as e:
        logger.warning("Database health check failed: %s", e)
        return False
    return True


def check_cache() -> bool:
    try:
        cache.set("health_check", "ok", 10)
        return cache.get("health_check") == "ok"
    except (RedisError, OSError) as e:
        logger.warning("Cache health check failed: %s", e)
        return False


def check_stripe() -> bool:
    """Stripe keys are configured; the API itself is not called."""
    return bool(settings.STRIPE_SECRET_KEY and settings.STRIPE_WEBHOOK_SECRET)


READINESS_CHECKS: Dict[str, Callable[[], bool]] = {
    "database": check_database,
    "cache": check_cache,
    "stripe": check_stripe,
}


class HealthView(View):
    """Liveness: the process answers."""

    def get(self, _request):
        return JsonResponse({"status": "healthy", "service": SERVICE_NAME})


class ReadyView(View):
    """Readiness: database and cache reachable, Stripe configured."""

    def get(self, _request):
        checks = {name: check() for name, check in READINESS_CHECKS.items()}
        ready = all(checks.values())
        if not ready:
            logger.warning("Readiness check failed: %s", checks)
        return JsonResponse(
            {"status": "ready" if ready else "not_ready", "service": SERVICE_NAME, "checks": checks},
            status=200 if ready else 503,
        )


class MetricsView(View):
    def get(self, _request):
        return HttpResponse(generate_latest(), content_type=CONTENT_TYPE_LATEST)
