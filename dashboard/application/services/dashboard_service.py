"""
Dashboard service.

Counters and the sales chart are cached in the ``dashboard`` cache
namespace; writes to clients, products and licenses and new payments
bump the namespace so the next read recomputes them.
"""

import logging
from dataclasses import asdict
from datetime import date
from typing import Optional

from django.conf import settings
from django.utils import timezone

from billing.ports.payment_repository import PaymentRepository
from clients.ports.client_repository import ClientRepository
from core.application.parsing import parse_enum
from core.application.result import ServiceResult, service_operation
from core.domain.exceptions import ValidationError
from core.domain.value_objects import LicenseStatus, SalesInterval
from core.infrastructure.cache import CachePort
from core.metrics import cache_hits_total, cache_misses_total
from dashboard.domain.services import SalesChartBuilder
from dashboard.domain.stats import DashboardStats, SalesChart
from licenses.ports.license_repository import LicenseRepository
from products.ports.product_repository import ProductRepository

logger = logging.getLogger(__name__)

CACHE_NAMESPACE = "dashboard"
DEFAULT_SALES_INTERVAL = SalesInterval.LAST_6_MONTHS.value


class DashboardService:
    """Dashboard counters and sales chart."""

    def __init__(
        self,
        client_repository: ClientRepository,
        product_repository: ProductRepository,
        license_repository: LicenseRepository,
        payment_repository: PaymentRepository,
        cache: CachePort,
        cache_ttl: Optional[int] = None,
    ):
        self.client_repository = client_repository
        self.product_repository = product_repository
        self.license_repository = license_repository
        self.payment_repository = payment_repository
        self.cache = cache
        self.cache_ttl = cache_ttl if cache_ttl is not None else settings.CRM_DASHBOARD_CACHE_TTL

    async def _cached(self, name: str, today: date):
        key = await self.cache.namespaced_key(CACHE_NAMESPACE, f"{name}:{today.isoformat()}")
        cached = await self.cache.get(key)
        if cached is not None:
            cache_hits_total.labels(cache_key=f"{CACHE_NAMESPACE}:{name}").inc()
        else:
            cache_misses_total.labels(cache_key=f"{CACHE_NAMESPACE}:{name}").inc()
        return key, cached

    @service_operation("dashboard stats")
    async def get_stats(self, today: Optional[date] = None) -> ServiceResult[DashboardStats]:
        """Client, product and license counters; ``expired`` means end date before today."""
        today = today or timezone.localdate()
        key, cached = await self._cached("stats", today)
        if cached is not None:
            return ServiceResult.ok(DashboardStats(**cached))

        by_status = await self.license_repository.count_by_status()
        stats = DashboardStats(
            total_clients=await self.client_repository.count(),
            total_products=await self.product_repository.count(),
            total_licenses=sum(by_status.values()),
            active_licenses=by_status.get(LicenseStatus.ACTIVE.value, 0),
            inactive_licenses=by_status.get(LicenseStatus.INACTIVE.value, 0),
            pending_payment_licenses=by_status.get(LicenseStatus.PENDING_PAYMENT.value, 0),
            expired_licenses=await self.license_repository.count_expired(today),
        )
        await self.cache.set(key, asdict(stats), timeout=self.cache_ttl)
        return ServiceResult.ok(stats)

    @service_operation("sales data")
    async def get_sales_data(
        self, interval: Optional[str] = None, today: Optional[date] = None
    ) -> ServiceResult[SalesChart]:
        """
        Succeeded payment totals bucketed over ``interval``.

        Args:
            interval: One of ``7d``, ``30d``, ``3m``, ``6m``, ``12m`` (default ``6m``)
            today: Last day of the chart (defaults to the current local date)
        """
        valid = ", ".join(choice.value for choice in SalesInterval)
        try:
            sales_interval = parse_enum(SalesInterval, interval or DEFAULT_SALES_INTERVAL, "interval")
        except ValidationError as exc:
            raise ValidationError(f"Invalid interval: {interval}. Valid intervals: {valid}") from exc

        today = today or timezone.localdate()
        key, cached = await self._cached(f"sales:{sales_interval.value}", today)
        if cached is not None:
            return ServiceResult.ok(SalesChart(**cached))

        start, end = SalesChartBuilder.date_range(sales_interval, today)
        totals = await self.payment_repository.daily_totals(start, end)
        chart = SalesChartBuilder.build(sales_interval, today, totals)
        await self.cache.set(key, asdict(chart), timeout=self.cache_ttl)
        logger.debug("Sales chart %s computed from %d days with payments", sales_interval.value, len(totals))
        return ServiceResult.ok(chart)
