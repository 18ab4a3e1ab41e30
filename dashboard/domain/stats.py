"""
Dashboard read models.
"""
from dataclasses import dataclass, field
from decimal import Decimal
from typing import List


@dataclass(frozen=True)
class DashboardStats:
    """Headline counters of the dashboard."""

    total_clients: int
    total_products: int
    total_licenses: int
    active_licenses: int
    inactive_licenses: int
    pending_payment_licenses: int
    expired_licenses: int


@dataclass(frozen=True)
class SalesChart:
    """
    Sales totals per bucket.

    ``labels``, ``values`` and ``counts`` are parallel lists, oldest bucket
    first. Labels are ``YYYY-MM-DD`` for daily charts and ``YYYY-MM`` for
    monthly ones.
    """

    interval: str
    granularity: str
    labels: List[str] = field(default_factory=list)
    values: List[Decimal] = field(default_factory=list)
    counts: List[int] = field(default_factory=list)

    @property
    def total(self) -> Decimal:
        return sum(self.values, Decimal("0"))

    @property
    def count(self) -> int:
        return sum(self.counts)
