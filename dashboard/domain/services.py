"""
Sales chart bucketing.
"""
from datetime import date, timedelta
from decimal import Decimal
from typing import Dict, List, Tuple

from core.domain.value_objects import SalesInterval
from dashboard.domain.stats import SalesChart

DAILY = "daily"
MONTHLY = "monthly"


def shift_months(day: date, months: int) -> date:
    """First day of the month ``months`` away from ``day``'s month."""
    index = day.year * 12 + (day.month - 1) + months
    return date(index // 12, index % 12 + 1, 1)


class SalesChartBuilder:
    """Turns per-day payment totals into the buckets of an interval."""

    @staticmethod
    def date_range(interval: SalesInterval, today: date) -> Tuple[date, date]:
        """
        First and last day covered by ``interval`` ending ``today``.

        Daily intervals cover the last N days including today, monthly ones
        the last N calendar months including the current month.
        """
        if interval.is_daily:
            return today - timedelta(days=interval.size - 1), today
        return shift_months(today, -(interval.size - 1)), today

    @staticmethod
    def labels(interval: SalesInterval, today: date) -> List[str]:
        start, _ = SalesChartBuilder.date_range(interval, today)
        if interval.is_daily:
            return [(start + timedelta(days=offset)).isoformat() for offset in range(interval.size)]
        return [shift_months(start, offset).strftime("%Y-%m") for offset in range(interval.size)]

    @staticmethod
    def build(
        interval: SalesInterval,
        today: date,
        daily_totals: Dict[date, Tuple[Decimal, int]],
    ) -> SalesChart:
        labels = SalesChartBuilder.labels(interval, today)
        values = {label: Decimal("0") for label in labels}
        counts = {label: 0 for label in labels}
        for day, (amount, count) in daily_totals.items():
            label = day.isoformat() if interval.is_daily else day.strftime("%Y-%m")
            if label in values:
                values[label] += amount
                counts[label] += count
        return SalesChart(
            interval=interval.value,
            granularity=DAILY if interval.is_daily else MONTHLY,
            labels=labels,
            values=[values[label] for label in labels],
            counts=[counts[label] for label in labels],
        )
