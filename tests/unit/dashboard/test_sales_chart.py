"""
Unit tests for sales chart bucketing.
"""
from datetime import date
from decimal import Decimal

from core.domain.value_objects import SalesInterval
from dashboard.domain.services import SalesChartBuilder, shift_months


class TestShiftMonths:
    def test_back_over_year_boundary(self):
        assert shift_months(date(2024, 2, 29), -3) == date(2023, 11, 1)

    def test_forward(self):
        assert shift_months(date(2024, 11, 15), 2) == date(2025, 1, 1)


class TestSalesChartBuilder:
    """Tests for SalesChartBuilder."""

    def test_daily_range_includes_today(self):
        start, end = SalesChartBuilder.date_range(SalesInterval.LAST_7_DAYS, date(2024, 3, 5))

        assert start == date(2024, 2, 28)
        assert end == date(2024, 3, 5)

    def test_monthly_labels(self):
        labels = SalesChartBuilder.labels(SalesInterval.LAST_3_MONTHS, date(2024, 1, 20))

        assert labels == ["2023-11", "2023-12", "2024-01"]

    def test_daily_labels(self):
        labels = SalesChartBuilder.labels(SalesInterval.LAST_7_DAYS, date(2024, 3, 1))

        assert labels[0] == "2024-02-24"
        assert labels[-1] == "2024-03-01"
        assert len(labels) == 7

    def test_build_sums_days_into_months(self):
        chart = SalesChartBuilder.build(
            SalesInterval.LAST_3_MONTHS,
            date(2024, 3, 10),
            {
                date(2024, 1, 3): (Decimal("49.90"), 1),
                date(2024, 1, 20): (Decimal("499.00"), 1),
                date(2024, 3, 1): (Decimal("49.90"), 1),
                date(2023, 12, 31): (Decimal("10.00"), 1),
            },
        )

        assert chart.granularity == "monthly"
        assert chart.labels == ["2024-01", "2024-02", "2024-03"]
        assert chart.values == [Decimal("548.90"), Decimal("0"), Decimal("49.90")]
        assert chart.counts == [2, 0, 1]
        assert chart.total == Decimal("598.80")
        assert chart.count == 3

    def test_build_empty_daily_chart(self):
        chart = SalesChartBuilder.build(SalesInterval.LAST_30_DAYS, date(2024, 3, 10), {})

        assert chart.granularity == "daily"
        assert len(chart.values) == 30
        assert chart.total == Decimal("0")
