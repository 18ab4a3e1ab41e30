"""
Unit tests for opportunities, pipelines and their metrics.
"""
from datetime import date
from decimal import Decimal

import pytest

from core.domain.value_objects import OpportunityStatus
from opportunities.domain.opportunity import Opportunity, OpportunityDetail
from opportunities.domain.pipeline import Pipeline
from opportunities.domain.services import OpportunityMetricsCalculator, PipelineBoardBuilder


class TestOpportunity:
    """Tests for Opportunity entity."""

    def test_create_is_open(self):
        opportunity = Opportunity.create(title=" Renovación ", value="1500")

        assert opportunity.title == "Renovación"
        assert opportunity.value == Decimal("1500.00")
        assert opportunity.is_open is True

    def test_negative_value(self):
        with pytest.raises(ValueError):
            Opportunity.create(title="Deal", value=-1)

    def test_mark_won_stamps_close_date(self):
        won = Opportunity.create(title="Deal").mark_won(date(2024, 3, 1))

        assert won.status == OpportunityStatus.WON
        assert won.actual_close_date == date(2024, 3, 1)

    def test_mark_lost_keeps_reason(self):
        lost = Opportunity.create(title="Deal").mark_lost(date(2024, 3, 1), "Precio")

        assert lost.status == OpportunityStatus.LOST
        assert lost.lost_reason == "Precio"
        assert lost.is_open is False


class TestPipeline:
    def test_stages_are_ordered(self):
        pipeline = Pipeline.create(
            "Ventas",
            stages=[
                {"name": "Cierre", "order_index": 2, "probability": 90},
                {"name": "Contacto", "order_index": 0},
                {"name": "Propuesta", "order_index": 1, "probability": 50},
            ],
        )

        assert [stage.name for stage in pipeline.stages] == ["Contacto", "Propuesta", "Cierre"]
        assert pipeline.first_stage.name == "Contacto"
        assert all(stage.pipeline_id == pipeline.id for stage in pipeline.stages)

    def test_order_defaults_to_position(self):
        pipeline = Pipeline.create("Ventas", stages=[{"name": "A"}, {"name": "B"}])

        assert [stage.order_index for stage in pipeline.stages] == [0, 1]

    def test_probability_range(self):
        with pytest.raises(ValueError):
            Pipeline.create("Ventas", stages=[{"name": "A", "probability": 120}])


class TestOpportunityMetricsCalculator:
    """Tests for deal metrics."""

    def test_calculate(self):
        metrics = OpportunityMetricsCalculator.calculate(
            {
                OpportunityStatus.OPEN: [Decimal("100.00"), Decimal("200.00")],
                OpportunityStatus.WON: [Decimal("1000.00"), Decimal("500.00")],
                OpportunityStatus.LOST: [Decimal("300.00")],
            }
        )

        assert metrics.total_open_value == Decimal("300.00")
        assert metrics.total_won_value == Decimal("1500.00")
        assert metrics.won_count == 2
        assert metrics.lost_count == 1
        assert metrics.win_rate == Decimal("66.67")
        assert metrics.average_deal_size == Decimal("750.00")

    def test_no_closed_deals(self):
        metrics = OpportunityMetricsCalculator.calculate({OpportunityStatus.OPEN: [Decimal("10")]})

        assert metrics.win_rate == Decimal("0.00")
        assert metrics.average_deal_size == Decimal("0.00")


def test_board_groups_deals_by_stage():
    pipeline = Pipeline.create("Ventas", stages=[{"name": "Contacto"}, {"name": "Propuesta"}])
    first, second = pipeline.stages
    deals = [
        OpportunityDetail(Opportunity.create(title="A", value=100, stage_id=second.id)),
        OpportunityDetail(Opportunity.create(title="B", value=50, stage_id=second.id)),
    ]

    columns = PipelineBoardBuilder.build(pipeline.stages, deals)

    assert [column.stage.name for column in columns] == ["Contacto", "Propuesta"]
    assert columns[0].opportunities == []
    assert columns[0].total_value == Decimal("0.00")
    assert columns[1].total_value == Decimal("150.00")
