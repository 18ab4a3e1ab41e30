"""
Domain services for opportunities.

Metric and board computations that span several deals and belong to no
single entity.
"""
from decimal import ROUND_HALF_UP, Decimal
from typing import Dict, Iterable, List, Sequence

from core.domain.value_objects import OpportunityStatus
from opportunities.domain.opportunity import OpportunityDetail, OpportunityMetrics, StageColumn
from opportunities.domain.pipeline import PipelineStage

ZERO = Decimal("0.00")
TWO_PLACES = Decimal("0.01")


def _round(value: Decimal) -> Decimal:
    return value.quantize(TWO_PLACES, rounding=ROUND_HALF_UP)


class OpportunityMetricsCalculator:
    """
    Aggregates deal values by status.

    ``win_rate`` is ``won / (won + lost) * 100`` rounded to two decimals and
    ``average_deal_size`` is ``total_won / won_count``; both are zero when
    there is nothing to divide by.
    """

    @staticmethod
    def calculate(values_by_status: Dict[OpportunityStatus, Sequence[Decimal]]) -> OpportunityMetrics:
        open_values = list(values_by_status.get(OpportunityStatus.OPEN, ()))
        won_values = list(values_by_status.get(OpportunityStatus.WON, ()))
        lost_values = list(values_by_status.get(OpportunityStatus.LOST, ()))

        total_won = sum(won_values, ZERO)
        won_count = len(won_values)
        lost_count = len(lost_values)
        closed = won_count + lost_count

        win_rate = _round(Decimal(won_count) / Decimal(closed) * 100) if closed else ZERO
        average = _round(total_won / won_count) if won_count else ZERO

        return OpportunityMetrics(
            total_open_value=_round(sum(open_values, ZERO)),
            total_won_value=_round(total_won),
            total_lost_value=_round(sum(lost_values, ZERO)),
            open_count=len(open_values),
            won_count=won_count,
            lost_count=lost_count,
            win_rate=win_rate,
            average_deal_size=average,
        )


class PipelineBoardBuilder:
    """Groups open deals under the stages of a pipeline."""

    @staticmethod
    def build(stages: Iterable[PipelineStage], opportunities: Iterable[OpportunityDetail]) -> List[StageColumn]:
        by_stage: Dict = {}
        for detail in opportunities:
            by_stage.setdefault(detail.opportunity.stage_id, []).append(detail)

        columns = []
        for stage in sorted(stages, key=lambda item: item.order_index):
            deals = by_stage.get(stage.id, [])
            total = sum((detail.opportunity.value for detail in deals), ZERO)
            columns.append(StageColumn(stage=stage, opportunities=deals, total_value=_round(total)))
        return columns
