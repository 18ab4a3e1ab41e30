"""
Opportunity service.

Deals, their movement through pipeline stages, closing as won or lost and
the metric and board views built on top.
"""

import logging
import uuid
from typing import Any, Dict, List, Optional

from django.utils import timezone

from core.application.parsing import parse_date, parse_enum, parse_uuid
from core.application.result import ServiceResult, service_operation, validating
from core.domain.events import EventBus
from core.domain.exceptions import (
    NotAuthenticatedError,
    OpportunityNotFoundError,
    PipelineNotFoundError,
    ValidationError,
)
from core.domain.value_objects import OpportunityStatus
from opportunities.domain.events import OpportunityClosed
from opportunities.domain.opportunity import (
    Opportunity,
    OpportunityDetail,
    OpportunityFilters,
    OpportunityMetrics,
    StageColumn,
)
from opportunities.domain.pipeline import Pipeline, PipelineStage
from opportunities.domain.services import OpportunityMetricsCalculator, PipelineBoardBuilder
from opportunities.ports.opportunity_repository import OpportunityRepository
from opportunities.ports.pipeline_repository import PipelineRepository

logger = logging.getLogger(__name__)


class OpportunityService:
    """Deals and pipelines."""

    def __init__(
        self,
        opportunity_repository: OpportunityRepository,
        pipeline_repository: PipelineRepository,
        event_bus: EventBus,
    ):
        self.opportunity_repository = opportunity_repository
        self.pipeline_repository = pipeline_repository
        self.event_bus = event_bus

    async def _get_or_raise(self, opportunity_id: uuid.UUID) -> Opportunity:
        opportunity = await self.opportunity_repository.find_by_id(opportunity_id)
        if opportunity is None:
            raise OpportunityNotFoundError(f"Opportunity {opportunity_id} not found")
        return opportunity

    async def _stage_or_raise(self, stage_id: uuid.UUID) -> PipelineStage:
        stage = await self.pipeline_repository.find_stage(stage_id)
        if stage is None:
            raise PipelineNotFoundError(f"Pipeline stage {stage_id} not found")
        return stage

    async def _close(self, opportunity: Opportunity, actor: Optional[str]) -> Opportunity:
        saved = await self.opportunity_repository.save(opportunity)
        await self.event_bus.publish(
            OpportunityClosed(
                opportunity_id=saved.id,
                outcome=saved.status.value,
                value=saved.value,
                lost_reason=saved.lost_reason,
                actor=actor,
            )
        )
        logger.info("Opportunity %s closed as %s", saved.id, saved.status.value)
        return saved

    @service_operation("list opportunities", empty=list)
    async def get_opportunities(
        self, filters: Optional[Dict[str, Any]] = None
    ) -> ServiceResult[List[OpportunityDetail]]:
        """
        Deals with contact and stage summaries, newest first.

        Args:
            filters: Optional ``status``, ``stage_id``, ``pipeline_id``,
                ``assigned_to`` and ``contact_id``
        """
        filters = filters or {}
        status = filters.get("status")
        query = OpportunityFilters(
            status=parse_enum(OpportunityStatus, status, "opportunity status") if status else None,
            stage_id=parse_uuid(filters.get("stage_id"), "stage_id"),
            pipeline_id=parse_uuid(filters.get("pipeline_id"), "pipeline_id"),
            assigned_to=filters.get("assigned_to") or None,
            contact_id=parse_uuid(filters.get("contact_id"), "contact_id"),
        )
        return ServiceResult.ok(await self.opportunity_repository.find(query))

    @service_operation("get opportunity")
    async def get_opportunity_by_id(self, opportunity_id: uuid.UUID) -> ServiceResult[OpportunityDetail]:
        detail = await self.opportunity_repository.find_detail_by_id(opportunity_id)
        if detail is None:
            raise OpportunityNotFoundError(f"Opportunity {opportunity_id} not found")
        return ServiceResult.ok(detail)

    @service_operation("create opportunity")
    async def create_opportunity(self, data: Dict[str, Any], user_id: Optional[int]) -> ServiceResult[Opportunity]:
        """
        Create an open deal.

        When only ``pipeline_id`` is given the deal starts in the pipeline's
        first stage; a ``stage_id`` alone implies its pipeline.
        """
        if user_id is None:
            raise NotAuthenticatedError()
        if not data.get("title"):
            raise ValidationError("Opportunity title is required")

        pipeline_id = parse_uuid(data.get("pipeline_id"), "pipeline_id")
        stage_id = parse_uuid(data.get("stage_id"), "stage_id")
        if stage_id is not None:
            stage = await self._stage_or_raise(stage_id)
            if pipeline_id is not None and stage.pipeline_id != pipeline_id:
                raise ValidationError("Stage does not belong to the pipeline")
            pipeline_id = stage.pipeline_id
        elif pipeline_id is not None:
            pipeline = await self.pipeline_repository.find_by_id(pipeline_id)
            if pipeline is None:
                raise PipelineNotFoundError(f"Pipeline {pipeline_id} not found")
            stage_id = pipeline.first_stage.id if pipeline.first_stage else None

        with validating():
            opportunity = Opportunity.create(
                title=data["title"],
                value=data.get("value") or 0,
                description=data.get("description"),
                contact_id=parse_uuid(data.get("contact_id"), "contact_id"),
                pipeline_id=pipeline_id,
                stage_id=stage_id,
                expected_close_date=parse_date(data.get("expected_close_date")),
                assigned_to=data.get("assigned_to") or user_id,
                user_id=user_id,
            )
        saved = await self.opportunity_repository.save(opportunity)
        logger.info("Opportunity %s created by user %s", saved.id, user_id)
        return ServiceResult.ok(saved, message="Opportunity created")

    @service_operation("update opportunity")
    async def update_opportunity(self, opportunity_id: uuid.UUID, data: Dict[str, Any]) -> ServiceResult[Opportunity]:
        opportunity = await self._get_or_raise(opportunity_id)
        changes: Dict[str, Any] = {}
        for name in ("title", "description", "value", "assigned_to"):
            if name in data:
                changes[name] = data[name]
        if "contact_id" in data:
            changes["contact_id"] = parse_uuid(data["contact_id"], "contact_id")
        if "expected_close_date" in data:
            changes["expected_close_date"] = parse_date(data["expected_close_date"])
        if data.get("stage_id"):
            stage = await self._stage_or_raise(parse_uuid(data["stage_id"], "stage_id"))
            changes["stage_id"] = stage.id
            changes["pipeline_id"] = stage.pipeline_id
        with validating():
            updated = opportunity.with_changes(**changes)
        saved = await self.opportunity_repository.save(updated)
        return ServiceResult.ok(saved, message="Opportunity updated")

    @service_operation("move opportunity")
    async def move_opportunity_to_stage(self, opportunity_id: uuid.UUID, stage_id) -> ServiceResult[Opportunity]:
        opportunity = await self._get_or_raise(opportunity_id)
        stage = await self._stage_or_raise(parse_uuid(stage_id, "stage_id"))
        saved = await self.opportunity_repository.save(opportunity.move_to(stage.id, stage.pipeline_id))
        return ServiceResult.ok(saved, message="Opportunity moved to new stage")

    @service_operation("mark opportunity as won")
    async def mark_opportunity_as_won(
        self, opportunity_id: uuid.UUID, actor: Optional[str] = None
    ) -> ServiceResult[Opportunity]:
        opportunity = await self._get_or_raise(opportunity_id)
        saved = await self._close(opportunity.mark_won(timezone.localdate()), actor)
        return ServiceResult.ok(saved, message="Opportunity marked as won")

    @service_operation("mark opportunity as lost")
    async def mark_opportunity_as_lost(
        self, opportunity_id: uuid.UUID, reason: Optional[str] = None, actor: Optional[str] = None
    ) -> ServiceResult[Opportunity]:
        opportunity = await self._get_or_raise(opportunity_id)
        saved = await self._close(opportunity.mark_lost(timezone.localdate(), reason), actor)
        return ServiceResult.ok(saved, message="Opportunity marked as lost")

    @service_operation("delete opportunity")
    async def delete_opportunity(self, opportunity_id: uuid.UUID) -> ServiceResult[None]:
        if not await self.opportunity_repository.delete(opportunity_id):
            raise OpportunityNotFoundError(f"Opportunity {opportunity_id} not found")
        return ServiceResult.ok(None, message="Opportunity deleted")

    @service_operation("opportunity metrics")
    async def get_opportunity_metrics(self, user_id: Optional[int]) -> ServiceResult[OpportunityMetrics]:
        """Totals, counts, win rate and average deal size of the user's deals."""
        if user_id is None:
            raise NotAuthenticatedError()
        values = await self.opportunity_repository.values_by_status(user_id)
        return ServiceResult.ok(OpportunityMetricsCalculator.calculate(values))

    @service_operation("opportunities by stage", empty=list)
    async def get_opportunities_by_stage(self, pipeline_id) -> ServiceResult[List[StageColumn]]:
        """Board of a pipeline: each stage in order with its open deals and their total value."""
        pipeline = await self.pipeline_repository.find_by_id(parse_uuid(pipeline_id, "pipeline_id"))
        if pipeline is None:
            raise PipelineNotFoundError(f"Pipeline {pipeline_id} not found")
        open_deals = await self.opportunity_repository.find(
            OpportunityFilters(pipeline_id=pipeline.id, status=OpportunityStatus.OPEN)
        )
        return ServiceResult.ok(PipelineBoardBuilder.build(pipeline.stages, open_deals))

    @service_operation("list pipelines", empty=list)
    async def get_pipelines(self) -> ServiceResult[List[Pipeline]]:
        return ServiceResult.ok(await self.pipeline_repository.list_all())

    @service_operation("create pipeline")
    async def create_pipeline(self, data: Dict[str, Any], user_id: Optional[int]) -> ServiceResult[Pipeline]:
        """
        Create a pipeline with its stages.

        Args:
            data: ``name``, optional ``description`` and ``stages`` (list of
                dicts with ``name``, ``color``, ``probability``, ``order_index``)
            user_id: Owner of the pipeline
        """
        stages = data.get("stages") or []
        if not isinstance(stages, list) or not all(isinstance(stage, dict) for stage in stages):
            raise ValidationError("Stages must be a list of objects")
        with validating():
            pipeline = Pipeline.create(
                name=data.get("name"),
                stages=stages,
                description=data.get("description"),
                user_id=user_id,
            )
        saved = await self.pipeline_repository.save(pipeline)
        logger.info("Pipeline %s created with %d stages", saved.id, len(saved.stages))
        return ServiceResult.ok(saved, message="Pipeline created")
