"""
Django implementation of OpportunityRepository port.
"""
import uuid
from decimal import Decimal
from typing import Dict, List, Optional

from asgiref.sync import sync_to_async

from contacts.domain.contact import ContactSummary
from core.domain.value_objects import OpportunityStatus
from opportunities.domain.opportunity import (
    Opportunity,
    OpportunityDetail,
    OpportunityFilters,
    StageSummary,
)
from opportunities.infrastructure.models import Opportunity as OpportunityModel
from opportunities.ports.opportunity_repository import OpportunityRepository


class DjangoOpportunityRepository(OpportunityRepository):
    """
    Django ORM implementation of OpportunityRepository.
    """

    def _to_domain(self, model: OpportunityModel) -> Opportunity:
        """
        Convert Django model to domain entity.

        Args:
            model: Django Opportunity model

        Returns:
            Opportunity domain entity
        """
        return Opportunity(
            id=model.id,
            title=model.title,
            description=model.description,
            value=model.value,
            contact_id=model.contact_id,
            pipeline_id=model.pipeline_id,
            stage_id=model.stage_id,
            status=OpportunityStatus(model.status),
            expected_close_date=model.expected_close_date,
            actual_close_date=model.actual_close_date,
            lost_reason=model.lost_reason,
            assigned_to=model.assigned_to_id,
            user_id=model.user_id,
            created_at=model.created_at,
            updated_at=model.updated_at,
        )

    def _to_detail(self, model: OpportunityModel) -> OpportunityDetail:
        contact = None
        if model.contact is not None:
            contact = ContactSummary(
                id=model.contact.id,
                first_name=model.contact.first_name,
                last_name=model.contact.last_name,
                email=model.contact.email,
                company_name=model.contact.company_name,
            )
        stage = None
        if model.stage is not None:
            stage = StageSummary(
                id=model.stage.id,
                name=model.stage.name,
                color=model.stage.color,
                probability=model.stage.probability,
            )
        return OpportunityDetail(opportunity=self._to_domain(model), contact=contact, stage=stage)

    def _joined(self):
        return OpportunityModel.objects.select_related("contact", "stage")

    @sync_to_async
    def save(self, opportunity: Opportunity) -> Opportunity:
        model, _ = OpportunityModel.objects.update_or_create(
            id=opportunity.id,
            defaults={
                "title": opportunity.title,
                "description": opportunity.description,
                "value": opportunity.value,
                "contact_id": opportunity.contact_id,
                "pipeline_id": opportunity.pipeline_id,
                "stage_id": opportunity.stage_id,
                "status": opportunity.status.value,
                "expected_close_date": opportunity.expected_close_date,
                "actual_close_date": opportunity.actual_close_date,
                "lost_reason": opportunity.lost_reason,
                "assigned_to_id": opportunity.assigned_to,
                "user_id": opportunity.user_id,
            },
        )
        return self._to_domain(model)

    @sync_to_async
    def find_by_id(self, opportunity_id: uuid.UUID) -> Optional[Opportunity]:
        try:
            return self._to_domain(OpportunityModel.objects.get(id=opportunity_id))
        except OpportunityModel.DoesNotExist:
            return None

    @sync_to_async
    def find_detail_by_id(self, opportunity_id: uuid.UUID) -> Optional[OpportunityDetail]:
        try:
            return self._to_detail(self._joined().get(id=opportunity_id))
        except OpportunityModel.DoesNotExist:
            return None

    @sync_to_async
    def find(self, filters: OpportunityFilters) -> List[OpportunityDetail]:
        queryset = self._joined()
        if filters.status is not None:
            queryset = queryset.filter(status=filters.status.value)
        if filters.stage_id is not None:
            queryset = queryset.filter(stage_id=filters.stage_id)
        if filters.pipeline_id is not None:
            queryset = queryset.filter(pipeline_id=filters.pipeline_id)
        if filters.assigned_to is not None:
            queryset = queryset.filter(assigned_to_id=filters.assigned_to)
        if filters.contact_id is not None:
            queryset = queryset.filter(contact_id=filters.contact_id)
        return [self._to_detail(model) for model in queryset.order_by("-created_at")]

    @sync_to_async
    def delete(self, opportunity_id: uuid.UUID) -> bool:
        deleted, _ = OpportunityModel.objects.filter(id=opportunity_id).delete()
        return deleted > 0

    @sync_to_async
    def values_by_status(self, user_id: int) -> Dict[OpportunityStatus, List[Decimal]]:
        grouped: Dict[OpportunityStatus, List[Decimal]] = {status: [] for status in OpportunityStatus}
        rows = OpportunityModel.objects.filter(user_id=user_id).values_list("status", "value")
        for status, value in rows:
            grouped[OpportunityStatus(status)].append(value)
        return grouped
