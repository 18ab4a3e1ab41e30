"""
Django implementation of TaskRepository port.
"""
import uuid
from datetime import datetime
from typing import List, Optional

from asgiref.sync import sync_to_async
from django.db.models import F

from contacts.domain.contact import ContactSummary
from core.domain.value_objects import TaskPriority, TaskStatus
from tasks.domain.task import Task, TaskDetail, TaskFilters, TaskStats
from tasks.infrastructure.models import Task as TaskModel
from tasks.ports.task_repository import TaskRepository


class DjangoTaskRepository(TaskRepository):
    """
    Django ORM implementation of TaskRepository.
    """

    def _to_domain(self, model: TaskModel) -> Task:
        """
        Convert Django model to domain entity.

        Args:
            model: Django Task model

        Returns:
            Task domain entity
        """
        return Task(
            id=model.id,
            title=model.title,
            description=model.description,
            task_type=model.task_type,
            priority=TaskPriority(model.priority),
            status=TaskStatus(model.status),
            due_date=model.due_date,
            completed_at=model.completed_at,
            contact_id=model.contact_id,
            opportunity_id=model.opportunity_id,
            assigned_to=model.assigned_to_id,
            user_id=model.user_id,
            created_at=model.created_at,
            updated_at=model.updated_at,
        )

    def _to_detail(self, model: TaskModel) -> TaskDetail:
        contact = None
        if model.contact is not None:
            contact = ContactSummary(
                id=model.contact.id,
                first_name=model.contact.first_name,
                last_name=model.contact.last_name,
                email=model.contact.email,
                company_name=model.contact.company_name,
            )
        return TaskDetail(
            task=self._to_domain(model),
            contact=contact,
            opportunity_title=model.opportunity.title if model.opportunity is not None else None,
        )

    def _joined(self):
        return TaskModel.objects.select_related("contact", "opportunity")

    @sync_to_async
    def save(self, task: Task) -> Task:
        model, _ = TaskModel.objects.update_or_create(
            id=task.id,
            defaults={
                "title": task.title,
                "description": task.description,
                "task_type": task.task_type,
                "priority": task.priority.value,
                "status": task.status.value,
                "due_date": task.due_date,
                "completed_at": task.completed_at,
                "contact_id": task.contact_id,
                "opportunity_id": task.opportunity_id,
                "assigned_to_id": task.assigned_to,
                "user_id": task.user_id,
            },
        )
        return self._to_domain(model)

    @sync_to_async
    def find_by_id(self, task_id: uuid.UUID) -> Optional[Task]:
        try:
            return self._to_domain(TaskModel.objects.get(id=task_id))
        except TaskModel.DoesNotExist:
            return None

    @sync_to_async
    def find_detail_by_id(self, task_id: uuid.UUID) -> Optional[TaskDetail]:
        try:
            return self._to_detail(self._joined().get(id=task_id))
        except TaskModel.DoesNotExist:
            return None

    @sync_to_async
    def find(self, filters: TaskFilters) -> List[TaskDetail]:
        """
        Tasks matching ``filters``, earliest due date first.

        Args:
            filters: Listing filters

        Returns:
            List of TaskDetail
        """
        queryset = self._joined()
        if filters.status is not None:
            queryset = queryset.filter(status=filters.status.value)
        if filters.priority is not None:
            queryset = queryset.filter(priority=filters.priority.value)
        if filters.assigned_to is not None:
            queryset = queryset.filter(assigned_to_id=filters.assigned_to)
        if filters.contact_id is not None:
            queryset = queryset.filter(contact_id=filters.contact_id)
        if filters.opportunity_id is not None:
            queryset = queryset.filter(opportunity_id=filters.opportunity_id)
        if filters.due_date_from is not None:
            queryset = queryset.filter(due_date__gte=filters.due_date_from)
        if filters.due_date_to is not None:
            queryset = queryset.filter(due_date__lte=filters.due_date_to)
        if filters.due_before is not None:
            queryset = queryset.filter(due_date__lt=filters.due_before)

        ordered = queryset.order_by(F("due_date").asc(nulls_last=True), "created_at")
        return [self._to_detail(model) for model in ordered]

    @sync_to_async
    def delete(self, task_id: uuid.UUID) -> bool:
        deleted, _ = TaskModel.objects.filter(id=task_id).delete()
        return deleted > 0

    @sync_to_async
    def stats_for_user(self, user_id: int, now: datetime) -> TaskStats:
        owned = TaskModel.objects.filter(user_id=user_id)
        pending = owned.filter(status=TaskStatus.PENDING.value)
        return TaskStats(
            total=owned.count(),
            pending=pending.count(),
            completed=owned.filter(status=TaskStatus.COMPLETED.value).count(),
            overdue=pending.filter(due_date__lt=now).count(),
        )
