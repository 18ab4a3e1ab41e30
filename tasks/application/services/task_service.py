"""
Task service.
"""

import logging
import uuid
from datetime import datetime, timedelta
from typing import Any, Dict, List, Optional

from django.utils import timezone

from core.application.parsing import parse_datetime, parse_enum, parse_uuid
from core.application.result import ServiceResult, service_operation, validating
from core.domain.events import EventBus
from core.domain.exceptions import NotAuthenticatedError, TaskNotFoundError, ValidationError
from core.domain.value_objects import TaskPriority, TaskStatus
from tasks.domain.events import TaskCompleted
from tasks.domain.task import Task, TaskDetail, TaskFilters, TaskStats
from tasks.ports.task_repository import TaskRepository

logger = logging.getLogger(__name__)


class TaskService:
    """Follow-up tasks and their due-date views."""

    def __init__(self, task_repository: TaskRepository, event_bus: EventBus):
        self.task_repository = task_repository
        self.event_bus = event_bus

    async def _get_or_raise(self, task_id: uuid.UUID) -> Task:
        task = await self.task_repository.find_by_id(task_id)
        if task is None:
            raise TaskNotFoundError(f"Task {task_id} not found")
        return task

    def _changes(self, data: Dict[str, Any]) -> Dict[str, Any]:
        changes: Dict[str, Any] = {}
        for name in ("title", "description", "task_type", "assigned_to"):
            if name in data:
                changes[name] = data[name]
        if "priority" in data:
            changes["priority"] = parse_enum(TaskPriority, data["priority"], "task priority")
        if "status" in data:
            changes["status"] = parse_enum(TaskStatus, data["status"], "task status")
        if "due_date" in data:
            changes["due_date"] = parse_datetime(data["due_date"])
        if "contact_id" in data:
            changes["contact_id"] = parse_uuid(data["contact_id"], "contact_id")
        if "opportunity_id" in data:
            changes["opportunity_id"] = parse_uuid(data["opportunity_id"], "opportunity_id")
        return changes

    @service_operation("list tasks", empty=list)
    async def get_tasks(self, filters: Optional[Dict[str, Any]] = None) -> ServiceResult[List[TaskDetail]]:
        """
        Tasks ordered by due date.

        Args:
            filters: Optional ``status``, ``priority``, ``assigned_to``,
                ``contact_id``, ``opportunity_id``, ``due_date_from`` and
                ``due_date_to`` (both inclusive)
        """
        filters = filters or {}
        query = TaskFilters(
            status=parse_enum(TaskStatus, filters["status"], "task status") if filters.get("status") else None,
            priority=(
                parse_enum(TaskPriority, filters["priority"], "task priority")
                if filters.get("priority")
                else None
            ),
            assigned_to=filters.get("assigned_to") or None,
            contact_id=parse_uuid(filters.get("contact_id"), "contact_id"),
            opportunity_id=parse_uuid(filters.get("opportunity_id"), "opportunity_id"),
            due_date_from=parse_datetime(filters.get("due_date_from")),
            due_date_to=parse_datetime(filters.get("due_date_to")),
        )
        return ServiceResult.ok(await self.task_repository.find(query))

    @service_operation("get task")
    async def get_task_by_id(self, task_id: uuid.UUID) -> ServiceResult[TaskDetail]:
        detail = await self.task_repository.find_detail_by_id(task_id)
        if detail is None:
            raise TaskNotFoundError(f"Task {task_id} not found")
        return ServiceResult.ok(detail)

    @service_operation("create task")
    async def create_task(self, data: Dict[str, Any], user_id: Optional[int]) -> ServiceResult[Task]:
        """
        Create a pending task; ``assigned_to`` defaults to the creator.

        Args:
            data: ``title`` plus optional ``description``, ``task_type``,
                ``priority``, ``due_date``, ``contact_id``,
                ``opportunity_id``, ``assigned_to``
            user_id: Creator of the task
        """
        if user_id is None:
            raise NotAuthenticatedError()
        if not data.get("title"):
            raise ValidationError("Task title is required")
        with validating():
            task = Task.create(
                title=data["title"],
                user_id=user_id,
                description=data.get("description"),
                task_type=data.get("task_type") or "other",
                priority=parse_enum(TaskPriority, data.get("priority") or TaskPriority.MEDIUM, "task priority"),
                due_date=parse_datetime(data.get("due_date")),
                contact_id=parse_uuid(data.get("contact_id"), "contact_id"),
                opportunity_id=parse_uuid(data.get("opportunity_id"), "opportunity_id"),
                assigned_to=data.get("assigned_to"),
            )
        saved = await self.task_repository.save(task)
        logger.info("Task %s created by user %s", saved.id, user_id)
        return ServiceResult.ok(saved, message="Task created")

    async def _publish_completed(self, task: Task, actor: Optional[str]) -> None:
        await self.event_bus.publish(
            TaskCompleted(
                task_id=task.id,
                completed_at=task.completed_at,
                contact_id=task.contact_id,
                actor=actor,
            )
        )

    @service_operation("update task")
    async def update_task(
        self, task_id: uuid.UUID, data: Dict[str, Any], actor: Optional[str] = None
    ) -> ServiceResult[Task]:
        """Apply changes; moving the status to ``completed`` stamps ``completed_at``."""
        task = await self._get_or_raise(task_id)
        changes = self._changes(data)
        completing = changes.get("status") is TaskStatus.COMPLETED and task.status is not TaskStatus.COMPLETED
        with validating():
            updated = task.with_changes(**changes)
        if completing:
            updated = updated.complete(timezone.now())
        saved = await self.task_repository.save(updated)
        if completing:
            await self._publish_completed(saved, actor)
        return ServiceResult.ok(saved, message="Task updated")

    @service_operation("complete task")
    async def complete_task(self, task_id: uuid.UUID, actor: Optional[str] = None) -> ServiceResult[Task]:
        task = await self._get_or_raise(task_id)
        saved = await self.task_repository.save(task.complete(timezone.now()))
        await self._publish_completed(saved, actor)
        return ServiceResult.ok(saved, message="Task completed")

    @service_operation("delete task")
    async def delete_task(self, task_id: uuid.UUID) -> ServiceResult[None]:
        if not await self.task_repository.delete(task_id):
            raise TaskNotFoundError(f"Task {task_id} not found")
        return ServiceResult.ok(None, message="Task deleted")

    @service_operation("list pending tasks", empty=list)
    async def get_pending_tasks(self) -> ServiceResult[List[TaskDetail]]:
        return ServiceResult.ok(await self.task_repository.find(TaskFilters(status=TaskStatus.PENDING)))

    @service_operation("list overdue tasks", empty=list)
    async def get_overdue_tasks(self, now: Optional[datetime] = None) -> ServiceResult[List[TaskDetail]]:
        """Pending tasks due before ``now``."""
        query = TaskFilters(status=TaskStatus.PENDING, due_before=now or timezone.now())
        return ServiceResult.ok(await self.task_repository.find(query))

    @service_operation("list today's tasks", empty=list)
    async def get_today_tasks(self, now: Optional[datetime] = None) -> ServiceResult[List[TaskDetail]]:
        """Pending tasks due in ``[today 00:00, tomorrow 00:00)`` local time."""
        start = timezone.localtime(now).replace(hour=0, minute=0, second=0, microsecond=0)
        query = TaskFilters(
            status=TaskStatus.PENDING,
            due_date_from=start,
            due_before=start + timedelta(days=1),
        )
        return ServiceResult.ok(await self.task_repository.find(query))

    @service_operation("task stats")
    async def get_task_stats(self, user_id: Optional[int]) -> ServiceResult[TaskStats]:
        if user_id is None:
            raise NotAuthenticatedError()
        return ServiceResult.ok(await self.task_repository.stats_for_user(user_id, timezone.now()))
