"""
Task domain entities.
"""
import uuid
from dataclasses import dataclass, replace
from datetime import datetime, timezone
from typing import Optional

from contacts.domain.contact import ContactSummary
from core.domain.value_objects import TaskPriority, TaskStatus

TASK_TYPES = ("call", "email", "meeting", "follow_up", "other")

UPDATABLE_FIELDS = (
    "title",
    "description",
    "task_type",
    "priority",
    "status",
    "due_date",
    "contact_id",
    "opportunity_id",
    "assigned_to",
)


@dataclass(frozen=True)
class Task:
    """
    Task domain entity.

    ``completed_at`` is set only while the task is ``completed``.
    """

    id: uuid.UUID
    title: str
    description: Optional[str]
    task_type: str
    priority: TaskPriority
    status: TaskStatus
    due_date: Optional[datetime]
    completed_at: Optional[datetime]
    contact_id: Optional[uuid.UUID]
    opportunity_id: Optional[uuid.UUID]
    assigned_to: Optional[int]
    user_id: Optional[int]
    created_at: datetime
    updated_at: datetime

    def __post_init__(self):
        """Validate task entity."""
        if not self.title or not self.title.strip():
            raise ValueError("Task title is required")
        if self.task_type not in TASK_TYPES:
            raise ValueError(f"Invalid task type: {self.task_type}")

    @classmethod
    def create(
        cls,
        title: str,
        user_id: Optional[int],
        description: Optional[str] = None,
        task_type: str = "other",
        priority: TaskPriority = TaskPriority.MEDIUM,
        due_date: Optional[datetime] = None,
        contact_id: Optional[uuid.UUID] = None,
        opportunity_id: Optional[uuid.UUID] = None,
        assigned_to: Optional[int] = None,
    ) -> "Task":
        """
        Create a pending task.

        Args:
            title: What has to be done
            user_id: Creator of the task
            assigned_to: Assignee; defaults to the creator

        Returns:
            Task entity instance with status ``pending``
        """
        now = datetime.now(timezone.utc)
        return cls(
            id=uuid.uuid4(),
            title=(title or "").strip(),
            description=description or None,
            task_type=task_type or "other",
            priority=priority,
            status=TaskStatus.PENDING,
            due_date=due_date,
            completed_at=None,
            contact_id=contact_id,
            opportunity_id=opportunity_id,
            assigned_to=assigned_to if assigned_to is not None else user_id,
            user_id=user_id,
            created_at=now,
            updated_at=now,
        )

    def is_overdue(self, now: datetime) -> bool:
        return (
            self.status is TaskStatus.PENDING
            and self.due_date is not None
            and self.due_date < now
        )

    def with_changes(self, **changes) -> "Task":
        allowed = {key: value for key, value in changes.items() if key in UPDATABLE_FIELDS}
        updated = replace(self, updated_at=datetime.now(timezone.utc), **allowed)
        if updated.status is not TaskStatus.COMPLETED and updated.completed_at is not None:
            updated = replace(updated, completed_at=None)
        return updated

    def complete(self, at: datetime) -> "Task":
        return replace(self, status=TaskStatus.COMPLETED, completed_at=at, updated_at=at)


@dataclass(frozen=True)
class TaskDetail:
    """A task with its contact summary and the title of its deal."""

    task: Task
    contact: Optional[ContactSummary] = None
    opportunity_title: Optional[str] = None


@dataclass(frozen=True)
class TaskFilters:
    """Filters for task listings; due-date bounds are inclusive."""

    status: Optional[TaskStatus] = None
    priority: Optional[TaskPriority] = None
    assigned_to: Optional[int] = None
    contact_id: Optional[uuid.UUID] = None
    opportunity_id: Optional[uuid.UUID] = None
    due_date_from: Optional[datetime] = None
    due_date_to: Optional[datetime] = None
    due_before: Optional[datetime] = None


@dataclass(frozen=True)
class TaskStats:
    """Task counters for a user."""

    total: int
    pending: int
    completed: int
    overdue: int
