"""
Task domain events.
"""
import uuid
from datetime import datetime
from typing import Any, Dict, Optional

from core.domain.events import DomainEvent


class TaskCompleted(DomainEvent):
    """Event raised when a task is completed."""

    aggregate_type = "task"

    def __init__(
        self,
        task_id: uuid.UUID,
        completed_at: datetime,
        contact_id: Optional[uuid.UUID] = None,
        actor: Optional[str] = None,
        occurred_at: Optional[datetime] = None,
    ):
        super().__init__(
            event_id=self._new_id(),
            occurred_at=occurred_at or self._now(),
            aggregate_id=str(task_id),
            event_type="TaskCompleted",
        )
        self._attach(task_id=task_id, completed_at=completed_at, contact_id=contact_id, actor=actor)

    def payload(self) -> Dict[str, Any]:
        return {
            "task_id": str(self.task_id),
            "completed_at": self.completed_at.isoformat(),
            "contact_id": str(self.contact_id) if self.contact_id else None,
        }
