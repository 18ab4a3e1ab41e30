"""
Task repository port (interface).
"""
import uuid
from abc import ABC, abstractmethod
from datetime import datetime
from typing import List, Optional

from tasks.domain.task import Task, TaskDetail, TaskFilters, TaskStats


class TaskRepository(ABC):
    """
    Abstract repository for Task entities.
    """

    @abstractmethod
    async def save(self, task: Task) -> Task:
        pass

    @abstractmethod
    async def find_by_id(self, task_id: uuid.UUID) -> Optional[Task]:
        pass

    @abstractmethod
    async def find_detail_by_id(self, task_id: uuid.UUID) -> Optional[TaskDetail]:
        pass

    @abstractmethod
    async def find(self, filters: TaskFilters) -> List[TaskDetail]:
        """
        Tasks matching ``filters``, earliest due date first.

        Tasks without due date come last.
        """
        pass

    @abstractmethod
    async def delete(self, task_id: uuid.UUID) -> bool:
        pass

    @abstractmethod
    async def stats_for_user(self, user_id: int, now: datetime) -> TaskStats:
        """
        Counters over the tasks created by ``user_id``.

        Args:
            user_id: Creator of the tasks
            now: Reference instant for ``overdue``
        """
        pass
