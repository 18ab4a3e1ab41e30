"""
Domain events base classes and infrastructure.

Domain events record something that happened in the CRM (a license changed
status, a payment arrived, a deal closed) so that side effects such as
audit logging and cache invalidation stay out of the services.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Dict
from uuid import UUID, uuid4


@dataclass(frozen=True)
class DomainEvent(ABC):
    """
    Base class for all domain events.

    Subclasses call ``super().__init__`` with the aggregate id and then
    attach their own attributes through ``_attach`` since instances are
    frozen.
    """

    event_id: UUID
    occurred_at: datetime
    aggregate_id: str
    event_type: str

    def __init_subclass__(cls, **kwargs):
        """Automatically set event_type for subclasses."""
        super().__init_subclass__(**kwargs)
        cls.event_type = cls.__name__

    @classmethod
    def _now(cls) -> datetime:
        return datetime.now(timezone.utc)

    @classmethod
    def _new_id(cls) -> UUID:
        return uuid4()

    def _attach(self, **attributes: Any) -> None:
        for name, value in attributes.items():
            object.__setattr__(self, name, value)

    def payload(self) -> Dict[str, Any]:
        """Event specific attributes, serialised to JSON friendly values."""
        return {}

    def to_dict(self) -> Dict[str, Any]:
        """Convert event to dictionary for serialization."""
        return {
            "event_id": str(self.event_id),
            "occurred_at": self.occurred_at.isoformat(),
            "aggregate_id": self.aggregate_id,
            "event_type": self.event_type,
            "data": self.payload(),
        }


class EventHandler(ABC):
    """Side effect run after an event is published (audit row, cache bump)."""

    @abstractmethod
    async def handle(self, event: DomainEvent) -> None:
        ...


class EventBus(ABC):
    """Port the services publish through; implementations decide where handlers run."""

    @abstractmethod
    async def publish(self, event: DomainEvent) -> None:
        ...

    @abstractmethod
    def subscribe(self, event_type: type, handler: EventHandler) -> None:
        ...
