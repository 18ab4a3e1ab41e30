"""
Client domain events.
"""
import uuid
from datetime import datetime
from typing import Any, Dict, Optional

from core.domain.events import DomainEvent


class ClientCreated(DomainEvent):
    """Event raised when a client is created."""

    aggregate_type = "client"

    def __init__(
        self,
        client_id: uuid.UUID,
        email: str,
        actor: Optional[str] = None,
        occurred_at: Optional[datetime] = None,
    ):
        super().__init__(
            event_id=self._new_id(),
            occurred_at=occurred_at or self._now(),
            aggregate_id=str(client_id),
            event_type="ClientCreated",
        )
        self._attach(client_id=client_id, email=email, actor=actor)

    def payload(self) -> Dict[str, Any]:
        return {"client_id": str(self.client_id), "email": self.email}


class ClientDeleted(DomainEvent):
    """Event raised when a client is deleted along with its licenses."""

    aggregate_type = "client"

    def __init__(
        self,
        client_id: uuid.UUID,
        actor: Optional[str] = None,
        occurred_at: Optional[datetime] = None,
    ):
        super().__init__(
            event_id=self._new_id(),
            occurred_at=occurred_at or self._now(),
            aggregate_id=str(client_id),
            event_type="ClientDeleted",
        )
        self._attach(client_id=client_id, actor=actor)

    def payload(self) -> Dict[str, Any]:
        return {"client_id": str(self.client_id)}
