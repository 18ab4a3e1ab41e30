"""
Contact domain events.
"""
import uuid
from datetime import datetime
from typing import Any, Dict, Optional

from core.domain.events import DomainEvent


class ContactCreated(DomainEvent):
    """Event raised when a contact is created, one per imported row too."""

    aggregate_type = "contact"

    def __init__(
        self,
        contact_id: uuid.UUID,
        contact_type: str,
        source: Optional[str] = None,
        actor: Optional[str] = None,
        occurred_at: Optional[datetime] = None,
    ):
        super().__init__(
            event_id=self._new_id(),
            occurred_at=occurred_at or self._now(),
            aggregate_id=str(contact_id),
            event_type="ContactCreated",
        )
        self._attach(contact_id=contact_id, contact_type=contact_type, source=source, actor=actor)

    def payload(self) -> Dict[str, Any]:
        return {
            "contact_id": str(self.contact_id),
            "contact_type": self.contact_type,
            "source": self.source,
        }
