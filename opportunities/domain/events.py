"""
Opportunity domain events.
"""
import uuid
from datetime import datetime
from decimal import Decimal
from typing import Any, Dict, Optional

from core.domain.events import DomainEvent


class OpportunityClosed(DomainEvent):
    """Event raised when a deal is marked as won or lost."""

    aggregate_type = "opportunity"

    def __init__(
        self,
        opportunity_id: uuid.UUID,
        outcome: str,
        value: Decimal,
        lost_reason: Optional[str] = None,
        actor: Optional[str] = None,
        occurred_at: Optional[datetime] = None,
    ):
        """
        Initialize OpportunityClosed event.

        Args:
            opportunity_id: Opportunity UUID
            outcome: ``won`` or ``lost``
            value: Deal value at closing time
            lost_reason: Why the deal was lost
            actor: Who closed the deal
            occurred_at: When the event occurred
        """
        super().__init__(
            event_id=self._new_id(),
            occurred_at=occurred_at or self._now(),
            aggregate_id=str(opportunity_id),
            event_type="OpportunityClosed",
        )
        self._attach(
            opportunity_id=opportunity_id,
            outcome=outcome,
            value=value,
            lost_reason=lost_reason,
            actor=actor,
        )

    def payload(self) -> Dict[str, Any]:
        return {
            "opportunity_id": str(self.opportunity_id),
            "outcome": self.outcome,
            "value": str(self.value),
            "lost_reason": self.lost_reason,
        }
