"""
Billing domain events.
"""
import uuid
from datetime import datetime
from decimal import Decimal
from typing import Any, Dict, Optional

from core.domain.events import DomainEvent


class PaymentRecorded(DomainEvent):
    """Event raised when a payment for a license is stored."""

    aggregate_type = "payment"

    def __init__(
        self,
        payment_id: uuid.UUID,
        license_id: uuid.UUID,
        amount: Decimal,
        currency: str,
        source: str,
        occurred_at: Optional[datetime] = None,
    ):
        """
        Initialize PaymentRecorded event.

        Args:
            payment_id: Payment UUID
            license_id: License the payment belongs to
            amount: Amount in currency units
            currency: ISO currency code
            source: Webhook event type that reported the payment
            occurred_at: When the event occurred
        """
        super().__init__(
            event_id=self._new_id(),
            occurred_at=occurred_at or self._now(),
            aggregate_id=str(payment_id),
            event_type="PaymentRecorded",
        )
        self._attach(
            payment_id=payment_id,
            license_id=license_id,
            amount=amount,
            currency=currency,
            source=source,
            actor="stripe",
        )

    def payload(self) -> Dict[str, Any]:
        return {
            "payment_id": str(self.payment_id),
            "license_id": str(self.license_id),
            "amount": str(self.amount),
            "currency": self.currency,
            "source": self.source,
        }
