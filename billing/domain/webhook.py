"""
Verified payment-provider webhook events.
"""
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, Optional

CHECKOUT_COMPLETED = "checkout.session.completed"
INVOICE_PAYMENT_SUCCEEDED = "invoice.payment_succeeded"
INVOICE_PAYMENT_FAILED = "invoice.payment_failed"
SUBSCRIPTION_DELETED = "customer.subscription.deleted"

HANDLED_EVENT_TYPES = (
    CHECKOUT_COMPLETED,
    INVOICE_PAYMENT_SUCCEEDED,
    INVOICE_PAYMENT_FAILED,
    SUBSCRIPTION_DELETED,
)


def from_timestamp(value) -> Optional[datetime]:
    if value in (None, ""):
        return None
    return datetime.fromtimestamp(int(value), tz=timezone.utc)


@dataclass(frozen=True)
class WebhookEvent:
    """
    A webhook event whose signature has been checked.

    ``data`` is the event's ``data.object`` as plain JSON.
    """

    id: str
    type: str
    created: datetime
    data: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_payload(cls, payload: Dict[str, Any]) -> "WebhookEvent":
        return cls(
            id=payload["id"],
            type=payload["type"],
            created=from_timestamp(payload.get("created")) or datetime.now(timezone.utc),
            data=(payload.get("data") or {}).get("object") or {},
        )

    @property
    def metadata(self) -> Dict[str, Any]:
        return self.data.get("metadata") or {}

    @property
    def subscription_id(self) -> Optional[str]:
        """Subscription the event refers to, from an invoice or a subscription object."""
        if self.type == SUBSCRIPTION_DELETED:
            return self.data.get("id")
        subscription = self.data.get("subscription")
        if isinstance(subscription, dict):
            return subscription.get("id")
        if subscription:
            return subscription
        details = (self.data.get("parent") or {}).get("subscription_details") or {}
        return details.get("subscription")

    def invoice_period_end(self) -> Optional[datetime]:
        """End of the billed period of an invoice event."""
        lines = (self.data.get("lines") or {}).get("data") or []
        ends = [
            (line.get("period") or {}).get("end")
            for line in lines
            if (line.get("period") or {}).get("end")
        ]
        if ends:
            return from_timestamp(max(ends))
        return from_timestamp(self.data.get("period_end"))
