"""
License domain events.
"""
import uuid
from datetime import date, datetime
from typing import Any, Dict, Optional

from core.domain.events import DomainEvent


class LicenseStatusChanged(DomainEvent):
    """Event raised when a license moves to another status."""

    aggregate_type = "license"

    def __init__(
        self,
        license_id: uuid.UUID,
        old_status: str,
        new_status: str,
        reason: str = "manual",
        actor: Optional[str] = None,
        occurred_at: Optional[datetime] = None,
    ):
        """
        Initialize LicenseStatusChanged event.

        Args:
            license_id: License UUID
            old_status: Status before the change
            new_status: Status after the change
            reason: What triggered the change (manual, webhook event type, sweep)
            actor: Who performed the change
            occurred_at: When the event occurred
        """
        super().__init__(
            event_id=self._new_id(),
            occurred_at=occurred_at or self._now(),
            aggregate_id=str(license_id),
            event_type="LicenseStatusChanged",
        )
        self._attach(
            license_id=license_id,
            old_status=old_status,
            new_status=new_status,
            reason=reason,
            actor=actor,
        )

    def payload(self) -> Dict[str, Any]:
        return {
            "license_id": str(self.license_id),
            "old_status": self.old_status,
            "new_status": self.new_status,
            "reason": self.reason,
        }


class LicenseCreated(DomainEvent):
    """Event raised when a license is issued to a client."""

    aggregate_type = "license"

    def __init__(
        self,
        license_id: uuid.UUID,
        client_id: uuid.UUID,
        product_id: uuid.UUID,
        status: str,
        actor: Optional[str] = None,
        occurred_at: Optional[datetime] = None,
    ):
        super().__init__(
            event_id=self._new_id(),
            occurred_at=occurred_at or self._now(),
            aggregate_id=str(license_id),
            event_type="LicenseCreated",
        )
        self._attach(
            license_id=license_id,
            client_id=client_id,
            product_id=product_id,
            status=status,
            actor=actor,
        )

    def payload(self) -> Dict[str, Any]:
        return {
            "license_id": str(self.license_id),
            "client_id": str(self.client_id),
            "product_id": str(self.product_id),
            "status": self.status,
        }


class LicenseEndDateChanged(DomainEvent):
    """Event raised when a license's end date moves, which can change whether it counts as expired."""

    aggregate_type = "license"

    def __init__(
        self,
        license_id: uuid.UUID,
        old_end_date: Optional[date],
        new_end_date: Optional[date],
        actor: Optional[str] = None,
        occurred_at: Optional[datetime] = None,
    ):
        super().__init__(
            event_id=self._new_id(),
            occurred_at=occurred_at or self._now(),
            aggregate_id=str(license_id),
            event_type="LicenseEndDateChanged",
        )
        self._attach(
            license_id=license_id,
            old_end_date=old_end_date,
            new_end_date=new_end_date,
            actor=actor,
        )

    def payload(self) -> Dict[str, Any]:
        return {
            "license_id": str(self.license_id),
            "old_end_date": self.old_end_date.isoformat() if self.old_end_date else None,
            "new_end_date": self.new_end_date.isoformat() if self.new_end_date else None,
        }


class LicenseDeleted(DomainEvent):
    """Event raised when a license is deleted."""

    aggregate_type = "license"

    def __init__(
        self,
        license_id: uuid.UUID,
        actor: Optional[str] = None,
        occurred_at: Optional[datetime] = None,
    ):
        super().__init__(
            event_id=self._new_id(),
            occurred_at=occurred_at or self._now(),
            aggregate_id=str(license_id),
            event_type="LicenseDeleted",
        )
        self._attach(license_id=license_id, actor=actor)

    def payload(self) -> Dict[str, Any]:
        return {"license_id": str(self.license_id)}
