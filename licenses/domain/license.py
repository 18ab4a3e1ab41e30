"""
License domain entity.

A license is a client's right to use a product, either paid once
(``licencia_unica``) or billed monthly (``suscripcion``).
"""
import uuid
from dataclasses import dataclass, replace
from datetime import date, datetime, timezone
from decimal import Decimal
from typing import Optional

from core.domain.value_objects import LicenseStatus, LicenseType

UPDATABLE_FIELDS = ("type", "start_date", "end_date", "status")


@dataclass(frozen=True)
class License:
    """
    License domain entity.

    Besides its business fields the license remembers the payment
    provider's customer and subscription ids, and the timestamp of the last
    payment event applied to it so that late events cannot undo newer ones.
    """

    id: uuid.UUID
    client_id: uuid.UUID
    product_id: uuid.UUID
    type: LicenseType
    start_date: date
    end_date: Optional[date]
    status: LicenseStatus
    created_at: datetime
    stripe_customer_id: Optional[str] = None
    stripe_subscription_id: Optional[str] = None
    last_payment_event_at: Optional[datetime] = None

    def __post_init__(self):
        """Validate license entity."""
        if not self.client_id:
            raise ValueError("Client ID is required")
        if not self.product_id:
            raise ValueError("Product ID is required")
        if not isinstance(self.type, LicenseType):
            raise ValueError(f"Invalid license type: {self.type}")
        if not isinstance(self.status, LicenseStatus):
            raise ValueError(f"Invalid license status: {self.status}")
        if self.end_date and self.start_date and self.end_date < self.start_date:
            raise ValueError("End date cannot be before start date")

    @classmethod
    def create(
        cls,
        client_id: uuid.UUID,
        product_id: uuid.UUID,
        license_type: LicenseType,
        start_date: date,
        end_date: Optional[date] = None,
        status: Optional[LicenseStatus] = None,
        license_id: Optional[uuid.UUID] = None,
    ) -> "License":
        """
        Create a new License entity.

        Args:
            client_id: Client UUID
            product_id: Product UUID
            license_type: One-time or subscription
            start_date: First day of the license
            end_date: Optional last day
            status: Initial status (defaults to ``activa``)
            license_id: Optional UUID (generated if not provided)

        Returns:
            License entity instance
        """
        return cls(
            id=license_id or uuid.uuid4(),
            client_id=client_id,
            product_id=product_id,
            type=license_type,
            start_date=start_date,
            end_date=end_date,
            status=status or LicenseStatus.ACTIVE,
            created_at=datetime.now(timezone.utc),
        )

    def is_expired(self, today: Optional[date] = None) -> bool:
        """
        Check whether the end date has passed.

        Args:
            today: Reference day (defaults to the current UTC date)

        Returns:
            True if ``end_date`` is set and earlier than ``today``
        """
        if self.end_date is None:
            return False
        return self.end_date < (today or datetime.now(timezone.utc).date())

    def with_changes(self, **changes) -> "License":
        """Copy of the license with the given business fields replaced."""
        allowed = {key: value for key, value in changes.items() if key in UPDATABLE_FIELDS}
        return replace(self, **allowed)

    def with_status(self, status: LicenseStatus) -> "License":
        return replace(self, status=status)

    def accepts_event_at(self, occurred_at: datetime) -> bool:
        """
        Whether a payment event may still change this license.

        Events older than the last applied one are ignored.
        """
        return self.last_payment_event_at is None or occurred_at >= self.last_payment_event_at

    def apply_payment_event(
        self,
        occurred_at: datetime,
        status: Optional[LicenseStatus] = None,
        end_date: Optional[date] = None,
        stripe_customer_id: Optional[str] = None,
        stripe_subscription_id: Optional[str] = None,
    ) -> "License":
        """
        Copy of the license after a payment event.

        Provider ids are always recorded; status and end date only move when
        the event is not older than the last one applied.
        """
        changes = {
            "stripe_customer_id": stripe_customer_id or self.stripe_customer_id,
            "stripe_subscription_id": stripe_subscription_id or self.stripe_subscription_id,
        }
        if self.accepts_event_at(occurred_at):
            changes["last_payment_event_at"] = occurred_at
            if status is not None:
                changes["status"] = status
            if end_date is not None:
                changes["end_date"] = end_date
        return replace(self, **changes)


@dataclass(frozen=True)
class LicenseFull:
    """
    Read model joining a license with its client and product.

    ``price`` follows the license type: the product's one-payment price for
    ``licencia_unica`` and its subscription price for ``suscripcion``.
    """

    license: License
    client_name: str
    client_email: str
    client_company: Optional[str]
    product_name: str
    product_description: Optional[str]
    price: Decimal
    is_expired: bool

    @classmethod
    def build(
        cls,
        license: License,
        client_name: str,
        client_email: str,
        client_company: Optional[str],
        product_name: str,
        product_description: Optional[str],
        price_one_payment: Decimal,
        price_subscription: Decimal,
        today: Optional[date] = None,
    ) -> "LicenseFull":
        price = price_one_payment if license.type is LicenseType.ONE_TIME else price_subscription
        return cls(
            license=license,
            client_name=client_name,
            client_email=client_email,
            client_company=client_company,
            product_name=product_name,
            product_description=product_description,
            price=price,
            is_expired=license.is_expired(today),
        )

    @property
    def id(self) -> uuid.UUID:
        return self.license.id


@dataclass(frozen=True)
class LicenseFilters:
    """Optional filters of a license listing."""

    status: Optional[LicenseStatus] = None
    type: Optional[LicenseType] = None
    client_id: Optional[uuid.UUID] = None
    product_id: Optional[uuid.UUID] = None
    expired: Optional[bool] = None
