"""
Payment and checkout domain objects.
"""
import uuid
from dataclasses import dataclass
from datetime import datetime, timezone
from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Optional

CENTS = Decimal("100")


class PaymentStatus(Enum):
    SUCCEEDED = "succeeded"
    FAILED = "failed"
    REFUNDED = "refunded"

    def __str__(self) -> str:
        return self.value


class PaymentType(Enum):
    """How a checkout charges: once, or monthly."""

    ONE_TIME = "one_time"
    SUBSCRIPTION = "subscription"

    def __str__(self) -> str:
        return self.value

    @property
    def checkout_mode(self) -> str:
        return "payment" if self is PaymentType.ONE_TIME else "subscription"

    @property
    def description(self) -> str:
        """Line item description shown on the checkout page."""
        return "Licencia única" if self is PaymentType.ONE_TIME else "Suscripción mensual"


def from_cents(value) -> Decimal:
    """Convert a provider amount in cents to a Decimal in currency units."""
    return (Decimal(int(value or 0)) / CENTS).quantize(Decimal("0.01"))


def to_cents(amount) -> int:
    """``round(amount * 100)`` for a positive amount; ``ValueError`` otherwise."""
    try:
        value = Decimal(str(amount))
    except (InvalidOperation, TypeError) as exc:
        raise ValueError(f"Invalid amount: {amount}") from exc
    if not value.is_finite() or value <= 0:
        raise ValueError(f"Invalid amount: {amount}")
    return int((value * CENTS).to_integral_value())


@dataclass(frozen=True)
class Payment:
    """
    Payment domain entity.

    ``stripe_reference`` is unique: recording the same reference twice
    yields the stored payment.
    """

    id: uuid.UUID
    license_id: uuid.UUID
    amount: Decimal
    currency: str
    status: PaymentStatus
    stripe_reference: str
    paid_at: datetime
    created_at: datetime

    def __post_init__(self):
        if self.amount < 0:
            raise ValueError("Payment amount must not be negative")
        if not self.stripe_reference:
            raise ValueError("Payment reference is required")

    @classmethod
    def succeeded(
        cls,
        license_id: uuid.UUID,
        amount: Decimal,
        currency: str,
        stripe_reference: str,
        paid_at: Optional[datetime] = None,
    ) -> "Payment":
        now = datetime.now(timezone.utc)
        return cls(
            id=uuid.uuid4(),
            license_id=license_id,
            amount=amount,
            currency=(currency or "eur").lower(),
            status=PaymentStatus.SUCCEEDED,
            stripe_reference=stripe_reference,
            paid_at=paid_at or now,
            created_at=now,
        )


@dataclass(frozen=True)
class CheckoutRequest:
    """Everything needed to open a hosted checkout for a license."""

    license_id: uuid.UUID
    client_email: str
    product_name: str
    unit_amount: int
    payment_type: PaymentType
    success_url: str
    cancel_url: str


@dataclass(frozen=True)
class CheckoutSession:
    session_id: str
    url: Optional[str]
