"""
Product domain entity.
"""
import uuid
from dataclasses import dataclass, replace
from datetime import datetime, timezone
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Optional

UPDATABLE_FIELDS = ("name", "description", "price_one_payment", "price_subscription")

CENTS = Decimal("0.01")


def to_price(value) -> Decimal:
    """
    Normalise a price to a non-negative decimal with two places.

    Raises:
        ValueError: If the value is not a number or is negative
    """
    try:
        price = Decimal(str(value)).quantize(CENTS, rounding=ROUND_HALF_UP)
    except (InvalidOperation, TypeError) as exc:
        raise ValueError(f"Invalid price: {value}") from exc
    if price < 0:
        raise ValueError("Price cannot be negative")
    return price


@dataclass(frozen=True)
class Product:
    """
    Product domain entity.
    """

    id: uuid.UUID
    name: str
    description: Optional[str]
    price_one_payment: Decimal
    price_subscription: Decimal
    created_at: datetime

    def __post_init__(self):
        """Validate product entity."""
        if not self.name or not self.name.strip():
            raise ValueError("Product name is required")
        object.__setattr__(self, "price_one_payment", to_price(self.price_one_payment))
        object.__setattr__(self, "price_subscription", to_price(self.price_subscription))

    @classmethod
    def create(
        cls,
        name: str,
        price_one_payment,
        price_subscription,
        description: Optional[str] = None,
    ) -> "Product":
        """
        Create a new Product entity.

        Args:
            name: Product name
            price_one_payment: Price of a one-time license
            price_subscription: Monthly price of a subscription
            description: Optional description

        Returns:
            Product entity instance
        """
        return cls(
            id=uuid.uuid4(),
            name=name.strip(),
            description=description or None,
            price_one_payment=price_one_payment,
            price_subscription=price_subscription,
            created_at=datetime.now(timezone.utc),
        )

    def with_changes(self, **changes) -> "Product":
        """Copy of the product with the given fields replaced."""
        allowed = {key: value for key, value in changes.items() if key in UPDATABLE_FIELDS}
        return replace(self, **allowed)
