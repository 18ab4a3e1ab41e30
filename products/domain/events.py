"""
Product domain events.
"""
import uuid
from datetime import datetime
from typing import Any, Dict, Optional

from core.domain.events import DomainEvent


class ProductCreated(DomainEvent):
    """Event raised when a product joins the catalogue."""

    aggregate_type = "product"

    def __init__(
        self,
        product_id: uuid.UUID,
        name: str,
        actor: Optional[str] = None,
        occurred_at: Optional[datetime] = None,
    ):
        super().__init__(
            event_id=self._new_id(),
            occurred_at=occurred_at or self._now(),
            aggregate_id=str(product_id),
            event_type="ProductCreated",
        )
        self._attach(product_id=product_id, name=name, actor=actor)

    def payload(self) -> Dict[str, Any]:
        return {"product_id": str(self.product_id), "name": self.name}


class ProductDeleted(DomainEvent):
    """Event raised when a product is removed from the catalogue."""

    aggregate_type = "product"

    def __init__(
        self,
        product_id: uuid.UUID,
        actor: Optional[str] = None,
        occurred_at: Optional[datetime] = None,
    ):
        super().__init__(
            event_id=self._new_id(),
            occurred_at=occurred_at or self._now(),
            aggregate_id=str(product_id),
            event_type="ProductDeleted",
        )
        self._attach(product_id=product_id, actor=actor)

    def payload(self) -> Dict[str, Any]:
        return {"product_id": str(self.product_id)}
