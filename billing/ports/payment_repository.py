"""
Payment repository port (interface).
"""
import uuid
from abc import ABC, abstractmethod
from datetime import date
from decimal import Decimal
from typing import Dict, List, Tuple

from billing.domain.payment import Payment


class PaymentRepository(ABC):
    """Abstract repository for Payment entities."""

    @abstractmethod
    async def record(self, payment: Payment) -> Tuple[Payment, bool]:
        """
        Store a payment unless its reference is already stored.

        Args:
            payment: Payment entity

        Returns:
            Tuple of the stored payment and whether it was created
        """
        pass

    @abstractmethod
    async def list_for_license(self, license_id: uuid.UUID) -> List[Payment]:
        """Payments of a license, newest first."""
        pass

    @abstractmethod
    async def daily_totals(self, start: date, end: date) -> Dict[date, Tuple[Decimal, int]]:
        """
        Succeeded payment amount and count per day.

        Args:
            start: First day (inclusive)
            end: Last day (inclusive)

        Returns:
            Mapping of day to ``(amount, count)``; days without payments omitted
        """
        pass
