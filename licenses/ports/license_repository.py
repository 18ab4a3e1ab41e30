"""
License repository port (interface).

This defines the contract for license persistence operations.
Implementations are in the infrastructure layer.
"""
import uuid
from abc import ABC, abstractmethod
from datetime import date, datetime
from typing import Any, Dict, List, Optional, Tuple

from licenses.domain.license import License, LicenseFilters, LicenseFull


class LicenseRepository(ABC):
    """
    Abstract repository for License entities.

    This is a port in hexagonal architecture - it defines
    what operations are available, not how they're implemented.
    """

    @abstractmethod
    async def save(self, license: License) -> License:
        """
        Save a license entity.

        Args:
            license: License entity to save

        Returns:
            Saved license entity
        """
        pass

    @abstractmethod
    async def apply_payment_event(
        self, license_id: uuid.UUID, occurred_at: datetime, **changes: Any
    ) -> Optional[Tuple[License, License]]:
        """
        Apply a payment event to a license while holding its row lock.

        Reading, applying and saving happen in one transaction so concurrent
        deliveries for the same license are serialised.

        Args:
            license_id: License UUID
            occurred_at: When the provider created the event
            **changes: ``status``, ``end_date`` and provider ids, as taken by
                ``License.apply_payment_event``

        Returns:
            The license before and after the event, or None if not found
        """
        pass

    @abstractmethod
    async def find_by_id(self, license_id: uuid.UUID) -> Optional[License]:
        """
        Find a license by ID.

        Args:
            license_id: License UUID

        Returns:
            License entity or None if not found
        """
        pass

    @abstractmethod
    async def find_full_by_id(self, license_id: uuid.UUID) -> Optional[LicenseFull]:
        """
        Find the joined view of a license.

        Args:
            license_id: License UUID

        Returns:
            LicenseFull or None if not found
        """
        pass

    @abstractmethod
    async def find_full(self, filters: LicenseFilters, today: date) -> List[LicenseFull]:
        """
        List joined licenses matching ``filters``, newest first.

        Args:
            filters: Optional status, type, client, product and expiry filters
            today: Reference day for the expiry filter

        Returns:
            List of LicenseFull
        """
        pass

    @abstractmethod
    async def find_by_subscription_id(self, subscription_id: str) -> Optional[License]:
        """
        Find the license billed by a provider subscription.

        Args:
            subscription_id: Payment provider subscription id

        Returns:
            License entity or None if not found
        """
        pass

    @abstractmethod
    async def find_lapsed_subscriptions(self, today: date) -> List[License]:
        """
        Active subscription licenses whose end date has passed.

        Args:
            today: Reference day

        Returns:
            List of License entities
        """
        pass

    @abstractmethod
    async def delete(self, license_id: uuid.UUID) -> bool:
        """
        Delete a license.

        Args:
            license_id: License UUID

        Returns:
            True if a row was deleted
        """
        pass

    @abstractmethod
    async def count_by_status(self) -> Dict[str, int]:
        """
        Count licenses per stored status.

        Returns:
            Mapping of status value to count (missing statuses omitted)
        """
        pass

    @abstractmethod
    async def count_expired(self, today: date) -> int:
        """Number of licenses whose end date is before ``today``."""
        pass
