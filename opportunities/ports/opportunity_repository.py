"""
Opportunity repository port (interface).
"""
import uuid
from abc import ABC, abstractmethod
from decimal import Decimal
from typing import Dict, List, Optional

from core.domain.value_objects import OpportunityStatus
from opportunities.domain.opportunity import Opportunity, OpportunityDetail, OpportunityFilters


class OpportunityRepository(ABC):
    """
    Abstract repository for Opportunity entities.
    """

    @abstractmethod
    async def save(self, opportunity: Opportunity) -> Opportunity:
        pass

    @abstractmethod
    async def find_by_id(self, opportunity_id: uuid.UUID) -> Optional[Opportunity]:
        pass

    @abstractmethod
    async def find_detail_by_id(self, opportunity_id: uuid.UUID) -> Optional[OpportunityDetail]:
        pass

    @abstractmethod
    async def find(self, filters: OpportunityFilters) -> List[OpportunityDetail]:
        """
        Opportunities matching ``filters`` with contact and stage summaries.

        Args:
            filters: Listing filters

        Returns:
            Details, newest first
        """
        pass

    @abstractmethod
    async def delete(self, opportunity_id: uuid.UUID) -> bool:
        pass

    @abstractmethod
    async def values_by_status(self, user_id: int) -> Dict[OpportunityStatus, List[Decimal]]:
        """
        Deal values owned by ``user_id`` grouped by status.

        Args:
            user_id: Owner of the deals
        """
        pass
