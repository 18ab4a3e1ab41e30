"""
Interaction repository port (interface).
"""
import uuid
from abc import ABC, abstractmethod
from typing import List

from contacts.domain.interaction import Interaction


class InteractionRepository(ABC):
    """
    Abstract repository for Interaction entities.
    """

    @abstractmethod
    async def save(self, interaction: Interaction) -> Interaction:
        pass

    @abstractmethod
    async def list_for_contact(self, contact_id: uuid.UUID) -> List[Interaction]:
        """
        Interactions of a contact, newest ``interaction_date`` first.

        Args:
            contact_id: Contact UUID
        """
        pass
