"""
Contact repository port (interface).
"""
import uuid
from abc import ABC, abstractmethod
from datetime import datetime
from typing import List, Optional, Tuple

from contacts.domain.contact import Contact, ContactFilters, ContactStats


class ContactRepository(ABC):
    """
    Abstract repository for Contact entities.
    """

    @abstractmethod
    async def save(self, contact: Contact) -> Contact:
        """
        Save a contact entity (insert or update).

        Args:
            contact: Contact entity to save

        Returns:
            Saved contact entity
        """
        pass

    @abstractmethod
    async def save_many(self, contacts: List[Contact]) -> List[Contact]:
        """
        Insert several contacts in one transaction.

        Args:
            contacts: New Contact entities

        Returns:
            The saved entities; none are stored if one fails
        """
        pass

    @abstractmethod
    async def find_by_id(self, contact_id: uuid.UUID) -> Optional[Contact]:
        pass

    @abstractmethod
    async def find_page(self, filters: ContactFilters) -> Tuple[List[Contact], int]:
        """
        One page of contacts matching ``filters``, newest first.

        Args:
            filters: Listing filters and page window

        Returns:
            Tuple of (contacts on the page, total matching rows)
        """
        pass

    @abstractmethod
    async def search(self, query: str, limit: int) -> List[Contact]:
        """
        Case-insensitive match on first/last name, email, company or phone.

        Args:
            query: Text to look for
            limit: Maximum number of rows

        Returns:
            Matching contacts
        """
        pass

    @abstractmethod
    async def list_all(self) -> List[Contact]:
        """Every contact, newest first."""
        pass

    @abstractmethod
    async def email_exists(self, email: str, exclude_id: Optional[uuid.UUID] = None) -> bool:
        """
        Whether another contact already uses ``email`` (case-insensitive).

        Args:
            email: Address to check
            exclude_id: Contact to ignore, for updates
        """
        pass

    @abstractmethod
    async def delete(self, contact_id: uuid.UUID) -> bool:
        """
        Delete a contact with its tags links and interactions.

        Returns:
            True if a row was deleted
        """
        pass

    @abstractmethod
    async def stats_for_user(self, user_id: int, month_start: datetime) -> ContactStats:
        """
        Counters over the contacts owned by ``user_id``.

        Args:
            user_id: Owner of the contacts
            month_start: Start of the current month, for ``new_this_month``
        """
        pass

    @abstractmethod
    async def count(self) -> int:
        """Number of contacts."""
        pass
