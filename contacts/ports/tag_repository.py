"""
Tag repository port (interface).
"""
import uuid
from abc import ABC, abstractmethod
from typing import Dict, Iterable, List, Optional

from contacts.domain.contact import Contact
from contacts.domain.tag import Tag


class TagRepository(ABC):
    """
    Abstract repository for tags and their links to contacts.
    """

    @abstractmethod
    async def save(self, tag: Tag) -> Tag:
        pass

    @abstractmethod
    async def find_by_id(self, tag_id: uuid.UUID) -> Optional[Tag]:
        pass

    @abstractmethod
    async def list_all(self) -> List[Tag]:
        """Every tag, ordered by name."""
        pass

    @abstractmethod
    async def delete(self, tag_id: uuid.UUID) -> bool:
        pass

    @abstractmethod
    async def attach(self, contact_id: uuid.UUID, tag_id: uuid.UUID) -> bool:
        """
        Link a tag to a contact.

        Returns:
            False when the link already existed
        """
        pass

    @abstractmethod
    async def detach(self, contact_id: uuid.UUID, tag_id: uuid.UUID) -> bool:
        """
        Remove a tag from a contact.

        Returns:
            True if a link was removed
        """
        pass

    @abstractmethod
    async def tags_for_contact(self, contact_id: uuid.UUID) -> List[Tag]:
        pass

    @abstractmethod
    async def tags_for_contacts(self, contact_ids: Iterable[uuid.UUID]) -> Dict[uuid.UUID, List[Tag]]:
        """
        Tags of several contacts at once.

        Returns:
            Mapping of contact id to its tags; contacts without tags are absent
        """
        pass

    @abstractmethod
    async def contacts_for_tag(self, tag_id: uuid.UUID) -> List[Contact]:
        pass
