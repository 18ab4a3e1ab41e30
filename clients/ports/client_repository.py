"""
Client repository port (interface).
"""
import uuid
from abc import ABC, abstractmethod
from typing import List, Optional

from clients.domain.client import Client


class ClientRepository(ABC):
    """
    Abstract repository for Client entities.
    """

    @abstractmethod
    async def save(self, client: Client) -> Client:
        """
        Save a client entity (insert or update).

        Args:
            client: Client entity to save

        Returns:
            Saved client entity
        """
        pass

    @abstractmethod
    async def find_by_id(self, client_id: uuid.UUID) -> Optional[Client]:
        """
        Find a client by ID.

        Args:
            client_id: Client UUID

        Returns:
            Client entity or None if not found
        """
        pass

    @abstractmethod
    async def list_all(self) -> List[Client]:
        """
        List clients, newest first.

        Returns:
            List of Client entities
        """
        pass

    @abstractmethod
    async def search(self, query: str) -> List[Client]:
        """
        Case-insensitive match on name, email or company, newest first.

        Args:
            query: Text to look for

        Returns:
            List of matching Client entities
        """
        pass

    @abstractmethod
    async def delete(self, client_id: uuid.UUID) -> bool:
        """
        Delete a client.

        Args:
            client_id: Client UUID

        Returns:
            True if a row was deleted
        """
        pass

    @abstractmethod
    async def count(self) -> int:
        """Number of clients."""
        pass
