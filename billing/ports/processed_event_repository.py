"""
Processed webhook event repository port (interface).
"""
from abc import ABC, abstractmethod


class ProcessedEventRepository(ABC):
    """Ledger of webhook event ids already handled."""

    @abstractmethod
    async def claim(self, event_id: str, event_type: str) -> bool:
        """
        Reserve an event id for processing.

        Returns:
            True if the id was new, False if it was seen before
        """
        pass

    @abstractmethod
    async def mark(self, event_id: str, outcome: str) -> None:
        """Record how a claimed event ended."""
        pass

    @abstractmethod
    async def release(self, event_id: str) -> None:
        """Forget a claimed event so a redelivery is processed again."""
        pass
