"""
Product repository port (interface).
"""
import uuid
from abc import ABC, abstractmethod
from typing import List, Optional

from products.domain.product import Product


class ProductRepository(ABC):
    """
    Abstract repository for Product entities.
    """

    @abstractmethod
    async def save(self, product: Product) -> Product:
        """
        Save a product entity (insert or update).

        Args:
            product: Product entity to save

        Returns:
            Saved product entity
        """
        pass

    @abstractmethod
    async def find_by_id(self, product_id: uuid.UUID) -> Optional[Product]:
        """
        Find a product by ID.

        Args:
            product_id: Product UUID

        Returns:
            Product entity or None if not found
        """
        pass

    @abstractmethod
    async def list_all(self) -> List[Product]:
        """List products ordered by name."""
        pass

    @abstractmethod
    async def search(self, query: str) -> List[Product]:
        """Products whose name contains ``query``, ordered by name."""
        pass

    @abstractmethod
    async def delete(self, product_id: uuid.UUID) -> bool:
        """
        Delete a product.

        Args:
            product_id: Product UUID

        Returns:
            True if a row was deleted
        """
        pass

    @abstractmethod
    async def count(self) -> int:
        """Number of products."""
        pass
