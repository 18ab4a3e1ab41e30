"""
Product service.
"""

import logging
import uuid
from typing import Any, Dict, List, Optional

from core.application.result import ServiceResult, service_operation, validating
from core.domain.events import EventBus
from core.domain.exceptions import ProductNotFoundError, ValidationError
from products.domain.events import ProductCreated, ProductDeleted
from products.domain.product import Product
from products.ports.product_repository import ProductRepository

logger = logging.getLogger(__name__)


class ProductService:
    """CRUD and search over the product catalogue."""

    def __init__(self, product_repository: ProductRepository, event_bus: EventBus):
        self.product_repository = product_repository
        self.event_bus = event_bus

    async def _get_or_raise(self, product_id: uuid.UUID) -> Product:
        product = await self.product_repository.find_by_id(product_id)
        if product is None:
            raise ProductNotFoundError(f"Product {product_id} not found")
        return product

    @service_operation("list products", empty=list)
    async def get_all(self) -> ServiceResult[List[Product]]:
        return ServiceResult.ok(await self.product_repository.list_all())

    @service_operation("get product")
    async def get_by_id(self, product_id: uuid.UUID) -> ServiceResult[Product]:
        return ServiceResult.ok(await self._get_or_raise(product_id))

    @service_operation("create product")
    async def create(self, data: Dict[str, Any], actor: Optional[str] = None) -> ServiceResult[Product]:
        """
        Create a product.

        Args:
            data: ``name``, ``description``, ``price_one_payment``,
                ``price_subscription``
            actor: Who creates the product, for the audit trail
        """
        if not data.get("name"):
            raise ValidationError("Product name is required")
        with validating():
            product = Product.create(
                name=data["name"],
                description=data.get("description"),
                price_one_payment=data.get("price_one_payment", 0),
                price_subscription=data.get("price_subscription", 0),
            )
        saved = await self.product_repository.save(product)
        logger.info("Product %s created", saved.id)
        await self.event_bus.publish(ProductCreated(product_id=saved.id, name=saved.name, actor=actor))
        return ServiceResult.ok(saved, message="Product created")

    @service_operation("update product")
    async def update(self, product_id: uuid.UUID, data: Dict[str, Any]) -> ServiceResult[Product]:
        product = await self._get_or_raise(product_id)
        with validating():
            updated = product.with_changes(**data)
        saved = await self.product_repository.save(updated)
        return ServiceResult.ok(saved, message="Product updated")

    @service_operation("delete product")
    async def delete(self, product_id: uuid.UUID, actor: Optional[str] = None) -> ServiceResult[None]:
        if not await self.product_repository.delete(product_id):
            raise ProductNotFoundError(f"Product {product_id} not found")
        logger.info("Product %s deleted", product_id)
        await self.event_bus.publish(ProductDeleted(product_id=product_id, actor=actor))
        return ServiceResult.ok(None, message="Product deleted")

    @service_operation("search products", empty=list)
    async def search(self, query: str) -> ServiceResult[List[Product]]:
        if not query or not query.strip():
            return ServiceResult.ok(await self.product_repository.list_all())
        return ServiceResult.ok(await self.product_repository.search(query.strip()))
