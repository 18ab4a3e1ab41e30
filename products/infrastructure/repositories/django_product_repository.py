"""
Django implementation of ProductRepository port.
"""
import uuid
from typing import List, Optional

from asgiref.sync import sync_to_async
from django.db.models import ProtectedError

from core.domain.exceptions import ValidationError
from products.domain.product import Product
from products.infrastructure.models import Product as ProductModel
from products.ports.product_repository import ProductRepository


class DjangoProductRepository(ProductRepository):
    """
    Django ORM implementation of ProductRepository.
    """

    def _to_domain(self, model: ProductModel) -> Product:
        """
        Convert Django model to domain entity.

        Args:
            model: Django Product model

        Returns:
            Product domain entity
        """
        return Product(
            id=model.id,
            name=model.name,
            description=model.description,
            price_one_payment=model.price_one_payment,
            price_subscription=model.price_subscription,
            created_at=model.created_at,
        )

    @sync_to_async
    def save(self, product: Product) -> Product:
        model, _ = ProductModel.objects.update_or_create(
            id=product.id,
            defaults={
                "name": product.name,
                "description": product.description,
                "price_one_payment": product.price_one_payment,
                "price_subscription": product.price_subscription,
            },
        )
        return self._to_domain(model)

    @sync_to_async
    def find_by_id(self, product_id: uuid.UUID) -> Optional[Product]:
        try:
            return self._to_domain(ProductModel.objects.get(id=product_id))
        except ProductModel.DoesNotExist:
            return None

    @sync_to_async
    def list_all(self) -> List[Product]:
        return [self._to_domain(model) for model in ProductModel.objects.order_by("name")]

    @sync_to_async
    def search(self, query: str) -> List[Product]:
        models = ProductModel.objects.filter(name__icontains=query).order_by("name")
        return [self._to_domain(model) for model in models]

    @sync_to_async
    def delete(self, product_id: uuid.UUID) -> bool:
        try:
            deleted, _ = ProductModel.objects.filter(id=product_id).delete()
        except ProtectedError as exc:
            raise ValidationError("Product has licenses and cannot be deleted") from exc
        return deleted > 0

    @sync_to_async
    def count(self) -> int:
        return ProductModel.objects.count()
