"""
Django implementation of ClientRepository port.
"""
import uuid
from typing import List, Optional

from asgiref.sync import sync_to_async
from django.db.models import Q

from clients.domain.client import Client
from clients.infrastructure.models import Client as ClientModel
from clients.ports.client_repository import ClientRepository


class DjangoClientRepository(ClientRepository):
    """
    Django ORM implementation of ClientRepository.
    """

    def _to_domain(self, model: ClientModel) -> Client:
        """
        Convert Django model to domain entity.

        Args:
            model: Django Client model

        Returns:
            Client domain entity
        """
        return Client(
            id=model.id,
            name=model.name,
            email=model.email,
            phone=model.phone,
            company=model.company,
            created_at=model.created_at,
            created_by=model.created_by_id,
        )

    @sync_to_async
    def save(self, client: Client) -> Client:
        model, _ = ClientModel.objects.update_or_create(
            id=client.id,
            defaults={
                "name": client.name,
                "email": client.email,
                "phone": client.phone,
                "company": client.company,
                "created_by_id": client.created_by,
            },
        )
        return self._to_domain(model)

    @sync_to_async
    def find_by_id(self, client_id: uuid.UUID) -> Optional[Client]:
        try:
            return self._to_domain(ClientModel.objects.get(id=client_id))
        except ClientModel.DoesNotExist:
            return None

    @sync_to_async
    def list_all(self) -> List[Client]:
        return [self._to_domain(model) for model in ClientModel.objects.order_by("-created_at")]

    @sync_to_async
    def search(self, query: str) -> List[Client]:
        models = ClientModel.objects.filter(
            Q(name__icontains=query) | Q(email__icontains=query) | Q(company__icontains=query)
        ).order_by("-created_at")
        return [self._to_domain(model) for model in models]

    @sync_to_async
    def delete(self, client_id: uuid.UUID) -> bool:
        deleted, _ = ClientModel.objects.filter(id=client_id).delete()
        return deleted > 0

    @sync_to_async
    def count(self) -> int:
        return ClientModel.objects.count()
