"""
Client service.
"""

import logging
import uuid
from datetime import date
from typing import Any, Dict, List, Optional

from django.utils import timezone

from clients.domain.client import Client, ClientWithLicenses
from clients.domain.events import ClientCreated, ClientDeleted
from clients.ports.client_repository import ClientRepository
from core.application.result import ServiceResult, service_operation, validating
from core.domain.events import EventBus
from core.domain.exceptions import ClientNotFoundError, NotAuthenticatedError, ValidationError
from licenses.domain.license import LicenseFilters
from licenses.ports.license_repository import LicenseRepository

logger = logging.getLogger(__name__)


class ClientService:
    """CRUD and search over clients, plus the client-with-licenses view."""

    def __init__(
        self,
        client_repository: ClientRepository,
        license_repository: LicenseRepository,
        event_bus: EventBus,
    ):
        self.client_repository = client_repository
        self.license_repository = license_repository
        self.event_bus = event_bus

    async def _get_or_raise(self, client_id: uuid.UUID) -> Client:
        client = await self.client_repository.find_by_id(client_id)
        if client is None:
            raise ClientNotFoundError(f"Client {client_id} not found")
        return client

    @service_operation("list clients", empty=list)
    async def get_all(self) -> ServiceResult[List[Client]]:
        return ServiceResult.ok(await self.client_repository.list_all())

    @service_operation("get client")
    async def get_by_id(self, client_id: uuid.UUID) -> ServiceResult[Client]:
        return ServiceResult.ok(await self._get_or_raise(client_id))

    @service_operation("get client with licenses")
    async def get_with_licenses(
        self, client_id: uuid.UUID, today: Optional[date] = None
    ) -> ServiceResult[ClientWithLicenses]:
        client = await self._get_or_raise(client_id)
        licenses = await self.license_repository.find_full(
            LicenseFilters(client_id=client_id), today or timezone.localdate()
        )
        return ServiceResult.ok(ClientWithLicenses(client=client, licenses=licenses))

    @service_operation("create client")
    async def create(
        self, data: Dict[str, Any], user_id: Optional[int], actor: Optional[str] = None
    ) -> ServiceResult[Client]:
        """
        Create a client owned by the signed-in user.

        Args:
            data: ``name``, ``email``, ``phone``, ``company``
            user_id: Id of the current user, stored as ``created_by``
            actor: Who creates the client, for the audit trail
        """
        if user_id is None:
            raise NotAuthenticatedError()
        if not data.get("name") or not data.get("email"):
            raise ValidationError("Name and email are required")
        with validating():
            client = Client.create(
                name=data["name"],
                email=data["email"],
                phone=data.get("phone"),
                company=data.get("company"),
                created_by=user_id,
            )
        saved = await self.client_repository.save(client)
        logger.info("Client %s created by user %s", saved.id, user_id)
        await self.event_bus.publish(ClientCreated(client_id=saved.id, email=saved.email, actor=actor))
        return ServiceResult.ok(saved, message="Client created")

    @service_operation("update client")
    async def update(self, client_id: uuid.UUID, data: Dict[str, Any]) -> ServiceResult[Client]:
        client = await self._get_or_raise(client_id)
        with validating():
            updated = client.with_changes(**data)
        saved = await self.client_repository.save(updated)
        return ServiceResult.ok(saved, message="Client updated")

    @service_operation("delete client")
    async def delete(self, client_id: uuid.UUID, actor: Optional[str] = None) -> ServiceResult[None]:
        if not await self.client_repository.delete(client_id):
            raise ClientNotFoundError(f"Client {client_id} not found")
        logger.info("Client %s deleted", client_id)
        await self.event_bus.publish(ClientDeleted(client_id=client_id, actor=actor))
        return ServiceResult.ok(None, message="Client deleted")

    @service_operation("search clients", empty=list)
    async def search(self, query: str) -> ServiceResult[List[Client]]:
        if not query or not query.strip():
            return ServiceResult.ok(await self.client_repository.list_all())
        return ServiceResult.ok(await self.client_repository.search(query.strip()))
