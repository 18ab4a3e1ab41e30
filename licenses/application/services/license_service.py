"""
License service.

Listings use the joined LicenseFull read model. Creation, deletion, status
changes and end date moves are published as domain events.
"""

import logging
import uuid
from datetime import date
from typing import Any, Dict, List, Optional

from django.utils import timezone

from clients.ports.client_repository import ClientRepository
from core.application.parsing import parse_date, parse_enum, parse_uuid
from core.application.result import ServiceResult, service_operation, validating
from core.domain.events import EventBus
from core.domain.exceptions import (
    ClientNotFoundError,
    LicenseNotFoundError,
    ProductNotFoundError,
    ValidationError,
)
from core.domain.value_objects import LicenseStatus, LicenseType
from core.metrics import license_status_changes_total
from licenses.domain.events import (
    LicenseCreated,
    LicenseDeleted,
    LicenseEndDateChanged,
    LicenseStatusChanged,
)
from licenses.domain.license import License, LicenseFilters, LicenseFull
from licenses.ports.license_repository import LicenseRepository
from products.ports.product_repository import ProductRepository

logger = logging.getLogger(__name__)


class LicenseService:
    """Licenses of clients over products."""

    def __init__(
        self,
        license_repository: LicenseRepository,
        client_repository: ClientRepository,
        product_repository: ProductRepository,
        event_bus: EventBus,
    ):
        self.license_repository = license_repository
        self.client_repository = client_repository
        self.product_repository = product_repository
        self.event_bus = event_bus

    async def _get_or_raise(self, license_id: uuid.UUID) -> License:
        license = await self.license_repository.find_by_id(license_id)
        if license is None:
            raise LicenseNotFoundError(f"License {license_id} not found")
        return license

    async def _publish_status_change(
        self, before: License, after: License, reason: str, actor: Optional[str]
    ) -> None:
        if before.status is after.status:
            return
        license_status_changes_total.labels(status=after.status.value).inc()
        await self.event_bus.publish(
            LicenseStatusChanged(
                license_id=after.id,
                old_status=before.status.value,
                new_status=after.status.value,
                reason=reason,
                actor=actor,
            )
        )

    @service_operation("list licenses", empty=list)
    async def get_all(self) -> ServiceResult[List[LicenseFull]]:
        return await self.get_filtered(LicenseFilters())

    @service_operation("get license")
    async def get_by_id(self, license_id: uuid.UUID) -> ServiceResult[License]:
        return ServiceResult.ok(await self._get_or_raise(license_id))

    @service_operation("get full license")
    async def get_full_by_id(self, license_id: uuid.UUID) -> ServiceResult[LicenseFull]:
        license_full = await self.license_repository.find_full_by_id(license_id)
        if license_full is None:
            raise LicenseNotFoundError(f"License {license_id} not found")
        return ServiceResult.ok(license_full)

    @service_operation("filter licenses", empty=list)
    async def get_filtered(
        self, filters: LicenseFilters, today: Optional[date] = None
    ) -> ServiceResult[List[LicenseFull]]:
        licenses = await self.license_repository.find_full(filters, today or timezone.localdate())
        return ServiceResult.ok(licenses)

    async def get_by_status(self, status: LicenseStatus) -> ServiceResult[List[LicenseFull]]:
        return await self.get_filtered(LicenseFilters(status=status))

    async def get_expired(self) -> ServiceResult[List[LicenseFull]]:
        return await self.get_filtered(LicenseFilters(expired=True))

    async def get_active(self) -> ServiceResult[List[LicenseFull]]:
        """Licenses with status ``activa`` that have not expired."""
        return await self.get_filtered(LicenseFilters(status=LicenseStatus.ACTIVE, expired=False))

    async def get_by_client(self, client_id: uuid.UUID) -> ServiceResult[List[LicenseFull]]:
        return await self.get_filtered(LicenseFilters(client_id=client_id))

    @service_operation("create license")
    async def create(self, data: Dict[str, Any], actor: Optional[str] = None) -> ServiceResult[License]:
        """
        Create a license; status defaults to ``activa``.

        Args:
            data: ``client_id``, ``product_id``, ``type``, ``start_date``,
                optional ``end_date`` and ``status``
            actor: Who creates the license, for the audit trail
        """
        if not data.get("client_id") or not data.get("product_id") or not data.get("type"):
            raise ValidationError("client_id, product_id and type are required")

        client_id = parse_uuid(data["client_id"], "client_id")
        product_id = parse_uuid(data["product_id"], "product_id")
        if await self.client_repository.find_by_id(client_id) is None:
            raise ClientNotFoundError(f"Client {client_id} not found")
        if await self.product_repository.find_by_id(product_id) is None:
            raise ProductNotFoundError(f"Product {product_id} not found")

        status = parse_enum(LicenseStatus, data["status"], "license status") if data.get("status") else None
        with validating():
            license = License.create(
                client_id=client_id,
                product_id=product_id,
                license_type=parse_enum(LicenseType, data["type"], "license type"),
                start_date=parse_date(data.get("start_date")) or timezone.localdate(),
                end_date=parse_date(data.get("end_date")),
                status=status,
            )
        saved = await self.license_repository.save(license)
        logger.info("License %s created for client %s", saved.id, client_id, extra={"actor": actor})
        await self.event_bus.publish(
            LicenseCreated(
                license_id=saved.id,
                client_id=client_id,
                product_id=product_id,
                status=saved.status.value,
                actor=actor,
            )
        )
        return ServiceResult.ok(saved, message="License created")

    @service_operation("update license")
    async def update(
        self, license_id: uuid.UUID, data: Dict[str, Any], actor: Optional[str] = None
    ) -> ServiceResult[License]:
        license = await self._get_or_raise(license_id)
        changes: Dict[str, Any] = {}
        if "type" in data:
            changes["type"] = parse_enum(LicenseType, data["type"], "license type")
        if "status" in data:
            changes["status"] = parse_enum(LicenseStatus, data["status"], "license status")
        if "start_date" in data:
            changes["start_date"] = parse_date(data["start_date"]) or license.start_date
        if "end_date" in data:
            changes["end_date"] = parse_date(data["end_date"])

        with validating():
            updated = license.with_changes(**changes)
        saved = await self.license_repository.save(updated)
        await self._publish_status_change(license, saved, "manual", actor)
        if license.end_date != saved.end_date:
            await self.event_bus.publish(
                LicenseEndDateChanged(
                    license_id=saved.id,
                    old_end_date=license.end_date,
                    new_end_date=saved.end_date,
                    actor=actor,
                )
            )
        return ServiceResult.ok(saved, message="License updated")

    async def update_status(
        self, license_id: uuid.UUID, status, actor: Optional[str] = None
    ) -> ServiceResult[License]:
        return await self.update(license_id, {"status": status}, actor=actor)

    @service_operation("delete license")
    async def delete(self, license_id: uuid.UUID, actor: Optional[str] = None) -> ServiceResult[None]:
        if not await self.license_repository.delete(license_id):
            raise LicenseNotFoundError(f"License {license_id} not found")
        logger.info("License %s deleted", license_id)
        await self.event_bus.publish(LicenseDeleted(license_id=license_id, actor=actor))
        return ServiceResult.ok(None, message="License deleted")

    @service_operation("count licenses by status", empty=dict)
    async def count_by_status(self) -> ServiceResult[Dict[str, int]]:
        """Counts for every status, zero-filled."""
        stored = await self.license_repository.count_by_status()
        counts = {status.value: stored.get(status.value, 0) for status in LicenseStatus}
        return ServiceResult.ok(counts)

    @service_operation("sweep lapsed subscriptions", empty=list)
    async def sweep_lapsed_subscriptions(
        self, today: Optional[date] = None, dry_run: bool = False
    ) -> ServiceResult[List[License]]:
        """
        Move active subscriptions whose end date has passed to ``pendiente_pago``.

        Args:
            today: Reference day (defaults to the current local date)
            dry_run: Only report the licenses that would change

        Returns:
            Envelope with the affected licenses
        """
        lapsed = await self.license_repository.find_lapsed_subscriptions(
            today or timezone.localdate()
        )
        if dry_run:
            return ServiceResult.ok(lapsed, message=f"{len(lapsed)} licenses would be updated")

        updated = []
        for license in lapsed:
            saved = await self.license_repository.save(
                license.with_status(LicenseStatus.PENDING_PAYMENT)
            )
            await self._publish_status_change(license, saved, "expiration_sweep", "system")
            updated.append(saved)
            logger.info("License %s moved to pendiente_pago after expiring", license.id)
        return ServiceResult.ok(updated, message=f"{len(updated)} licenses updated")
