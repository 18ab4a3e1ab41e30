"""
Django implementation of LicenseRepository port.

This adapter converts between domain entities and Django ORM models.
"""
import uuid
from datetime import date, datetime
from typing import Any, Dict, List, Optional, Tuple

from asgiref.sync import sync_to_async
from django.db import transaction
from django.db.models import Count, Q

from core.domain.value_objects import LicenseStatus, LicenseType
from licenses.domain.license import License, LicenseFilters, LicenseFull
from licenses.infrastructure.models import License as LicenseModel
from licenses.ports.license_repository import LicenseRepository


class DjangoLicenseRepository(LicenseRepository):
    """
    Django ORM implementation of LicenseRepository.

    This adapter:
    1. Converts Django models to domain entities
    2. Converts domain entities to Django models
    3. Builds the joined LicenseFull read model with select_related
    """

    def _to_domain(self, model: LicenseModel) -> License:
        """
        Convert Django model to domain entity.

        Args:
            model: Django License model

        Returns:
            License domain entity
        """
        return License(
            id=model.id,
            client_id=model.client_id,
            product_id=model.product_id,
            type=LicenseType(model.type),
            start_date=model.start_date,
            end_date=model.end_date,
            status=LicenseStatus(model.status),
            created_at=model.created_at,
            stripe_customer_id=model.stripe_customer_id,
            stripe_subscription_id=model.stripe_subscription_id,
            last_payment_event_at=model.last_payment_event_at,
        )

    def _to_full(self, model: LicenseModel, today: Optional[date] = None) -> LicenseFull:
        """
        Convert a model loaded with its client and product to the read model.

        Args:
            model: Django License model with related rows selected
            today: Reference day for ``is_expired``

        Returns:
            LicenseFull
        """
        return LicenseFull.build(
            license=self._to_domain(model),
            client_name=model.client.name,
            client_email=model.client.email,
            client_company=model.client.company,
            product_name=model.product.name,
            product_description=model.product.description,
            price_one_payment=model.product.price_one_payment,
            price_subscription=model.product.price_subscription,
            today=today,
        )

    def _joined(self):
        return LicenseModel.objects.select_related("client", "product")

    @sync_to_async
    def save(self, license: License) -> License:
        """
        Save a license entity.

        Args:
            license: License entity to save

        Returns:
            Saved license entity
        """
        return self._write(license)

    def _write(self, license: License) -> License:
        model, _ = LicenseModel.objects.update_or_create(
            id=license.id,
            defaults={
                "client_id": license.client_id,
                "product_id": license.product_id,
                "type": license.type.value,
                "start_date": license.start_date,
                "end_date": license.end_date,
                "status": license.status.value,
                "stripe_customer_id": license.stripe_customer_id,
                "stripe_subscription_id": license.stripe_subscription_id,
                "last_payment_event_at": license.last_payment_event_at,
            },
        )
        return self._to_domain(model)

    @sync_to_async
    def apply_payment_event(
        self, license_id: uuid.UUID, occurred_at: datetime, **changes: Any
    ) -> Optional[Tuple[License, License]]:
        with transaction.atomic():
            try:
                model = LicenseModel.objects.select_for_update().get(id=license_id)
            except LicenseModel.DoesNotExist:
                return None
            before = self._to_domain(model)
            after = self._write(before.apply_payment_event(occurred_at, **changes))
        return before, after

    @sync_to_async
    def find_by_id(self, license_id: uuid.UUID) -> Optional[License]:
        """
        Find a license by ID.

        Args:
            license_id: License UUID

        Returns:
            License entity or None if not found
        """
        try:
            return self._to_domain(LicenseModel.objects.get(id=license_id))
        except LicenseModel.DoesNotExist:
            return None

    @sync_to_async
    def find_full_by_id(self, license_id: uuid.UUID) -> Optional[LicenseFull]:
        try:
            return self._to_full(self._joined().get(id=license_id))
        except LicenseModel.DoesNotExist:
            return None

    @sync_to_async
    def find_full(self, filters: LicenseFilters, today: date) -> List[LicenseFull]:
        """
        List joined licenses matching ``filters``, newest first.

        Args:
            filters: Listing filters
            today: Reference day for the expiry filter

        Returns:
            List of LicenseFull
        """
        queryset = self._joined()
        if filters.status is not None:
            queryset = queryset.filter(status=filters.status.value)
        if filters.type is not None:
            queryset = queryset.filter(type=filters.type.value)
        if filters.client_id is not None:
            queryset = queryset.filter(client_id=filters.client_id)
        if filters.product_id is not None:
            queryset = queryset.filter(product_id=filters.product_id)
        if filters.expired is True:
            queryset = queryset.filter(end_date__lt=today)
        elif filters.expired is False:
            queryset = queryset.filter(Q(end_date__isnull=True) | Q(end_date__gte=today))

        return [self._to_full(model, today) for model in queryset.order_by("-created_at")]

    @sync_to_async
    def find_by_subscription_id(self, subscription_id: str) -> Optional[License]:
        model = LicenseModel.objects.filter(stripe_subscription_id=subscription_id).first()
        return self._to_domain(model) if model else None

    @sync_to_async
    def find_lapsed_subscriptions(self, today: date) -> List[License]:
        models = LicenseModel.objects.filter(
            type=LicenseType.SUBSCRIPTION.value,
            status=LicenseStatus.ACTIVE.value,
            end_date__lt=today,
        )
        return [self._to_domain(model) for model in models]

    @sync_to_async
    def delete(self, license_id: uuid.UUID) -> bool:
        deleted, _ = LicenseModel.objects.filter(id=license_id).delete()
        return deleted > 0

    @sync_to_async
    def count_by_status(self) -> Dict[str, int]:
        rows = LicenseModel.objects.values("status").annotate(total=Count("id")).order_by()
        return {row["status"]: row["total"] for row in rows}

    @sync_to_async
    def count_expired(self, today: date) -> int:
        return LicenseModel.objects.filter(end_date__lt=today).count()
