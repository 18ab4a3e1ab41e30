"""
Django implementation of ContactRepository port.
"""
import uuid
from datetime import datetime
from typing import List, Optional, Tuple

from asgiref.sync import sync_to_async
from django.db import transaction
from django.db.models import Count, Q

from contacts.domain.contact import Contact, ContactFilters, ContactStats
from contacts.infrastructure.models import Contact as ContactModel
from contacts.ports.contact_repository import ContactRepository
from core.application.result import Pagination
from core.domain.value_objects import ContactStatus, ContactType


def contact_to_domain(model: ContactModel) -> Contact:
    """
    Convert Django model to domain entity.

    Shared with the tag repository, which also returns contacts.
    """
    return Contact(
        id=model.id,
        first_name=model.first_name,
        last_name=model.last_name,
        email=model.email,
        phone=model.phone,
        company_name=model.company_name,
        job_title=model.job_title,
        contact_type=ContactType(model.contact_type),
        status=ContactStatus(model.status),
        source=model.source,
        notes=model.notes,
        score=model.score,
        assigned_to=model.assigned_to_id,
        user_id=model.user_id,
        last_contact_date=model.last_contact_date,
        created_at=model.created_at,
        updated_at=model.updated_at,
    )


class DjangoContactRepository(ContactRepository):
    """
    Django ORM implementation of ContactRepository.
    """

    def _defaults(self, contact: Contact) -> dict:
        return {
            "first_name": contact.first_name,
            "last_name": contact.last_name,
            "email": contact.email,
            "phone": contact.phone,
            "company_name": contact.company_name,
            "job_title": contact.job_title,
            "contact_type": contact.contact_type.value,
            "status": contact.status.value,
            "source": contact.source,
            "notes": contact.notes,
            "score": contact.score,
            "assigned_to_id": contact.assigned_to,
            "user_id": contact.user_id,
            "last_contact_date": contact.last_contact_date,
        }

    @sync_to_async
    def save(self, contact: Contact) -> Contact:
        """
        Save a contact entity.

        Args:
            contact: Contact entity to save

        Returns:
            Saved contact entity
        """
        model, _ = ContactModel.objects.update_or_create(
            id=contact.id, defaults=self._defaults(contact)
        )
        return contact_to_domain(model)

    @sync_to_async
    def save_many(self, contacts: List[Contact]) -> List[Contact]:
        with transaction.atomic():
            models = [
                ContactModel.objects.create(id=contact.id, **self._defaults(contact))
                for contact in contacts
            ]
        return [contact_to_domain(model) for model in models]

    @sync_to_async
    def find_by_id(self, contact_id: uuid.UUID) -> Optional[Contact]:
        try:
            return contact_to_domain(ContactModel.objects.get(id=contact_id))
        except ContactModel.DoesNotExist:
            return None

    @sync_to_async
    def find_page(self, filters: ContactFilters) -> Tuple[List[Contact], int]:
        """
        One page of contacts matching ``filters``, newest first.

        Args:
            filters: Listing filters and page window

        Returns:
            Tuple of (contacts on the page, total matching rows)
        """
        queryset = ContactModel.objects.all()
        if filters.contact_type is not None:
            queryset = queryset.filter(contact_type=filters.contact_type.value)
        if filters.status:
            queryset = queryset.filter(status=filters.status)
        if filters.assigned_to is not None:
            queryset = queryset.filter(assigned_to_id=filters.assigned_to)
        if filters.tag_id is not None:
            queryset = queryset.filter(contact_tags__tag_id=filters.tag_id)
        if filters.search:
            term = filters.search
            queryset = queryset.filter(
                Q(first_name__icontains=term)
                | Q(last_name__icontains=term)
                | Q(email__icontains=term)
                | Q(company_name__icontains=term)
            )

        total = queryset.count()
        start, end = Pagination.bounds(filters.page, filters.per_page)
        models = queryset.order_by("-created_at")[start:end + 1]
        return [contact_to_domain(model) for model in models], total

    @sync_to_async
    def search(self, query: str, limit: int) -> List[Contact]:
        models = ContactModel.objects.filter(
            Q(first_name__icontains=query)
            | Q(last_name__icontains=query)
            | Q(email__icontains=query)
            | Q(company_name__icontains=query)
            | Q(phone__icontains=query)
        ).order_by("-created_at")[:limit]
        return [contact_to_domain(model) for model in models]

    @sync_to_async
    def list_all(self) -> List[Contact]:
        return [contact_to_domain(model) for model in ContactModel.objects.order_by("-created_at")]

    @sync_to_async
    def email_exists(self, email: str, exclude_id: Optional[uuid.UUID] = None) -> bool:
        queryset = ContactModel.objects.filter(email__iexact=email.strip())
        if exclude_id is not None:
            queryset = queryset.exclude(id=exclude_id)
        return queryset.exists()

    @sync_to_async
    def delete(self, contact_id: uuid.UUID) -> bool:
        deleted, _ = ContactModel.objects.filter(id=contact_id).delete()
        return deleted > 0

    @sync_to_async
    def stats_for_user(self, user_id: int, month_start: datetime) -> ContactStats:
        """
        Counters over the contacts owned by ``user_id``.

        Args:
            user_id: Owner of the contacts
            month_start: Start of the current month

        Returns:
            ContactStats
        """
        owned = ContactModel.objects.filter(user_id=user_id)
        by_type = {
            row["contact_type"]: row["total"]
            for row in owned.values("contact_type").annotate(total=Count("id")).order_by()
        }
        by_status = {
            row["status"]: row["total"]
            for row in owned.values("status").annotate(total=Count("id")).order_by()
        }
        return ContactStats(
            total=owned.count(),
            new_this_month=owned.filter(created_at__gte=month_start).count(),
            by_type=by_type,
            by_status=by_status,
        )

    @sync_to_async
    def count(self) -> int:
        return ContactModel.objects.count()
