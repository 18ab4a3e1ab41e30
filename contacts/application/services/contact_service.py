"""
Contact service.

CRUD, paginated listing, search and bulk import over contacts, plus the
contact-centric views of interactions, deals and tasks.
"""

import logging
import uuid
from typing import Any, Dict, List, Optional

from django.conf import settings
from django.utils import timezone

from contacts.domain.contact import Contact, ContactFilters, ContactStats, ContactWithTags
from contacts.domain.events import ContactCreated
from contacts.domain.interaction import Interaction, InteractionType
from contacts.ports.contact_repository import ContactRepository
from contacts.ports.interaction_repository import InteractionRepository
from contacts.ports.tag_repository import TagRepository
from core.application.parsing import parse_datetime, parse_enum, parse_uuid
from core.application.result import Pagination, ServiceResult, service_operation, validating
from core.domain.events import EventBus
from core.domain.exceptions import (
    ContactNotFoundError,
    DuplicateEmailError,
    NotAuthenticatedError,
    ValidationError,
)
from core.domain.value_objects import ContactStatus, ContactType
from opportunities.domain.opportunity import OpportunityDetail, OpportunityFilters
from opportunities.ports.opportunity_repository import OpportunityRepository
from tasks.domain.task import TaskDetail, TaskFilters
from tasks.ports.task_repository import TaskRepository

logger = logging.getLogger(__name__)

TEXT_FIELDS = ("last_name", "phone", "company_name", "job_title", "source", "notes")


def _clean(value):
    if isinstance(value, str):
        return value.strip() or None
    return value


def _to_int(value, label: str, default: int) -> int:
    if value in (None, ""):
        return default
    try:
        return int(value)
    except (TypeError, ValueError) as exc:
        raise ValidationError(f"Invalid {label}: {value}") from exc


class ContactService:
    """Contacts and everything hanging off them."""

    def __init__(
        self,
        contact_repository: ContactRepository,
        tag_repository: TagRepository,
        interaction_repository: InteractionRepository,
        opportunity_repository: OpportunityRepository,
        task_repository: TaskRepository,
        event_bus: EventBus,
    ):
        self.contact_repository = contact_repository
        self.tag_repository = tag_repository
        self.interaction_repository = interaction_repository
        self.opportunity_repository = opportunity_repository
        self.task_repository = task_repository
        self.event_bus = event_bus

    async def _get_or_raise(self, contact_id: uuid.UUID) -> Contact:
        contact = await self.contact_repository.find_by_id(contact_id)
        if contact is None:
            raise ContactNotFoundError(f"Contact {contact_id} not found")
        return contact

    def _build(self, data: Dict[str, Any], user_id: Optional[int]) -> Contact:
        if not _clean(data.get("first_name")):
            raise ValidationError("First name is required")
        contact_type = parse_enum(ContactType, data.get("contact_type") or ContactType.LEAD, "contact type")
        status = parse_enum(ContactStatus, data.get("status") or ContactStatus.NEW, "contact status")
        with validating():
            return Contact.create(
                first_name=data["first_name"],
                email=_clean(data.get("email")),
                contact_type=contact_type,
                status=status,
                score=data.get("score") or 0,
                assigned_to=data.get("assigned_to"),
                user_id=user_id,
                **{name: _clean(data.get(name)) for name in TEXT_FIELDS},
            )

    def _changes(self, data: Dict[str, Any]) -> Dict[str, Any]:
        changes: Dict[str, Any] = {}
        for name in ("first_name", "email") + TEXT_FIELDS:
            if name in data:
                changes[name] = _clean(data[name])
        if "contact_type" in data:
            changes["contact_type"] = parse_enum(ContactType, data["contact_type"], "contact type")
        if "status" in data:
            changes["status"] = parse_enum(ContactStatus, data["status"], "contact status")
        if "score" in data:
            changes["score"] = data["score"]
        if "assigned_to" in data:
            changes["assigned_to"] = data["assigned_to"]
        return changes

    @service_operation("list contacts", empty=list)
    async def get_contacts(self, filters: Optional[Dict[str, Any]] = None) -> ServiceResult[List[Contact]]:
        """
        One page of contacts, newest first.

        Args:
            filters: Optional ``contact_type``, ``status``, ``assigned_to``,
                ``tag_id``, ``search``, ``page`` (default 1) and ``per_page``
                (default 50)

        Returns:
            Envelope with the page and its ``pagination``
        """
        filters = filters or {}
        contact_type = filters.get("contact_type")
        with validating():
            query = ContactFilters(
                contact_type=parse_enum(ContactType, contact_type, "contact type") if contact_type else None,
                status=filters.get("status") or None,
                assigned_to=filters.get("assigned_to") or None,
                tag_id=parse_uuid(filters.get("tag_id"), "tag_id"),
                search=_clean(filters.get("search")),
                page=_to_int(filters.get("page"), "page", 1),
                per_page=_to_int(filters.get("per_page"), "page size", settings.CRM_DEFAULT_PAGE_SIZE),
            )
        contacts, total = await self.contact_repository.find_page(query)
        return ServiceResult.ok(contacts, pagination=Pagination.build(total, query.page, query.per_page))

    @service_operation("get contact")
    async def get_contact_by_id(self, contact_id: uuid.UUID) -> ServiceResult[Contact]:
        return ServiceResult.ok(await self._get_or_raise(contact_id))

    @service_operation("create contact")
    async def create_contact(self, data: Dict[str, Any], user_id: Optional[int]) -> ServiceResult[Contact]:
        """
        Create a contact owned by the signed-in user.

        The email, when given, must not belong to another contact
        (case-insensitive).
        """
        if user_id is None:
            raise NotAuthenticatedError()
        contact = self._build(data, user_id)
        if contact.email and await self.contact_repository.email_exists(contact.email):
            raise DuplicateEmailError(f"A contact with email {contact.email} already exists")

        saved = await self.contact_repository.save(contact)
        await self.event_bus.publish(
            ContactCreated(
                contact_id=saved.id,
                contact_type=saved.contact_type.value,
                source=saved.source,
                actor=str(user_id),
            )
        )
        logger.info("Contact %s created by user %s", saved.id, user_id)
        return ServiceResult.ok(saved, message="Contact created")

    @service_operation("update contact")
    async def update_contact(self, contact_id: uuid.UUID, data: Dict[str, Any]) -> ServiceResult[Contact]:
        contact = await self._get_or_raise(contact_id)
        changes = self._changes(data)
        with validating():
            updated = contact.with_changes(**changes)
        if (
            updated.email
            and updated.email != contact.email
            and await self.contact_repository.email_exists(updated.email, exclude_id=contact_id)
        ):
            raise DuplicateEmailError(f"A contact with email {updated.email} already exists")
        saved = await self.contact_repository.save(updated)
        return ServiceResult.ok(saved, message="Contact updated")

    @service_operation("delete contact")
    async def delete_contact(self, contact_id: uuid.UUID) -> ServiceResult[None]:
        if not await self.contact_repository.delete(contact_id):
            raise ContactNotFoundError(f"Contact {contact_id} not found")
        logger.info("Contact %s deleted", contact_id)
        return ServiceResult.ok(None, message="Contact deleted")

    @service_operation("search contacts", empty=list)
    async def search_contacts(self, query: str) -> ServiceResult[List[Contact]]:
        """Match on first/last name, email, company or phone; at most ``CRM_SEARCH_LIMIT`` rows."""
        term = (query or "").strip()
        if not term:
            return ServiceResult.ok([])
        return ServiceResult.ok(await self.contact_repository.search(term, settings.CRM_SEARCH_LIMIT))

    @service_operation("list contacts with tags", empty=list)
    async def get_contacts_with_tags(self) -> ServiceResult[List[ContactWithTags]]:
        contacts = await self.contact_repository.list_all()
        tags = await self.tag_repository.tags_for_contacts(contact.id for contact in contacts)
        return ServiceResult.ok(
            [ContactWithTags(contact=contact, tags=tags.get(contact.id, [])) for contact in contacts]
        )

    @service_operation("list contact interactions", empty=list)
    async def get_contact_interactions(self, contact_id: uuid.UUID) -> ServiceResult[List[Interaction]]:
        return ServiceResult.ok(await self.interaction_repository.list_for_contact(contact_id))

    @service_operation("add interaction")
    async def add_interaction(
        self, contact_id: uuid.UUID, data: Dict[str, Any], user_id: Optional[int]
    ) -> ServiceResult[Interaction]:
        """
        Log a touchpoint and move the contact's ``last_contact_date`` forward.

        Args:
            contact_id: Contact UUID
            data: ``subject``, optional ``interaction_type``, ``notes`` and
                ``interaction_date``
            user_id: Who logged the interaction
        """
        contact = await self._get_or_raise(contact_id)
        interaction_type = parse_enum(
            InteractionType, data.get("interaction_type") or InteractionType.NOTE, "interaction type"
        )
        with validating():
            interaction = Interaction.create(
                contact_id=contact.id,
                subject=data.get("subject"),
                interaction_type=interaction_type,
                notes=_clean(data.get("notes")),
                interaction_date=parse_datetime(data.get("interaction_date")),
                user_id=user_id,
            )
        saved = await self.interaction_repository.save(interaction)

        last = contact.last_contact_date
        if last is None or saved.interaction_date > last:
            await self.contact_repository.save(contact.with_changes(last_contact_date=saved.interaction_date))
        return ServiceResult.ok(saved, message="Interaction added")

    @service_operation("list contact opportunities", empty=list)
    async def get_contact_opportunities(self, contact_id: uuid.UUID) -> ServiceResult[List[OpportunityDetail]]:
        return ServiceResult.ok(
            await self.opportunity_repository.find(OpportunityFilters(contact_id=contact_id))
        )

    @service_operation("list contact tasks", empty=list)
    async def get_contact_tasks(self, contact_id: uuid.UUID) -> ServiceResult[List[TaskDetail]]:
        return ServiceResult.ok(await self.task_repository.find(TaskFilters(contact_id=contact_id)))

    @service_operation("update contact score")
    async def update_contact_score(self, contact_id: uuid.UUID, score) -> ServiceResult[Contact]:
        contact = await self._get_or_raise(contact_id)
        with validating():
            updated = contact.with_changes(score=score)
        saved = await self.contact_repository.save(updated)
        return ServiceResult.ok(saved, message="Score updated")

    @service_operation("update last contact date")
    async def update_last_contact_date(self, contact_id: uuid.UUID) -> ServiceResult[Contact]:
        contact = await self._get_or_raise(contact_id)
        saved = await self.contact_repository.save(contact.with_changes(last_contact_date=timezone.now()))
        return ServiceResult.ok(saved)

    @service_operation("import contacts", empty=list)
    async def import_contacts(
        self, rows: List[Dict[str, Any]], user_id: Optional[int]
    ) -> ServiceResult[List[Contact]]:
        """
        Insert many contacts at once; nothing is stored if a row is invalid.

        A row whose email belongs to a stored contact, or repeats an earlier
        row of the batch (case-insensitive), fails the whole import.

        Args:
            rows: Contact dicts as accepted by ``create_contact``
            user_id: Owner of the imported contacts

        Returns:
            Envelope with the contacts, message ``"N contacts imported"`` and
            ``imported`` count
        """
        if user_id is None:
            raise NotAuthenticatedError()
        if not rows:
            raise ValidationError("No contacts to import")

        contacts = []
        seen_emails = set()
        for position, row in enumerate(rows, start=1):
            try:
                contact = self._build({"source": "import", **row}, user_id)
            except ValidationError as exc:
                raise ValidationError(f"Row {position}: {exc.message}") from exc
            if contact.email:
                if contact.email in seen_emails or await self.contact_repository.email_exists(contact.email):
                    raise DuplicateEmailError(
                        f"Row {position}: a contact with email {contact.email} already exists"
                    )
                seen_emails.add(contact.email)
            contacts.append(contact)

        saved = await self.contact_repository.save_many(contacts)
        for contact in saved:
            await self.event_bus.publish(
                ContactCreated(
                    contact_id=contact.id,
                    contact_type=contact.contact_type.value,
                    source=contact.source,
                    actor=str(user_id),
                )
            )
        logger.info("%d contacts imported by user %s", len(saved), user_id)
        return ServiceResult.ok(saved, message=f"{len(saved)} contacts imported", imported=len(saved))

    @service_operation("contact stats")
    async def get_contact_stats(self, user_id: Optional[int]) -> ServiceResult[ContactStats]:
        """Totals for the contacts owned by the current user."""
        if user_id is None:
            raise NotAuthenticatedError()
        month_start = timezone.localtime().replace(day=1, hour=0, minute=0, second=0, microsecond=0)
        return ServiceResult.ok(await self.contact_repository.stats_for_user(user_id, month_start))
