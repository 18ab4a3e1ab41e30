"""
Unit tests for ContactService.
"""
import pytest

from contacts.application.services.contact_service import ContactService
from contacts.domain.contact import Contact
from contacts.domain.events import ContactCreated
from tests.fakes import InMemoryContactRepository

USER_ID = 7


@pytest.fixture
def contacts():
    return InMemoryContactRepository()


@pytest.fixture
def service(contacts, event_recorder):
    return ContactService(
        contact_repository=contacts,
        tag_repository=None,
        interaction_repository=None,
        opportunity_repository=None,
        task_repository=None,
        event_bus=event_recorder,
    )


@pytest.mark.asyncio
class TestCreateContact:
    """Tests for creating contacts."""

    async def test_create(self, service, contacts, event_recorder):
        result = await service.create_contact(
            {"first_name": "Ana", "email": "Ana@Example.com", "company_name": " "}, USER_ID
        )

        assert result.success is True
        assert result.data.email == "ana@example.com"
        assert result.data.company_name is None
        assert result.data.user_id == USER_ID
        [event] = event_recorder.of_type(ContactCreated)
        assert event.contact_type == "lead"

    async def test_duplicate_email_is_case_insensitive(self, service, contacts):
        await contacts.save(Contact.create(first_name="Ana", email="ana@example.com"))

        result = await service.create_contact({"first_name": "Otra", "email": "ANA@example.com"}, USER_ID)

        assert result.success is False
        assert result.error_code == "DUPLICATE_EMAIL"

    async def test_requires_user(self, service):
        result = await service.create_contact({"first_name": "Ana"}, None)

        assert result.error_code == "NOT_AUTHENTICATED"

    async def test_requires_first_name(self, service):
        result = await service.create_contact({"email": "ana@example.com"}, USER_ID)

        assert result.error_code == "VALIDATION_ERROR"

    async def test_unknown_contact_type(self, service):
        result = await service.create_contact({"first_name": "Ana", "contact_type": "friend"}, USER_ID)

        assert result.error_code == "VALIDATION_ERROR"


@pytest.mark.asyncio
class TestImportContacts:
    async def test_import(self, service, contacts, event_recorder):
        result = await service.import_contacts(
            [{"first_name": "Ana"}, {"first_name": "Luis", "contact_type": "customer"}], USER_ID
        )

        assert result.message == "2 contacts imported"
        assert result.extra["imported"] == 2
        assert {contact.source for contact in contacts.contacts.values()} == {"import"}
        assert len(event_recorder.of_type(ContactCreated)) == 2

    async def test_bad_row_stores_nothing(self, service, contacts):
        result = await service.import_contacts([{"first_name": "Ana"}, {"first_name": ""}], USER_ID)

        assert result.success is False
        assert result.error.startswith("Row 2:")
        assert contacts.contacts == {}

    async def test_existing_email_rejects_whole_batch(self, service, contacts):
        await contacts.save(Contact.create(first_name="Ana", email="ana@example.com"))

        result = await service.import_contacts(
            [
                {"first_name": "Luis", "email": "luis@example.com"},
                {"first_name": "Ana", "email": "ANA@example.com"},
            ],
            USER_ID,
        )

        assert result.error_code == "DUPLICATE_EMAIL"
        assert result.error.startswith("Row 2:")
        assert len(contacts.contacts) == 1

    async def test_email_repeated_within_batch(self, service, contacts, event_recorder):
        result = await service.import_contacts(
            [
                {"first_name": "Ana", "email": "ana@example.com"},
                {"first_name": "Luis"},
                {"first_name": "Ana B", "email": "Ana@Example.com"},
            ],
            USER_ID,
        )

        assert result.error_code == "DUPLICATE_EMAIL"
        assert result.error.startswith("Row 3:")
        assert contacts.contacts == {}
        assert event_recorder.events == []

    async def test_rows_without_email_are_not_duplicates(self, service, contacts):
        result = await service.import_contacts([{"first_name": "Ana"}, {"first_name": "Luis"}], USER_ID)

        assert result.extra["imported"] == 2

    async def test_empty_import(self, service):
        result = await service.import_contacts([], USER_ID)

        assert result.error_code == "VALIDATION_ERROR"


@pytest.mark.asyncio
class TestContactChanges:
    async def test_update_score(self, service, contacts):
        contact = await contacts.save(Contact.create(first_name="Ana"))

        result = await service.update_contact_score(contact.id, 80)

        assert result.data.score == 80

    async def test_score_out_of_range(self, service, contacts):
        contact = await contacts.save(Contact.create(first_name="Ana"))

        result = await service.update_contact_score(contact.id, 150)

        assert result.error_code == "VALIDATION_ERROR"

    async def test_update_to_taken_email(self, service, contacts):
        await contacts.save(Contact.create(first_name="Ana", email="ana@example.com"))
        other = await contacts.save(Contact.create(first_name="Luis", email="luis@example.com"))

        result = await service.update_contact(other.id, {"email": "ana@example.com"})

        assert result.error_code == "DUPLICATE_EMAIL"

    async def test_delete_unknown(self, service):
        result = await service.delete_contact(Contact.create(first_name="Ana").id)

        assert result.error_code == "CONTACT_NOT_FOUND"

    async def test_page(self, service, contacts):
        for name in ("Ana", "Luis", "Marta"):
            await contacts.save(Contact.create(first_name=name))

        result = await service.get_contacts({"page": "2", "per_page": "2"})

        assert len(result.data) == 1
        assert result.pagination.total == 3
        assert result.pagination.has_more is False
