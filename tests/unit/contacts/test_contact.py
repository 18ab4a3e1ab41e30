"""
Unit tests for Contact, Tag and Interaction entities.
"""
import uuid

import pytest

from contacts.domain.contact import Contact, validate_score
from contacts.domain.interaction import Interaction
from contacts.domain.tag import Tag
from core.domain.value_objects import ContactStatus, ContactType


class TestContact:
    """Tests for Contact entity."""

    def test_create_defaults(self):
        contact = Contact.create(first_name="  Lucía ", last_name="Gómez")

        assert contact.first_name == "Lucía"
        assert contact.full_name == "Lucía Gómez"
        assert contact.contact_type == ContactType.LEAD
        assert contact.status == ContactStatus.NEW
        assert contact.score == 0
        assert contact.email is None

    def test_email_is_lower_cased(self):
        assert Contact.create(first_name="Ana", email="Ana@Example.COM").email == "ana@example.com"

    def test_invalid_email(self):
        with pytest.raises(ValueError):
            Contact.create(first_name="Ana", email="not-an-email")

    def test_first_name_required(self):
        with pytest.raises(ValueError, match="First name is required"):
            Contact.create(first_name="   ")

    def test_full_name_without_last_name(self):
        assert Contact.create(first_name="Ana").full_name == "Ana"

    def test_with_changes_validates_score(self):
        contact = Contact.create(first_name="Ana")

        assert contact.with_changes(score="42").score == 42
        with pytest.raises(ValueError):
            contact.with_changes(score=101)

    def test_with_changes_keeps_identity(self):
        contact = Contact.create(first_name="Ana", user_id=7)
        updated = contact.with_changes(first_name="Ana María", user_id=8, id=uuid.uuid4())

        assert updated.id == contact.id
        assert updated.user_id == 7
        assert updated.first_name == "Ana María"


@pytest.mark.parametrize("score", [0, 50, 100, "75"])
def test_validate_score_accepts(score):
    assert 0 <= validate_score(score) <= 100


@pytest.mark.parametrize("score", [-1, 101, "high", None])
def test_validate_score_rejects(score):
    with pytest.raises(ValueError):
        validate_score(score)


class TestTag:
    def test_default_color(self):
        assert Tag.create(name="VIP").color == "#6366f1"


class TestInteraction:
    def test_defaults_to_note(self):
        interaction = Interaction.create(contact_id=uuid.uuid4(), subject="Llamada inicial")

        assert interaction.interaction_type.value == "note"
        assert interaction.interaction_date is not None
