"""
Unit tests for core value objects.
"""
import pytest

from core.domain.value_objects import (
    Email,
    LicenseType,
    SalesInterval,
    translate_contact_status,
)


class TestEmail:
    """Tests for Email value object."""

    def test_valid_email(self):
        """Test valid email creation."""
        email = Email("test@example.com")
        assert str(email) == "test@example.com"
        assert email.value == "test@example.com"

    def test_email_is_lower_cased(self):
        assert Email("  Ana.Lopez@Example.COM ").value == "ana.lopez@example.com"

    def test_invalid_email_no_at(self):
        """Test invalid email without @."""
        with pytest.raises(ValueError, match="Invalid email"):
            Email("invalid-email")

    def test_invalid_email_empty(self):
        """Test invalid empty email."""
        with pytest.raises(ValueError, match="Invalid email"):
            Email("")

    def test_is_valid_does_not_raise(self):
        assert Email.is_valid("a@b.co") is True
        assert Email.is_valid("a@b") is False
        assert Email.is_valid(None) is False


class TestLicenseType:
    def test_payment_type(self):
        assert LicenseType.ONE_TIME.payment_type == "one_time"
        assert LicenseType.SUBSCRIPTION.payment_type == "subscription"

    def test_str_is_stored_value(self):
        assert str(LicenseType.SUBSCRIPTION) == "suscripcion"


class TestSalesInterval:
    @pytest.mark.parametrize(
        "value,daily,size",
        [("7d", True, 7), ("30d", True, 30), ("3m", False, 3), ("6m", False, 6), ("12m", False, 12)],
    )
    def test_bucket_shape(self, value, daily, size):
        interval = SalesInterval(value)
        assert interval.is_daily is daily
        assert interval.size == size


class TestTranslateContactStatus:
    """Spanish form statuses map to stored contact statuses."""

    @pytest.mark.parametrize(
        "estado,expected",
        [("activo", "active"), ("inactivo", "inactive"), ("prospecto", "qualified"), ("lead", "new")],
    )
    def test_known_values(self, estado, expected):
        assert translate_contact_status(estado) == expected

    def test_case_and_spaces_ignored(self):
        assert translate_contact_status(" Activo ") == "active"

    def test_unknown_value_passes_through(self):
        assert translate_contact_status("contacted") == "contacted"

    def test_unknown_value_uses_default(self):
        assert translate_contact_status("cualquiera", "active") == "active"

    def test_empty_uses_default(self):
        assert translate_contact_status(None, "active") == "active"
        assert translate_contact_status("") is None
