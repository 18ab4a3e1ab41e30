"""
Unit tests for input coercion helpers.
"""
import uuid
from datetime import date, datetime, timezone

import pytest

from core.application.parsing import parse_date, parse_datetime, parse_enum, parse_uuid
from core.domain.exceptions import ValidationError
from core.domain.value_objects import LicenseStatus


class TestParseUuid:
    def test_blank_is_none(self):
        assert parse_uuid(None) is None
        assert parse_uuid("") is None

    def test_string(self):
        value = uuid.uuid4()
        assert parse_uuid(str(value)) == value

    def test_invalid(self):
        with pytest.raises(ValidationError, match="Invalid contact_id"):
            parse_uuid("not-a-uuid", "contact_id")


class TestParseDate:
    def test_iso_date(self):
        assert parse_date("2024-03-05") == date(2024, 3, 5)

    def test_timestamp_keeps_the_day(self):
        assert parse_date("2024-03-05T23:10:00Z") == date(2024, 3, 5)

    def test_invalid(self):
        with pytest.raises(ValidationError):
            parse_date("05/03/2024")


class TestParseDatetime:
    def test_naive_is_utc(self):
        assert parse_datetime("2024-03-05T10:00:00") == datetime(2024, 3, 5, 10, tzinfo=timezone.utc)

    def test_date_only(self):
        assert parse_datetime("2024-03-05") == datetime(2024, 3, 5, tzinfo=timezone.utc)

    def test_invalid(self):
        with pytest.raises(ValidationError):
            parse_datetime("yesterday")


class TestParseEnum:
    def test_value(self):
        assert parse_enum(LicenseStatus, "activa", "license status") is LicenseStatus.ACTIVE

    def test_member_passes_through(self):
        assert parse_enum(LicenseStatus, LicenseStatus.INACTIVE, "license status") is LicenseStatus.INACTIVE

    def test_invalid(self):
        with pytest.raises(ValidationError, match="Invalid license status: borrada"):
            parse_enum(LicenseStatus, "borrada", "license status")
