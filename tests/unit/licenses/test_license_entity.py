"""
Unit tests for License entity.
"""
import uuid
from datetime import date, datetime, timedelta, timezone
from decimal import Decimal

import pytest

from core.domain.value_objects import LicenseStatus, LicenseType
from licenses.domain.license import LicenseFull
from tests.fakes import make_license


class TestLicense:
    """Tests for License entity."""

    def test_create_license(self):
        """Test creating a license; status defaults to activa."""
        license = make_license()

        assert license.id is not None
        assert license.status == LicenseStatus.ACTIVE
        assert license.end_date is None
        assert license.stripe_subscription_id is None

    def test_end_date_before_start_date(self):
        with pytest.raises(ValueError, match="End date cannot be before start date"):
            make_license(end_date=date(2023, 12, 31))

    def test_is_expired(self):
        license = make_license(end_date=date(2024, 2, 1))

        assert license.is_expired(date(2024, 2, 1)) is False
        assert license.is_expired(date(2024, 2, 2)) is True

    def test_without_end_date_never_expires(self):
        assert make_license().is_expired(date(2099, 1, 1)) is False

    def test_with_changes_ignores_unknown_fields(self):
        license = make_license()
        updated = license.with_changes(status=LicenseStatus.INACTIVE, client_id=uuid.uuid4())

        assert updated.status == LicenseStatus.INACTIVE
        assert updated.client_id == license.client_id


class TestApplyPaymentEvent:
    """Payment events move status only when they are not older than the last one applied."""

    def test_first_event_applies(self):
        at = datetime(2024, 3, 1, tzinfo=timezone.utc)
        license = make_license(status=LicenseStatus.PENDING_PAYMENT)

        updated = license.apply_payment_event(
            at, status=LicenseStatus.ACTIVE, end_date=date(2024, 4, 1), stripe_subscription_id="sub_1"
        )

        assert updated.status == LicenseStatus.ACTIVE
        assert updated.end_date == date(2024, 4, 1)
        assert updated.last_payment_event_at == at
        assert updated.stripe_subscription_id == "sub_1"

    def test_stale_event_keeps_status_but_records_ids(self):
        newer = datetime(2024, 3, 2, tzinfo=timezone.utc)
        license = make_license().apply_payment_event(newer, status=LicenseStatus.INACTIVE)

        stale = license.apply_payment_event(
            newer - timedelta(hours=1), status=LicenseStatus.ACTIVE, stripe_customer_id="cus_1"
        )

        assert stale.status == LicenseStatus.INACTIVE
        assert stale.last_payment_event_at == newer
        assert stale.stripe_customer_id == "cus_1"

    def test_same_timestamp_applies(self):
        at = datetime(2024, 3, 2, tzinfo=timezone.utc)
        license = make_license().apply_payment_event(at, status=LicenseStatus.PENDING_PAYMENT)

        assert license.apply_payment_event(at, status=LicenseStatus.ACTIVE).status == LicenseStatus.ACTIVE

    def test_existing_ids_are_kept(self):
        at = datetime(2024, 3, 2, tzinfo=timezone.utc)
        license = make_license().apply_payment_event(at, stripe_subscription_id="sub_1")

        assert license.apply_payment_event(at).stripe_subscription_id == "sub_1"


class TestLicenseFull:
    def _build(self, license_type):
        return LicenseFull.build(
            license=make_license(license_type=license_type, end_date=date(2024, 2, 1)),
            client_name="Ana",
            client_email="ana@example.com",
            client_company=None,
            product_name="SoftControl Pro",
            product_description=None,
            price_one_payment=Decimal("499.00"),
            price_subscription=Decimal("49.90"),
            today=date(2024, 3, 1),
        )

    def test_price_follows_license_type(self):
        assert self._build(LicenseType.ONE_TIME).price == Decimal("499.00")
        assert self._build(LicenseType.SUBSCRIPTION).price == Decimal("49.90")

    def test_expired_flag(self):
        assert self._build(LicenseType.ONE_TIME).is_expired is True
