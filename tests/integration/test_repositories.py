"""
Integration tests for repository implementations.
"""

import uuid
from dataclasses import replace
from datetime import date, datetime, timedelta, timezone
from decimal import Decimal

import pytest
from asgiref.sync import async_to_sync

from billing.domain.payment import Payment
from billing.infrastructure.repositories.django_payment_repository import DjangoPaymentRepository
from billing.infrastructure.repositories.django_processed_event_repository import (
    DjangoProcessedEventRepository,
)
from contacts.domain.contact import Contact
from contacts.infrastructure.repositories.django_contact_repository import DjangoContactRepository
from core.domain.value_objects import LicenseStatus, LicenseType
from licenses.domain.license import License, LicenseFilters


@pytest.mark.django_db
@pytest.mark.integration
class TestLicenseRepository:
    """Integration tests for LicenseRepository."""

    def test_save_and_find_full(self, license_repository, db_license, db_client, db_product):
        full = async_to_sync(license_repository.find_full_by_id)(db_license.id)

        assert full.client_email == db_client.email
        assert full.product_name == db_product.name
        assert full.price == Decimal("49.90")
        assert full.is_expired is False

    def test_find_not_found(self, license_repository):
        assert async_to_sync(license_repository.find_by_id)(uuid.uuid4()) is None

    def test_payment_fields_round_trip(self, license_repository, db_license):
        at = datetime(2024, 3, 1, 10, 0, tzinfo=timezone.utc)
        updated = db_license.apply_payment_event(
            at, status=LicenseStatus.ACTIVE, stripe_customer_id="cus_1", stripe_subscription_id="sub_1"
        )
        async_to_sync(license_repository.save)(updated)

        found = async_to_sync(license_repository.find_by_subscription_id)("sub_1")

        assert found.id == db_license.id
        assert found.status == LicenseStatus.ACTIVE
        assert found.stripe_customer_id == "cus_1"
        assert found.last_payment_event_at == at

    def test_expired_filter(self, license_repository, db_license):
        today = date.today()
        expired = replace(db_license, id=uuid.uuid4(), end_date=today - timedelta(days=1))
        async_to_sync(license_repository.save)(expired)

        rows = async_to_sync(license_repository.find_full)(LicenseFilters(expired=True), today)

        assert [row.id for row in rows] == [expired.id]
        assert async_to_sync(license_repository.count_expired)(today) == 1

    def test_lapsed_subscriptions(self, license_repository, db_client, db_product):
        today = date.today()
        lapsed = License.create(
            client_id=db_client.id,
            product_id=db_product.id,
            license_type=LicenseType.SUBSCRIPTION,
            start_date=today - timedelta(days=60),
            end_date=today - timedelta(days=2),
        )
        async_to_sync(license_repository.save)(lapsed)

        rows = async_to_sync(license_repository.find_lapsed_subscriptions)(today)

        assert [row.id for row in rows] == [lapsed.id]

    def test_count_by_status(self, license_repository, db_license):
        assert async_to_sync(license_repository.count_by_status)() == {"pendiente_pago": 1}

    def test_apply_payment_event_locks_and_saves(self, license_repository, db_license):
        at = datetime(2024, 3, 1, 10, 0, tzinfo=timezone.utc)

        before, after = async_to_sync(license_repository.apply_payment_event)(
            db_license.id, at, status=LicenseStatus.ACTIVE, stripe_subscription_id="sub_1"
        )

        assert before.status == LicenseStatus.PENDING_PAYMENT
        assert after.status == LicenseStatus.ACTIVE
        stored = async_to_sync(license_repository.find_by_id)(db_license.id)
        assert stored.status == LicenseStatus.ACTIVE
        assert stored.stripe_subscription_id == "sub_1"
        assert stored.last_payment_event_at == at

    def test_apply_payment_event_ignores_older_event(self, license_repository, db_license):
        at = datetime(2024, 3, 1, 10, 0, tzinfo=timezone.utc)
        async_to_sync(license_repository.apply_payment_event)(db_license.id, at, status=LicenseStatus.ACTIVE)

        before, after = async_to_sync(license_repository.apply_payment_event)(
            db_license.id, at - timedelta(hours=1), status=LicenseStatus.PENDING_PAYMENT
        )

        assert before.status == after.status == LicenseStatus.ACTIVE
        assert async_to_sync(license_repository.find_by_id)(db_license.id).last_payment_event_at == at

    def test_apply_payment_event_unknown_license(self, license_repository):
        at = datetime(2024, 3, 1, tzinfo=timezone.utc)

        assert async_to_sync(license_repository.apply_payment_event)(uuid.uuid4(), at) is None


@pytest.mark.django_db
@pytest.mark.integration
class TestPaymentRepository:
    def test_record_is_idempotent_per_reference(self, db_license):
        repository = DjangoPaymentRepository()
        payment = Payment.succeeded(db_license.id, Decimal("49.90"), "EUR", "in_1")

        stored, created = async_to_sync(repository.record)(payment)
        again, created_again = async_to_sync(repository.record)(
            Payment.succeeded(db_license.id, Decimal("49.90"), "eur", "in_1")
        )

        assert created is True
        assert created_again is False
        assert again.id == stored.id
        assert stored.currency == "eur"

    def test_daily_totals(self, db_license):
        repository = DjangoPaymentRepository()
        day = datetime(2024, 3, 5, 12, 0, tzinfo=timezone.utc)
        for reference, amount in (("in_a", "49.90"), ("in_b", "10.10")):
            async_to_sync(repository.record)(
                Payment.succeeded(db_license.id, Decimal(amount), "eur", reference, paid_at=day)
            )

        totals = async_to_sync(repository.daily_totals)(date(2024, 3, 1), date(2024, 3, 31))

        assert totals == {date(2024, 3, 5): (Decimal("60.00"), 2)}


@pytest.mark.django_db
@pytest.mark.integration
class TestProcessedEventRepository:
    def test_claim_once(self):
        repository = DjangoProcessedEventRepository()

        assert async_to_sync(repository.claim)("evt_1", "invoice.payment_succeeded") is True
        assert async_to_sync(repository.claim)("evt_1", "invoice.payment_succeeded") is False

    def test_release_allows_new_claim(self):
        repository = DjangoProcessedEventRepository()
        async_to_sync(repository.claim)("evt_2", "invoice.payment_failed")

        async_to_sync(repository.release)("evt_2")

        assert async_to_sync(repository.claim)("evt_2", "invoice.payment_failed") is True


@pytest.mark.django_db
@pytest.mark.integration
class TestContactRepository:
    """Integration tests for ContactRepository."""

    def test_email_exists_ignores_case_and_self(self):
        repository = DjangoContactRepository()
        contact = async_to_sync(repository.save)(Contact.create(first_name="Ana", email="ana@example.com"))

        assert async_to_sync(repository.email_exists)("ANA@example.com") is True
        assert async_to_sync(repository.email_exists)("ana@example.com", exclude_id=contact.id) is False

    def test_search(self):
        repository = DjangoContactRepository()
        async_to_sync(repository.save)(Contact.create(first_name="Ana", company_name="Acme"))
        async_to_sync(repository.save)(Contact.create(first_name="Luis"))

        matches = async_to_sync(repository.search)("acm", 20)

        assert [contact.first_name for contact in matches] == ["Ana"]
