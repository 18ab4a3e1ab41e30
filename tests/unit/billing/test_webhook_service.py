"""
Unit tests for WebhookService.
"""
from datetime import date, timedelta
from decimal import Decimal

import pytest

from billing.application.services.webhook_service import WebhookService
from billing.domain.events import PaymentRecorded
from billing.domain.webhook import WebhookEvent
from core.domain.value_objects import LicenseStatus, LicenseType
from licenses.domain.events import LicenseStatusChanged
from tests.fakes import (
    InMemoryLicenseRepository,
    InMemoryPaymentRepository,
    InMemoryProcessedEventRepository,
    make_license,
    with_subscription,
)

MARCH_1 = 1709251200
APRIL_1 = 1711929600


def event(event_id, event_type, data, created=MARCH_1):
    return WebhookEvent.from_payload(
        {"id": event_id, "type": event_type, "created": created, "data": {"object": data}}
    )


def checkout_completed(license, event_id="evt_checkout", mode="subscription", created=MARCH_1):
    return event(
        event_id,
        "checkout.session.completed",
        {
            "id": "cs_1",
            "mode": mode,
            "customer": "cus_1",
            "subscription": "sub_1" if mode == "subscription" else None,
            "amount_total": 49900,
            "currency": "eur",
            "payment_status": "paid",
            "metadata": {"license_id": str(license.id)},
        },
        created=created,
    )


def invoice(event_id, event_type, subscription_id="sub_1", created=MARCH_1, **extra):
    data = {
        "id": f"in_{event_id}",
        "subscription": subscription_id,
        "customer": "cus_1",
        "amount_paid": 4990,
        "currency": "eur",
        "lines": {"data": [{"period": {"end": APRIL_1}}]},
    }
    data.update(extra)
    return event(event_id, event_type, data, created=created)


@pytest.fixture
def licenses():
    return InMemoryLicenseRepository()


@pytest.fixture
def payments():
    return InMemoryPaymentRepository()


@pytest.fixture
def processed():
    return InMemoryProcessedEventRepository()


@pytest.fixture
def service(licenses, payments, processed, event_recorder):
    return WebhookService(licenses, payments, processed, event_recorder)


@pytest.mark.asyncio
class TestCheckoutCompleted:
    """Tests for checkout.session.completed."""

    async def test_activates_license_and_stores_ids(self, service, licenses, payments, event_recorder):
        license = make_license(status=LicenseStatus.PENDING_PAYMENT)
        await licenses.save(license)

        result = await service.process_event(checkout_completed(license))

        assert result.success is True
        assert result.data == {"received": True, "outcome": "license_activated"}
        stored = licenses.licenses[license.id]
        assert stored.status == LicenseStatus.ACTIVE
        assert stored.stripe_customer_id == "cus_1"
        assert stored.stripe_subscription_id == "sub_1"
        [changed] = event_recorder.of_type(LicenseStatusChanged)
        assert changed.reason == "checkout.session.completed"
        assert changed.actor == "stripe"

    async def test_subscription_checkout_records_no_payment(self, service, licenses, payments):
        license = make_license(status=LicenseStatus.PENDING_PAYMENT)
        await licenses.save(license)

        await service.process_event(checkout_completed(license))

        assert payments.payments == {}

    async def test_one_time_checkout_records_payment(self, service, licenses, payments, event_recorder):
        license = make_license(license_type=LicenseType.ONE_TIME, status=LicenseStatus.PENDING_PAYMENT)
        await licenses.save(license)

        await service.process_event(checkout_completed(license, mode="payment"))

        [payment] = payments.payments.values()
        assert payment.amount == Decimal("499.00")
        assert payment.stripe_reference == "cs_1"
        assert len(event_recorder.of_type(PaymentRecorded)) == 1

    async def test_missing_metadata(self, service):
        result = await service.process_event(
            event("evt_nometa", "checkout.session.completed", {"id": "cs_2", "mode": "payment"})
        )

        assert result.data["outcome"] == "missing_license_metadata"

    async def test_unknown_license(self, service):
        result = await service.process_event(checkout_completed(make_license()))

        assert result.data["outcome"] == "license_not_found"


@pytest.mark.asyncio
class TestInvoiceEvents:
    async def test_paid_invoice_extends_and_records(self, service, licenses, payments):
        license = with_subscription(make_license(status=LicenseStatus.PENDING_PAYMENT), "sub_1")
        await licenses.save(license)

        result = await service.process_event(invoice("evt_paid", "invoice.payment_succeeded"))

        assert result.data["outcome"] == "payment_recorded"
        stored = licenses.licenses[license.id]
        assert stored.status == LicenseStatus.ACTIVE
        assert stored.end_date == date(2024, 4, 1)
        [payment] = payments.payments.values()
        assert payment.amount == Decimal("49.90")
        assert payment.stripe_reference == "in_evt_paid"

    async def test_first_invoice_falls_back_to_metadata(self, service, licenses):
        license = make_license(status=LicenseStatus.PENDING_PAYMENT)
        await licenses.save(license)

        result = await service.process_event(
            invoice(
                "evt_first",
                "invoice.payment_succeeded",
                subscription_id="sub_new",
                parent={"subscription_details": {"metadata": {"license_id": str(license.id)}}},
            )
        )

        assert result.data["outcome"] == "payment_recorded"
        assert licenses.licenses[license.id].stripe_subscription_id == "sub_new"

    async def test_failed_invoice_moves_to_pending_payment(self, service, licenses):
        license = with_subscription(make_license(), "sub_1")
        await licenses.save(license)

        result = await service.process_event(invoice("evt_failed", "invoice.payment_failed"))

        assert result.data["outcome"] == "license_pending_payment"
        assert licenses.licenses[license.id].status == LicenseStatus.PENDING_PAYMENT

    async def test_deleted_subscription_deactivates(self, service, licenses):
        license = with_subscription(make_license(), "sub_1")
        await licenses.save(license)

        result = await service.process_event(
            event("evt_deleted", "customer.subscription.deleted", {"id": "sub_1"})
        )

        assert result.data["outcome"] == "license_deactivated"
        assert licenses.licenses[license.id].status == LicenseStatus.INACTIVE

    async def test_stale_failure_does_not_undo_newer_payment(self, service, licenses):
        """A failure older than the last applied payment leaves the license active."""
        license = with_subscription(make_license(status=LicenseStatus.PENDING_PAYMENT), "sub_1")
        await licenses.save(license)

        await service.process_event(invoice("evt_paid", "invoice.payment_succeeded", created=MARCH_1))
        await service.process_event(
            invoice("evt_old_failure", "invoice.payment_failed", created=MARCH_1 - 3600)
        )

        assert licenses.licenses[license.id].status == LicenseStatus.ACTIVE


@pytest.mark.asyncio
class TestIdempotency:
    async def test_redelivery_is_acknowledged_once(self, service, licenses, payments, processed):
        license = with_subscription(make_license(), "sub_1")
        await licenses.save(license)
        paid = invoice("evt_paid", "invoice.payment_succeeded")

        first = await service.process_event(paid)
        second = await service.process_event(paid)

        assert first.data["outcome"] == "payment_recorded"
        assert second.data == {"received": True, "outcome": "duplicate"}
        assert len(payments.payments) == 1
        assert processed.outcomes["evt_paid"] == "payment_recorded"

    async def test_unhandled_type_is_ignored(self, service, processed):
        result = await service.process_event(event("evt_other", "customer.created", {"id": "cus_1"}))

        assert result.data["outcome"] == "ignored"
        assert processed.outcomes == {}

    async def test_failure_releases_event(self, service, licenses, processed, monkeypatch):
        license = with_subscription(make_license(), "sub_1")
        await licenses.save(license)

        async def broken_save(_license):
            raise RuntimeError("storage down")

        monkeypatch.setattr(licenses, "save", broken_save)

        with pytest.raises(RuntimeError):
            await service.process_event(invoice("evt_failed", "invoice.payment_failed"))

        assert "evt_failed" not in processed.outcomes


@pytest.mark.asyncio
class TestLicenseMetadata:
    async def test_checkout_with_malformed_license_id_is_acknowledged(self, service, processed, event_recorder):
        result = await service.process_event(
            event(
                "evt_badmeta",
                "checkout.session.completed",
                {"id": "cs_3", "mode": "payment", "metadata": {"license_id": "not-a-uuid"}},
            )
        )

        assert result.success is True
        assert result.data == {"received": True, "outcome": "invalid_license_metadata"}
        assert processed.outcomes["evt_badmeta"] == "invalid_license_metadata"
        assert event_recorder.events == []

    async def test_invoice_with_malformed_license_id_is_acknowledged(self, service, processed):
        result = await service.process_event(
            invoice(
                "evt_badinvoice",
                "invoice.payment_succeeded",
                subscription_id="sub_unknown",
                parent={"subscription_details": {"metadata": {"license_id": "1234"}}},
            )
        )

        assert result.data["outcome"] == "invalid_license_metadata"
        assert processed.outcomes["evt_badinvoice"] == "invalid_license_metadata"


@pytest.mark.asyncio
class TestConcurrentDelivery:
    async def test_applies_event_to_the_stored_license_not_the_lookup_copy(
        self, service, licenses, event_recorder, monkeypatch
    ):
        """A newer payment stored after the lookup still wins over an older failure."""
        license = with_subscription(make_license(status=LicenseStatus.PENDING_PAYMENT), "sub_1")
        await licenses.save(license)
        looked_up = license

        await service.process_event(invoice("evt_paid", "invoice.payment_succeeded", created=MARCH_1))

        async def stale_lookup(_subscription_id):
            return looked_up

        monkeypatch.setattr(licenses, "find_by_subscription_id", stale_lookup)
        await service.process_event(invoice("evt_old_failure", "invoice.payment_failed", created=MARCH_1 - 3600))

        stored = licenses.licenses[license.id]
        assert stored.status == LicenseStatus.ACTIVE
        assert [item.new_status for item in event_recorder.of_type(LicenseStatusChanged)] == ["activa"]
