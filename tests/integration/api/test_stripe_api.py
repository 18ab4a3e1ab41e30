"""
Integration tests for Stripe endpoints.
"""

import hashlib
import hmac
import json
import time
import uuid
from datetime import date, timedelta
from unittest.mock import AsyncMock, patch

import pytest
from asgiref.sync import async_to_sync
from django.conf import settings

from billing.domain.payment import CheckoutSession
from billing.infrastructure.models import Payment, ProcessedWebhookEvent
from billing.infrastructure.stripe_gateway import StripeGateway
from core.domain.exceptions import PaymentGatewayError
from core.domain.value_objects import LicenseStatus

WEBHOOK_URL = "/api/stripe/webhook"


def signed(payload: dict, secret: str = None):
    """Body and Stripe-Signature header for ``payload``."""
    body = json.dumps(payload)
    timestamp = int(time.time())
    digest = hmac.new(
        (secret or settings.STRIPE_WEBHOOK_SECRET).encode(),
        f"{timestamp}.{body}".encode(),
        hashlib.sha256,
    ).hexdigest()
    return body, f"t={timestamp},v1={digest}"


def post_event(client, payload, secret=None):
    body, signature = signed(payload, secret)
    return client.post(
        WEBHOOK_URL, data=body, content_type="application/json", HTTP_STRIPE_SIGNATURE=signature
    )


def checkout_completed(license_id, event_id="evt_checkout"):
    return {
        "id": event_id,
        "object": "event",
        "type": "checkout.session.completed",
        "created": int(time.time()),
        "data": {
            "object": {
                "id": "cs_test_1",
                "mode": "subscription",
                "customer": "cus_test",
                "subscription": "sub_test",
                "amount_total": 4990,
                "currency": "eur",
                "payment_status": "paid",
                "metadata": {"license_id": str(license_id)},
            }
        },
    }


def invoice_paid(event_id="evt_invoice", subscription_id="sub_test"):
    period_end = int(time.time()) + 30 * 86400
    return {
        "id": event_id,
        "object": "event",
        "type": "invoice.payment_succeeded",
        "created": int(time.time()),
        "data": {
            "object": {
                "id": f"in_{event_id}",
                "customer": "cus_test",
                "subscription": subscription_id,
                "amount_paid": 4990,
                "currency": "eur",
                "lines": {"data": [{"period": {"end": period_end}}]},
            }
        },
    }


@pytest.mark.django_db
@pytest.mark.integration
class TestStripeWebhookAPI:
    """The webhook is public and authenticated by its signature."""

    def test_checkout_completed_activates_license(self, api_client, db_license, license_repository):
        response = post_event(api_client, checkout_completed(db_license.id))

        assert response.status_code == 200
        assert response.json() == {"received": True}
        stored = async_to_sync(license_repository.find_by_id)(db_license.id)
        assert stored.status == LicenseStatus.ACTIVE
        assert stored.stripe_subscription_id == "sub_test"
        assert ProcessedWebhookEvent.objects.get(event_id="evt_checkout").outcome == "license_activated"

    def test_invoice_records_payment_once(self, api_client, db_license):
        post_event(api_client, checkout_completed(db_license.id))
        payload = invoice_paid()

        assert post_event(api_client, payload).status_code == 200
        assert post_event(api_client, payload).status_code == 200

        assert Payment.objects.filter(license_id=db_license.id).count() == 1
        assert ProcessedWebhookEvent.objects.get(event_id="evt_invoice").outcome == "payment_recorded"

    def test_paid_invoice_extends_end_date(self, api_client, db_license, license_repository):
        post_event(api_client, checkout_completed(db_license.id))

        post_event(api_client, invoice_paid())

        stored = async_to_sync(license_repository.find_by_id)(db_license.id)
        assert stored.end_date >= date.today() + timedelta(days=29)

    def test_missing_signature(self, api_client):
        response = api_client.post(WEBHOOK_URL, data="{}", content_type="application/json")

        assert response.status_code == 400
        assert response.json()["code"] == "WEBHOOK_VERIFICATION_FAILED"

    def test_wrong_secret(self, api_client, db_license):
        response = post_event(api_client, checkout_completed(db_license.id), secret="whsec_other")

        assert response.status_code == 400
        assert not ProcessedWebhookEvent.objects.exists()

    def test_unhandled_event_is_acknowledged(self, api_client):
        payload = {"id": "evt_other", "type": "customer.created", "created": int(time.time()), "data": {"object": {}}}

        assert post_event(api_client, payload).status_code == 200


@pytest.mark.django_db
@pytest.mark.integration
class TestCheckoutAPI:
    def test_create_checkout(self, admin_client, db_license):
        session = CheckoutSession(session_id="cs_test_1", url="https://checkout.stripe.com/c/cs_test_1")
        with patch.object(
            StripeGateway, "create_checkout_session", AsyncMock(return_value=session)
        ) as create:
            response = admin_client.post(
                "/api/stripe/create-checkout", {"licenseId": str(db_license.id)}, format="json"
            )

        assert response.status_code == 200
        assert response.json() == {"sessionId": "cs_test_1", "url": "https://checkout.stripe.com/c/cs_test_1"}
        request = create.await_args.args[0]
        assert request.unit_amount == 4990
        assert request.cancel_url == f"http://testserver/licenses/{db_license.id}/payment-cancel"

    def test_missing_license_id(self, admin_client):
        response = admin_client.post("/api/stripe/create-checkout", {}, format="json")

        assert response.status_code == 400
        assert response.json()["error"] == "licenseId is required"

    def test_unknown_license(self, admin_client):
        response = admin_client.post(
            "/api/stripe/create-checkout", {"licenseId": str(uuid.uuid4())}, format="json"
        )

        assert response.status_code == 404

    def test_stripe_error(self, admin_client, db_license):
        with patch.object(
            StripeGateway,
            "create_checkout_session",
            AsyncMock(side_effect=PaymentGatewayError("Your card was declined.")),
        ):
            response = admin_client.post(
                "/api/stripe/create-checkout", {"licenseId": str(db_license.id)}, format="json"
            )

        assert response.status_code == 502
        assert response.json()["error"] == "Your card was declined."
