"""
Unit tests for payment amounts and webhook event parsing.
"""
from datetime import datetime, timezone
from decimal import Decimal

import pytest

from billing.domain.payment import from_cents, to_cents
from billing.domain.webhook import WebhookEvent


class TestAmounts:
    def test_to_cents_rounds(self):
        assert to_cents(Decimal("49.90")) == 4990
        assert to_cents("499") == 49900
        assert to_cents(Decimal("10.005")) == 1000

    @pytest.mark.parametrize("amount", [0, -5, "abc", None, "NaN"])
    def test_to_cents_rejects_non_positive(self, amount):
        with pytest.raises(ValueError):
            to_cents(amount)

    def test_from_cents(self):
        assert from_cents(4990) == Decimal("49.90")
        assert from_cents(None) == Decimal("0.00")


class TestWebhookEvent:
    """Tests for WebhookEvent parsing."""

    def test_from_payload(self):
        event = WebhookEvent.from_payload(
            {
                "id": "evt_1",
                "type": "checkout.session.completed",
                "created": 1709251200,
                "data": {"object": {"id": "cs_1", "metadata": {"license_id": "abc"}}},
            }
        )

        assert event.id == "evt_1"
        assert event.created == datetime(2024, 3, 1, tzinfo=timezone.utc)
        assert event.metadata == {"license_id": "abc"}

    def test_subscription_id_from_invoice(self):
        event = WebhookEvent.from_payload(
            {"id": "evt_2", "type": "invoice.payment_succeeded", "data": {"object": {"subscription": "sub_1"}}}
        )

        assert event.subscription_id == "sub_1"

    def test_subscription_id_from_invoice_parent(self):
        event = WebhookEvent.from_payload(
            {
                "id": "evt_3",
                "type": "invoice.payment_failed",
                "data": {"object": {"parent": {"subscription_details": {"subscription": "sub_2"}}}},
            }
        )

        assert event.subscription_id == "sub_2"

    def test_subscription_id_of_deleted_subscription(self):
        event = WebhookEvent.from_payload(
            {"id": "evt_4", "type": "customer.subscription.deleted", "data": {"object": {"id": "sub_3"}}}
        )

        assert event.subscription_id == "sub_3"

    def test_invoice_period_end_uses_latest_line(self):
        event = WebhookEvent.from_payload(
            {
                "id": "evt_5",
                "type": "invoice.payment_succeeded",
                "data": {
                    "object": {
                        "period_end": 1000,
                        "lines": {"data": [{"period": {"end": 1709251200}}, {"period": {"end": 1711929600}}]},
                    }
                },
            }
        )

        assert event.invoice_period_end() == datetime(2024, 4, 1, tzinfo=timezone.utc)

    def test_invoice_period_end_falls_back_to_invoice(self):
        event = WebhookEvent.from_payload(
            {"id": "evt_6", "type": "invoice.payment_succeeded", "data": {"object": {"period_end": 1709251200}}}
        )

        assert event.invoice_period_end() == datetime(2024, 3, 1, tzinfo=timezone.utc)
