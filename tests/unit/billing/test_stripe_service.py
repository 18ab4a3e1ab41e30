"""
Unit tests for StripeService.
"""
from datetime import date
from decimal import Decimal
from unittest.mock import AsyncMock, Mock

import pytest

from billing.application.services.stripe_service import StripeService
from billing.domain.payment import CheckoutSession, PaymentType
from billing.ports.payment_gateway import PaymentGateway
from core.domain.exceptions import PaymentGatewayError, WebhookVerificationError
from core.domain.value_objects import LicenseType
from licenses.domain.license import LicenseFull
from tests.fakes import InMemoryLicenseRepository, make_license


def full_license(license_type=LicenseType.SUBSCRIPTION, price_subscription=Decimal("49.90")):
    license = make_license(license_type=license_type)
    return LicenseFull.build(
        license=license,
        client_name="Ana",
        client_email="ana@example.com",
        client_company=None,
        product_name="SoftControl Pro",
        product_description=None,
        price_one_payment=Decimal("499.00"),
        price_subscription=price_subscription,
        today=date(2024, 3, 1),
    )


@pytest.fixture
def gateway():
    gateway = Mock(spec=PaymentGateway)
    gateway.create_checkout_session = AsyncMock(
        return_value=CheckoutSession(session_id="cs_1", url="https://checkout.stripe.test/cs_1")
    )
    gateway.cancel_subscription = AsyncMock(return_value={"id": "sub_1", "status": "canceled"})
    return gateway


@pytest.fixture
def licenses():
    return InMemoryLicenseRepository()


@pytest.fixture
def service(gateway, licenses):
    return StripeService(gateway, licenses, webhook_secret="whsec_unit")


@pytest.mark.asyncio
class TestCheckoutLicense:
    """Tests for opening a checkout for a license."""

    async def test_subscription_checkout(self, service, gateway, licenses):
        full = full_license()
        licenses.full[full.id] = full

        result = await service.checkout_license(str(full.id), "https://crm.example.com/")

        assert result.success is True
        assert result.data.session_id == "cs_1"
        request = gateway.create_checkout_session.await_args.args[0]
        assert request.unit_amount == 4990
        assert request.payment_type is PaymentType.SUBSCRIPTION
        assert request.client_email == "ana@example.com"
        assert request.success_url == (
            f"https://crm.example.com/licenses/{full.id}/payment-success?session_id={{CHECKOUT_SESSION_ID}}"
        )
        assert request.cancel_url == f"https://crm.example.com/licenses/{full.id}/payment-cancel"

    async def test_one_time_checkout_uses_one_payment_price(self, service, gateway, licenses):
        full = full_license(license_type=LicenseType.ONE_TIME)
        licenses.full[full.id] = full

        await service.checkout_license(full.id, "http://testserver")

        request = gateway.create_checkout_session.await_args.args[0]
        assert request.unit_amount == 49900
        assert request.payment_type.checkout_mode == "payment"

    async def test_unknown_license(self, service, gateway):
        result = await service.checkout_license(str(make_license().id), "http://testserver")

        assert result.success is False
        assert result.error_code == "LICENSE_NOT_FOUND"
        gateway.create_checkout_session.assert_not_awaited()

    async def test_missing_price(self, service, licenses):
        full = full_license(price_subscription=Decimal("0"))
        licenses.full[full.id] = full

        result = await service.checkout_license(full.id, "http://testserver")

        assert result.error_code == "INVALID_PRICE"

    async def test_gateway_error(self, service, gateway, licenses):
        full = full_license()
        licenses.full[full.id] = full
        gateway.create_checkout_session.side_effect = PaymentGatewayError("card declined")

        result = await service.checkout_license(full.id, "http://testserver")

        assert result.error_code == "PAYMENT_GATEWAY_ERROR"
        assert result.error == "card declined"


@pytest.mark.asyncio
class TestCreateCheckoutSession:
    async def test_requires_fields(self, service):
        result = await service.create_checkout_session({"license_id": str(make_license().id)})

        assert result.error_code == "VALIDATION_ERROR"

    async def test_rejects_non_positive_amount(self, service):
        result = await service.create_checkout_session(
            {
                "license_id": str(make_license().id),
                "client_email": "ana@example.com",
                "product_name": "SoftControl Pro",
                "amount": "0",
                "payment_type": "one_time",
                "success_url": "http://testserver/ok",
                "cancel_url": "http://testserver/cancel",
            }
        )

        assert result.error_code == "INVALID_PRICE"


@pytest.mark.asyncio
async def test_cancel_subscription(service, gateway):
    result = await service.cancel_subscription("sub_1")

    assert result.data["status"] == "canceled"
    gateway.cancel_subscription.assert_awaited_once_with("sub_1")


class TestConstructWebhookEvent:
    """Tests for webhook signature verification."""

    def test_missing_secret(self, gateway, licenses):
        service = StripeService(gateway, licenses, webhook_secret="")

        result = service.construct_webhook_event(b"{}", "t=1,v1=abc")

        assert result.error_code == "PAYMENT_GATEWAY_ERROR"

    def test_missing_signature(self, service, gateway):
        result = service.construct_webhook_event(b"{}", None)

        assert result.error_code == "WEBHOOK_VERIFICATION_FAILED"
        gateway.construct_event.assert_not_called()

    def test_bad_signature(self, service, gateway):
        gateway.construct_event.side_effect = WebhookVerificationError("Invalid signature")

        result = service.construct_webhook_event(b"{}", "t=1,v1=bad")

        assert result.success is False
        assert result.error_code == "WEBHOOK_VERIFICATION_FAILED"
        gateway.construct_event.assert_called_once_with(b"{}", "t=1,v1=bad", "whsec_unit")
