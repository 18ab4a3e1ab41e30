"""
Stripe service.

Opens hosted checkouts for licenses and exposes the provider operations the
API needs. Webhook processing lives in WebhookService.
"""

import logging
import uuid
from typing import Any, Dict, Optional

from django.conf import settings

from billing.domain.payment import CheckoutRequest, CheckoutSession, PaymentType, to_cents
from billing.domain.webhook import WebhookEvent
from billing.ports.payment_gateway import PaymentGateway
from core.application.parsing import parse_enum, parse_uuid
from core.application.result import ServiceResult, service_operation
from core.domain.exceptions import (
    InvalidPriceError,
    LicenseNotFoundError,
    PaymentGatewayError,
    ValidationError,
    WebhookVerificationError,
)
from core.metrics import checkout_sessions_created_total
from licenses.ports.license_repository import LicenseRepository

logger = logging.getLogger(__name__)


class StripeService:
    """Checkout sessions and webhook verification."""

    def __init__(
        self,
        gateway: PaymentGateway,
        license_repository: LicenseRepository,
        webhook_secret: Optional[str] = None,
    ):
        self.gateway = gateway
        self.license_repository = license_repository
        self.webhook_secret = webhook_secret if webhook_secret is not None else settings.STRIPE_WEBHOOK_SECRET

    @service_operation("create checkout session")
    async def create_checkout_session(self, data: Dict[str, Any]) -> ServiceResult[CheckoutSession]:
        """
        Open a checkout for an explicit amount.

        Args:
            data: ``license_id``, ``client_email``, ``product_name``,
                ``amount`` (currency units), ``payment_type``,
                ``success_url`` and ``cancel_url``
        """
        for name in ("license_id", "client_email", "product_name", "success_url", "cancel_url"):
            if not data.get(name):
                raise ValidationError(f"{name} is required")
        try:
            unit_amount = to_cents(data.get("amount"))
        except ValueError as exc:
            raise InvalidPriceError(f"Invalid price: {data.get('amount')}") from exc

        request = CheckoutRequest(
            license_id=parse_uuid(data["license_id"], "license_id"),
            client_email=data["client_email"],
            product_name=data["product_name"],
            unit_amount=unit_amount,
            payment_type=parse_enum(PaymentType, data.get("payment_type"), "payment type"),
            success_url=data["success_url"],
            cancel_url=data["cancel_url"],
        )
        session = await self.gateway.create_checkout_session(request)
        checkout_sessions_created_total.labels(payment_type=request.payment_type.value).inc()
        logger.info(
            "Checkout session %s created for license %s (%s)",
            session.session_id,
            request.license_id,
            request.payment_type.value,
        )
        return ServiceResult.ok(session)

    @service_operation("checkout license")
    async def checkout_license(self, license_id, origin: str) -> ServiceResult[CheckoutSession]:
        """
        Open a checkout for a license at its product's price.

        The price and payment mode follow the license type. The customer
        returns to ``<origin>/licenses/<id>/payment-success`` or
        ``payment-cancel``.
        """
        license_uuid: uuid.UUID = parse_uuid(license_id, "license_id")
        if license_uuid is None:
            raise ValidationError("license_id is required")
        license_full = await self.license_repository.find_full_by_id(license_uuid)
        if license_full is None:
            raise LicenseNotFoundError(f"License {license_uuid} not found")
        if not license_full.price or license_full.price <= 0:
            raise InvalidPriceError(f"Price not configured for product {license_full.product_name}")

        base = f"{origin.rstrip('/')}/licenses/{license_uuid}"
        return await self.create_checkout_session(
            {
                "license_id": license_uuid,
                "client_email": license_full.client_email,
                "product_name": license_full.product_name,
                "amount": license_full.price,
                "payment_type": license_full.license.type.payment_type,
                "success_url": f"{base}/payment-success?session_id={{CHECKOUT_SESSION_ID}}",
                "cancel_url": f"{base}/payment-cancel",
            }
        )

    @service_operation("get checkout session")
    async def get_checkout_session(self, session_id: str) -> ServiceResult[Dict[str, Any]]:
        if not session_id:
            raise ValidationError("session_id is required")
        return ServiceResult.ok(await self.gateway.retrieve_checkout_session(session_id))

    @service_operation("cancel subscription")
    async def cancel_subscription(self, subscription_id: str) -> ServiceResult[Dict[str, Any]]:
        if not subscription_id:
            raise ValidationError("subscription_id is required")
        subscription = await self.gateway.cancel_subscription(subscription_id)
        logger.info("Subscription %s cancelled", subscription_id)
        return ServiceResult.ok(subscription, message="Subscription cancelled")

    def construct_webhook_event(self, payload: bytes, signature: Optional[str]) -> ServiceResult[WebhookEvent]:
        """
        Verify and parse a webhook request body.

        Synchronous since signature checks do no I/O.
        """
        if not self.webhook_secret:
            logger.error("Webhook received but no webhook secret is configured")
            return ServiceResult.fail("Webhook secret not configured", code="PAYMENT_GATEWAY_ERROR")
        if not signature:
            return ServiceResult.fail("Missing Stripe-Signature header", code="WEBHOOK_VERIFICATION_FAILED")
        try:
            event = self.gateway.construct_event(payload, signature, self.webhook_secret)
        except (WebhookVerificationError, PaymentGatewayError) as exc:
            logger.warning("Webhook rejected: %s", exc.message)
            return ServiceResult.fail(exc.message, code=exc.code)
        return ServiceResult.ok(event)
