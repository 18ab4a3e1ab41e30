"""
Stripe implementation of the PaymentGateway port.

The Stripe SDK is synchronous, so calls are wrapped with ``sync_to_async``.
Stripe objects are converted to plain dicts before leaving this module.
"""
import json
import logging
from typing import Any, Dict, Optional

import stripe
from asgiref.sync import sync_to_async
from django.conf import settings

from billing.domain.payment import CheckoutRequest, CheckoutSession, PaymentType
from billing.domain.webhook import WebhookEvent
from billing.ports.payment_gateway import PaymentGateway
from core.domain.exceptions import PaymentGatewayError, WebhookVerificationError

logger = logging.getLogger(__name__)


class StripeGateway(PaymentGateway):
    """Hosted checkout and webhooks through the Stripe API."""

    def __init__(
        self,
        api_key: Optional[str] = None,
        api_version: Optional[str] = None,
        currency: Optional[str] = None,
    ):
        self.api_key = api_key if api_key is not None else settings.STRIPE_SECRET_KEY
        self.api_version = api_version or settings.STRIPE_API_VERSION
        self.currency = currency or settings.STRIPE_CURRENCY

    def _options(self) -> Dict[str, Any]:
        if not self.api_key:
            raise PaymentGatewayError("Stripe secret key not configured")
        return {"api_key": self.api_key, "stripe_version": self.api_version}

    def _line_item(self, request: CheckoutRequest) -> Dict[str, Any]:
        price_data: Dict[str, Any] = {
            "currency": self.currency,
            "product_data": {
                "name": request.product_name,
                "description": request.payment_type.description,
            },
            "unit_amount": request.unit_amount,
        }
        if request.payment_type is PaymentType.SUBSCRIPTION:
            price_data["recurring"] = {"interval": "month"}
        return {"price_data": price_data, "quantity": 1}

    @sync_to_async
    def create_checkout_session(self, request: CheckoutRequest) -> CheckoutSession:
        try:
            metadata = {
                "license_id": str(request.license_id),
                "payment_type": request.payment_type.value,
            }
            extra = {}
            if request.payment_type is PaymentType.SUBSCRIPTION:
                extra["subscription_data"] = {"metadata": metadata}
            session = stripe.checkout.Session.create(
                payment_method_types=["card"],
                customer_email=request.client_email,
                line_items=[self._line_item(request)],
                mode=request.payment_type.checkout_mode,
                success_url=request.success_url,
                cancel_url=request.cancel_url,
                metadata=metadata,
                **extra,
                **self._options(),
            )
        except stripe.StripeError as exc:
            logger.error("Stripe checkout for license %s failed: %s", request.license_id, exc)
            raise PaymentGatewayError(exc.user_message or str(exc)) from exc
        return CheckoutSession(session_id=session.id, url=session.url)

    @sync_to_async
    def retrieve_checkout_session(self, session_id: str) -> Dict[str, Any]:
        try:
            session = stripe.checkout.Session.retrieve(session_id, **self._options())
        except stripe.StripeError as exc:
            raise PaymentGatewayError(exc.user_message or str(exc)) from exc
        return session.to_dict()

    @sync_to_async
    def cancel_subscription(self, subscription_id: str) -> Dict[str, Any]:
        try:
            subscription = stripe.Subscription.cancel(subscription_id, **self._options())
        except stripe.StripeError as exc:
            raise PaymentGatewayError(exc.user_message or str(exc)) from exc
        return subscription.to_dict()

    def construct_event(self, payload: bytes, signature: str, secret: str) -> WebhookEvent:
        try:
            stripe.Webhook.construct_event(payload, signature, secret)
        except stripe.SignatureVerificationError as exc:
            raise WebhookVerificationError(f"Webhook signature verification failed: {exc}") from exc
        except ValueError as exc:
            raise WebhookVerificationError(f"Invalid webhook payload: {exc}") from exc
        if isinstance(payload, bytes):
            payload = payload.decode("utf-8")
        try:
            return WebhookEvent.from_payload(json.loads(payload))
        except (KeyError, TypeError, ValueError) as exc:
            raise WebhookVerificationError(f"Invalid webhook payload: {exc}") from exc
