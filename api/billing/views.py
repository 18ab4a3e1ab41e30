"""
Stripe checkout and webhook views.

The webhook is public: Stripe authenticates it with the
``Stripe-Signature`` header, which is checked against the raw body.
"""

import logging

from asgiref.sync import async_to_sync
from drf_spectacular.utils import extend_schema
from rest_framework import status
from rest_framework.permissions import AllowAny
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.views import APIView

from api.billing.serializers import (
    CheckoutRequestSerializer,
    CheckoutResponseSerializer,
    WebhookResponseSerializer,
)
from api.exceptions import status_for_code
from api.responses import envelope_response
from billing.application.services.stripe_service import StripeService
from billing.application.services.webhook_service import WebhookService
from billing.infrastructure.repositories.django_payment_repository import DjangoPaymentRepository
from billing.infrastructure.repositories.django_processed_event_repository import (
    DjangoProcessedEventRepository,
)
from billing.infrastructure.stripe_gateway import StripeGateway
from core.infrastructure.events import event_bus
from core.instrumentation import get_tracer
from licenses.infrastructure.repositories.django_license_repository import DjangoLicenseRepository

logger = logging.getLogger(__name__)
tracer = get_tracer(__name__)

_license_repo = DjangoLicenseRepository()


def _stripe_service() -> StripeService:
    return StripeService(gateway=StripeGateway(), license_repository=_license_repo)


def _webhook_service() -> WebhookService:
    return WebhookService(
        license_repository=_license_repo,
        payment_repository=DjangoPaymentRepository(),
        processed_event_repository=DjangoProcessedEventRepository(),
        event_bus=event_bus,
    )


def _failure(result) -> Response:
    return Response(
        {"success": False, "error": result.error, "code": result.error_code},
        status=status_for_code(result.error_code),
    )


class CreateCheckoutView(APIView):
    """Open a Stripe checkout for a license."""

    @extend_schema(
        operation_id="create_checkout",
        summary="Create checkout session",
        description=(
            "Price and mode follow the license type. The customer comes back to "
            "/licenses/<id>/payment-success or /licenses/<id>/payment-cancel."
        ),
        tags=["Stripe"],
        request=CheckoutRequestSerializer,
        responses={
            200: CheckoutResponseSerializer,
            400: {"description": "Missing license or price not configured"},
            404: {"description": "License not found"},
            502: {"description": "Stripe error"},
        },
    )
    def post(self, request: Request) -> Response:
        return async_to_sync(self._handle_checkout)(request)

    async def _handle_checkout(self, request: Request) -> Response:
        with tracer.start_as_current_span("create_checkout") as span:
            serializer = CheckoutRequestSerializer(data=request.data)
            if not serializer.is_valid():
                return Response(
                    {"success": False, "error": "licenseId is required", "code": "VALIDATION_ERROR"},
                    status=status.HTTP_400_BAD_REQUEST,
                )
            license_id = serializer.validated_data["licenseId"]
            span.set_attribute("license.id", str(license_id))

            origin = f"{request.scheme}://{request.get_host()}"
            result = await _stripe_service().checkout_license(license_id, origin)
            if not result.success:
                span.set_attribute("error", result.error_code or "error")
                return _failure(result)
            return Response({"sessionId": result.data.session_id, "url": result.data.url})


class CheckoutSessionView(APIView):
    @extend_schema(
        operation_id="get_checkout_session",
        summary="Get checkout session",
        tags=["Stripe"],
        responses={200: {"type": "object"}, 502: {"description": "Stripe error"}},
    )
    def get(self, request: Request, session_id: str) -> Response:
        return envelope_response(async_to_sync(_stripe_service().get_checkout_session)(session_id))


class CancelSubscriptionView(APIView):
    @extend_schema(
        operation_id="cancel_subscription",
        summary="Cancel subscription",
        description="The license is deactivated when Stripe sends customer.subscription.deleted.",
        tags=["Stripe"],
        request=None,
        responses={200: {"type": "object"}, 502: {"description": "Stripe error"}},
    )
    def post(self, request: Request, subscription_id: str) -> Response:
        return envelope_response(async_to_sync(_stripe_service().cancel_subscription)(subscription_id))


class StripeWebhookView(APIView):
    """Receive Stripe events."""

    authentication_classes = []
    permission_classes = [AllowAny]

    @extend_schema(
        operation_id="stripe_webhook",
        summary="Stripe webhook",
        tags=["Stripe"],
        request=None,
        responses={
            200: WebhookResponseSerializer,
            400: {"description": "Missing or invalid signature"},
        },
    )
    def post(self, request: Request) -> Response:
        return async_to_sync(self._handle_webhook)(request)

    async def _handle_webhook(self, request: Request) -> Response:
        with tracer.start_as_current_span("stripe_webhook") as span:
            signature = request.headers.get("Stripe-Signature")
            verified = _stripe_service().construct_webhook_event(request.body, signature)
            if not verified.success:
                span.set_attribute("error", verified.error_code or "error")
                return _failure(verified)

            event = verified.data
            span.set_attribute("stripe.event_type", event.type)
            span.set_attribute("stripe.event_id", event.id)
            result = await _webhook_service().process_event(event)
            if not result.success:
                # a non-2xx answer makes Stripe deliver the event again
                logger.error("Webhook event %s failed: %s", event.id, result.error)
                return _failure(result)
            return Response({"received": True})
