"""
Webhook service.

Applies verified payment-provider events to licenses and records the
payments they report. Each event id is processed at most once, and events
older than the last one applied to a license do not move its status.
"""

import logging
import uuid
from typing import Any, Dict, Optional

from billing.domain.events import PaymentRecorded
from billing.domain.payment import Payment, from_cents
from billing.domain.webhook import (
    CHECKOUT_COMPLETED,
    INVOICE_PAYMENT_FAILED,
    INVOICE_PAYMENT_SUCCEEDED,
    SUBSCRIPTION_DELETED,
    WebhookEvent,
)
from billing.ports.payment_repository import PaymentRepository
from billing.ports.processed_event_repository import ProcessedEventRepository
from core.application.parsing import parse_uuid
from core.application.result import ServiceResult, service_operation, validating
from core.domain.events import EventBus
from core.domain.exceptions import LicenseNotFoundError, ValidationError
from core.domain.value_objects import LicenseStatus
from core.metrics import license_status_changes_total, payments_recorded_total, webhook_events_total
from licenses.domain.events import LicenseStatusChanged
from licenses.domain.license import License
from licenses.ports.license_repository import LicenseRepository

logger = logging.getLogger(__name__)

WEBHOOK_ACTOR = "stripe"


class InvalidLicenseMetadata(Exception):
    """The event names a license id that is not a UUID; redelivery cannot fix it."""

    def __init__(self, value: Any):
        super().__init__(f"Invalid license_id metadata: {value!r}")
        self.value = value


class WebhookService:
    """Reconciles licenses and payments with provider events."""

    def __init__(
        self,
        license_repository: LicenseRepository,
        payment_repository: PaymentRepository,
        processed_event_repository: ProcessedEventRepository,
        event_bus: EventBus,
    ):
        self.license_repository = license_repository
        self.payment_repository = payment_repository
        self.processed_event_repository = processed_event_repository
        self.event_bus = event_bus
        self._handlers = {
            CHECKOUT_COMPLETED: self._on_checkout_completed,
            INVOICE_PAYMENT_SUCCEEDED: self._on_invoice_paid,
            INVOICE_PAYMENT_FAILED: self._on_invoice_failed,
            SUBSCRIPTION_DELETED: self._on_subscription_deleted,
        }

    @service_operation("process webhook event")
    async def process_event(self, event: WebhookEvent) -> ServiceResult[Dict[str, Any]]:
        """
        Apply one webhook event.

        Unknown event types, redeliveries and events whose license_id
        metadata is not a UUID are acknowledged without changes. If
        applying the event fails its id is released so the provider's retry
        is processed again.

        Returns:
            ``{"received": True, "outcome": ...}``
        """
        handler = self._handlers.get(event.type)
        if handler is None:
            logger.info("Unhandled webhook event type %s (%s)", event.type, event.id)
            webhook_events_total.labels(event_type=event.type, outcome="ignored").inc()
            return ServiceResult.ok({"received": True, "outcome": "ignored"})

        if not await self.processed_event_repository.claim(event.id, event.type):
            logger.info("Webhook event %s already processed", event.id)
            webhook_events_total.labels(event_type=event.type, outcome="duplicate").inc()
            return ServiceResult.ok({"received": True, "outcome": "duplicate"})

        try:
            outcome = await handler(event)
        except InvalidLicenseMetadata as exc:
            logger.warning("Webhook event %s (%s) acknowledged: %s", event.id, event.type, exc)
            outcome = "invalid_license_metadata"
        except Exception:
            await self.processed_event_repository.release(event.id)
            webhook_events_total.labels(event_type=event.type, outcome="error").inc()
            raise

        await self.processed_event_repository.mark(event.id, outcome)
        webhook_events_total.labels(event_type=event.type, outcome=outcome).inc()
        logger.info("Webhook event %s (%s) -> %s", event.id, event.type, outcome)
        return ServiceResult.ok({"received": True, "outcome": outcome})

    async def _apply(
        self,
        license: License,
        event: WebhookEvent,
        status: Optional[LicenseStatus] = None,
        **changes: Any,
    ) -> License:
        with validating():
            applied = await self.license_repository.apply_payment_event(
                license.id, event.created, status=status, **changes
            )
        if applied is None:
            raise LicenseNotFoundError(f"License {license.id} not found")
        before, saved = applied
        if before.status is not saved.status:
            license_status_changes_total.labels(status=saved.status.value).inc()
            await self.event_bus.publish(
                LicenseStatusChanged(
                    license_id=saved.id,
                    old_status=before.status.value,
                    new_status=saved.status.value,
                    reason=event.type,
                    actor=WEBHOOK_ACTOR,
                    occurred_at=event.created,
                )
            )
        elif not before.accepts_event_at(event.created):
            logger.info(
                "License %s ignored stale %s event from %s",
                saved.id,
                event.type,
                event.created.isoformat(),
            )
        return saved

    async def _record_payment(self, license: License, event: WebhookEvent, amount_field: str, reference: str) -> bool:
        with validating():
            payment = Payment.succeeded(
                license_id=license.id,
                amount=from_cents(event.data.get(amount_field)),
                currency=event.data.get("currency"),
                stripe_reference=reference,
                paid_at=event.created,
            )
        stored, created = await self.payment_repository.record(payment)
        if created:
            payments_recorded_total.labels(source=event.type).inc()
            await self.event_bus.publish(
                PaymentRecorded(
                    payment_id=stored.id,
                    license_id=license.id,
                    amount=stored.amount,
                    currency=stored.currency,
                    source=event.type,
                    occurred_at=event.created,
                )
            )
        return created

    async def _license_for_subscription(self, event: WebhookEvent) -> Optional[License]:
        subscription_id = event.subscription_id
        if subscription_id:
            license = await self.license_repository.find_by_subscription_id(subscription_id)
            if license is not None:
                return license
        # First invoice can arrive before the checkout event stored the subscription id
        license_id = event.metadata.get("license_id") or self._subscription_metadata(event).get("license_id")
        if license_id:
            return await self.license_repository.find_by_id(self._metadata_license_id(license_id))
        return None

    @staticmethod
    def _metadata_license_id(value: Any) -> uuid.UUID:
        try:
            return parse_uuid(value, "license_id")
        except ValidationError as exc:
            raise InvalidLicenseMetadata(value) from exc

    @staticmethod
    def _subscription_metadata(event: WebhookEvent) -> Dict[str, Any]:
        details = (event.data.get("parent") or {}).get("subscription_details") or event.data.get(
            "subscription_details"
        ) or {}
        return details.get("metadata") or {}

    async def _on_checkout_completed(self, event: WebhookEvent) -> str:
        license_id = event.metadata.get("license_id")
        if not license_id:
            logger.warning("Checkout session %s has no license_id metadata", event.data.get("id"))
            return "missing_license_metadata"
        license = await self.license_repository.find_by_id(self._metadata_license_id(license_id))
        if license is None:
            logger.error("Checkout %s completed for unknown license %s", event.data.get("id"), license_id)
            return "license_not_found"

        subscription = event.data.get("subscription")
        if isinstance(subscription, dict):
            subscription = subscription.get("id")
        license = await self._apply(
            license,
            event,
            status=LicenseStatus.ACTIVE,
            stripe_customer_id=event.data.get("customer"),
            stripe_subscription_id=subscription,
        )
        # Subscription charges are recorded from their invoices
        if event.data.get("mode") == "payment" and event.data.get("payment_status", "paid") == "paid":
            await self._record_payment(license, event, "amount_total", event.data.get("id") or event.id)
        return "license_activated"

    async def _on_invoice_paid(self, event: WebhookEvent) -> str:
        license = await self._license_for_subscription(event)
        if license is None:
            logger.warning("Paid invoice %s has no matching license", event.data.get("id"))
            return "license_not_found"
        period_end = event.invoice_period_end()
        license = await self._apply(
            license,
            event,
            status=LicenseStatus.ACTIVE,
            end_date=period_end.date() if period_end else None,
            stripe_customer_id=event.data.get("customer"),
            stripe_subscription_id=event.subscription_id,
        )
        await self._record_payment(license, event, "amount_paid", event.data.get("id") or event.id)
        return "payment_recorded"

    async def _on_invoice_failed(self, event: WebhookEvent) -> str:
        license = await self._license_for_subscription(event)
        if license is None:
            logger.warning("Failed invoice %s has no matching license", event.data.get("id"))
            return "license_not_found"
        await self._apply(license, event, status=LicenseStatus.PENDING_PAYMENT)
        return "license_pending_payment"

    async def _on_subscription_deleted(self, event: WebhookEvent) -> str:
        license = await self._license_for_subscription(event)
        if license is None:
            logger.warning("Deleted subscription %s has no matching license", event.subscription_id)
            return "license_not_found"
        await self._apply(license, event, status=LicenseStatus.INACTIVE)
        return "license_deactivated"
