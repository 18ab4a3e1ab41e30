"""
Event handlers for domain events.

These handlers process domain events for side effects like audit logging
and cache invalidation.
"""

import logging

from asgiref.sync import sync_to_async

from billing.domain.events import PaymentRecorded
from clients.domain.events import ClientCreated, ClientDeleted
from contacts.domain.events import ContactCreated
from core.domain.events import DomainEvent, EventHandler
from core.infrastructure.cache_adapters import cache_adapter
from licenses.domain.events import (
    LicenseCreated,
    LicenseDeleted,
    LicenseEndDateChanged,
    LicenseStatusChanged,
)
from opportunities.domain.events import OpportunityClosed
from products.domain.events import ProductCreated, ProductDeleted
from tasks.domain.events import TaskCompleted

logger = logging.getLogger(__name__)

DASHBOARD_CACHE_NAMESPACE = "dashboard"

AUDITED_EVENTS = (
    ClientCreated,
    ClientDeleted,
    ProductCreated,
    ProductDeleted,
    LicenseCreated,
    LicenseDeleted,
    LicenseEndDateChanged,
    LicenseStatusChanged,
    PaymentRecorded,
    ContactCreated,
    OpportunityClosed,
    TaskCompleted,
)

# Events that change the dashboard counters or the sales chart
DASHBOARD_EVENTS = (
    ClientCreated,
    ClientDeleted,
    ProductCreated,
    ProductDeleted,
    LicenseCreated,
    LicenseDeleted,
    LicenseEndDateChanged,
    LicenseStatusChanged,
    PaymentRecorded,
)


class AuditLogEventHandler(EventHandler):
    """
    Event handler for audit logging.

    Writes every handled domain event to the AuditLog table.
    """

    async def handle(self, event: DomainEvent) -> None:
        """
        Handle domain event for audit logging.

        Args:
            event: Domain event to log
        """
        from core.infrastructure.models import AuditLog

        actor = getattr(event, "actor", None) or "system"
        logger.info(
            "Audit log: %s - %s",
            event.event_type,
            event.aggregate_id,
            extra={
                "event_id": str(event.event_id),
                "event_type": event.event_type,
                "aggregate_id": event.aggregate_id,
                "occurred_at": event.occurred_at.isoformat(),
            },
        )
        await sync_to_async(AuditLog.objects.get_or_create)(
            event_id=event.event_id,
            defaults={
                "entity_type": getattr(event, "aggregate_type", "unknown"),
                "entity_id": event.aggregate_id,
                "action": event.event_type,
                "changes": event.payload(),
                "actor": str(actor),
                "occurred_at": event.occurred_at,
            },
        )


class DashboardCacheInvalidationHandler(EventHandler):
    """
    Event handler for cache invalidation.

    Drops the cached dashboard stats and sales data whenever a counted
    record is written or a payment arrives.
    """

    async def handle(self, event: DomainEvent) -> None:
        """
        Handle domain event for cache invalidation.

        Args:
            event: Domain event
        """
        version = await cache_adapter.bump_namespace(DASHBOARD_CACHE_NAMESPACE)
        logger.info(
            "Dashboard cache invalidated (event: %s, version: %s)",
            event.event_type,
            version,
        )


def register_event_handlers(bus=None):
    """Register all event handlers with the event bus."""
    if bus is None:
        from core.infrastructure.events import event_bus as bus

    audit_handler = AuditLogEventHandler()
    cache_handler = DashboardCacheInvalidationHandler()

    for event_type in AUDITED_EVENTS:
        bus.subscribe(event_type, audit_handler)

    for event_type in DASHBOARD_EVENTS:
        bus.subscribe(event_type, cache_handler)

    logger.info("Event handlers registered")
