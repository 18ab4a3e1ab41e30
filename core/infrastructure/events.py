"""
Process-local event bus.

Handlers run right after the service that published the event, in the same
request. A handler that raises is logged and counted; the publishing
service never sees the error.
"""

import asyncio
import logging
from typing import Dict, List, Type

from core.domain.events import DomainEvent, EventBus, EventHandler
from core.metrics import event_handler_failures_total

logger = logging.getLogger(__name__)


class InMemoryEventBus(EventBus):
    """Event bus keeping its subscriptions in a dict keyed by event class."""

    def __init__(self):
        self._handlers: Dict[Type[DomainEvent], List[EventHandler]] = {}

    def subscribe(self, event_type: Type[DomainEvent], handler: EventHandler) -> None:
        """Subscribe ``handler``; a second handler of the same class is ignored."""
        handlers = self._handlers.setdefault(event_type, [])
        if any(type(existing) is type(handler) for existing in handlers):
            return
        handlers.append(handler)
        logger.debug("Subscribed %s to %s", type(handler).__name__, event_type.__name__)

    def clear(self) -> None:
        self._handlers.clear()

    def handlers_for(self, event_type: Type[DomainEvent]) -> List[EventHandler]:
        return list(self._handlers.get(event_type, []))

    async def publish(self, event: DomainEvent) -> None:
        """Run every handler of the event's class concurrently."""
        handlers = self.handlers_for(type(event))
        if not handlers:
            logger.debug("No handlers for %s", event.event_type)
            return

        logger.info(
            "Publishing %s for %s to %d handler(s)",
            event.event_type,
            event.aggregate_id,
            len(handlers),
        )
        await asyncio.gather(*(self._deliver(handler, event) for handler in handlers))

    async def _deliver(self, handler: EventHandler, event: DomainEvent) -> None:
        handler_name = type(handler).__name__
        try:
            await handler.handle(event)
        except Exception:
            event_handler_failures_total.labels(event_type=event.event_type, handler=handler_name).inc()
            logger.exception("%s failed on %s %s", handler_name, event.event_type, event.event_id)


event_bus = InMemoryEventBus()
