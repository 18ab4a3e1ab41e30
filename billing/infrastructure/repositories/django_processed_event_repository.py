"""
Django implementation of ProcessedEventRepository port.
"""
from asgiref.sync import sync_to_async
from django.db import IntegrityError, transaction

from billing.infrastructure.models import ProcessedWebhookEvent
from billing.ports.processed_event_repository import ProcessedEventRepository


class DjangoProcessedEventRepository(ProcessedEventRepository):
    """Processed event ledger on the ``processed_webhook_events`` table."""

    @sync_to_async
    def claim(self, event_id: str, event_type: str) -> bool:
        try:
            with transaction.atomic():
                _, created = ProcessedWebhookEvent.objects.get_or_create(
                    event_id=event_id, defaults={"event_type": event_type}
                )
        except IntegrityError:
            # Concurrent delivery claimed it first
            return False
        return created

    @sync_to_async
    def mark(self, event_id: str, outcome: str) -> None:
        ProcessedWebhookEvent.objects.filter(event_id=event_id).update(outcome=outcome)

    @sync_to_async
    def release(self, event_id: str) -> None:
        ProcessedWebhookEvent.objects.filter(event_id=event_id).delete()
