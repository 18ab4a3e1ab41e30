"""
Cross-cutting models: the audit trail written from domain events.
"""
import uuid

from django.db import models


class AuditLog(models.Model):
    """
    Immutable audit trail of CRM changes.

    One row per domain event handled by the audit handler.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    event_id = models.UUIDField(unique=True)
    entity_type = models.CharField(max_length=50)
    entity_id = models.CharField(max_length=64)
    action = models.CharField(max_length=80)
    changes = models.JSONField(default=dict, help_text="Event payload")
    actor = models.CharField(max_length=255, blank=True, default="system")
    occurred_at = models.DateTimeField()
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = "audit_logs"
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["entity_type", "entity_id"]),
            models.Index(fields=["created_at"]),
            models.Index(fields=["action"]),
        ]

    def __str__(self):
        return f"{self.action} - {self.entity_type} {self.entity_id}"
