"""
Django admin configuration for core app.
"""
import json

from django.contrib import admin
from django.utils.html import format_html

from core.infrastructure.models import AuditLog


@admin.register(AuditLog)
class AuditLogAdmin(admin.ModelAdmin):
    """Admin interface for AuditLog model."""

    list_display = [
        "action",
        "entity_type",
        "entity_id",
        "actor",
        "occurred_at",
    ]
    list_filter = ["action", "entity_type", "occurred_at"]
    search_fields = ["actor", "entity_id"]
    readonly_fields = ["id", "event_id", "occurred_at", "created_at", "changes_display"]
    fieldsets = (
        (
            "Basic Information",
            {
                "fields": ("id", "event_id", "entity_type", "entity_id", "action"),
            },
        ),
        (
            "Details",
            {
                "fields": ("actor", "changes_display", "occurred_at", "created_at"),
            },
        ),
    )

    def changes_display(self, obj):
        """Display changes in a formatted way."""
        if obj.changes:
            return format_html(
                '<pre style="background: #f5f5f5; padding: 10px; '
                'border-radius: 4px; overflow-x: auto;">{}</pre>',
                json.dumps(obj.changes, indent=2),
            )
        return "-"

    changes_display.short_description = "Changes"

    def has_add_permission(self, request):
        """Audit logs are read-only."""
        return False

    def has_change_permission(self, request, obj=None):
        """Audit logs are read-only."""
        return False

    def has_delete_permission(self, request, obj=None):
        """Audit logs should not be deleted."""
        return False
