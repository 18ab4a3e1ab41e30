"""
Django admin configuration for tasks app.
"""
from django.contrib import admin

from tasks.infrastructure.models import Task


@admin.register(Task)
class TaskAdmin(admin.ModelAdmin):
    """Admin interface for Task model."""

    list_display = ["title", "task_type", "priority", "status", "due_date", "assigned_to"]
    list_filter = ["status", "priority", "task_type", "due_date"]
    search_fields = ["title", "description"]
    readonly_fields = ["id", "completed_at", "created_at", "updated_at"]

    def get_queryset(self, request):
        """Optimize queryset."""
        return super().get_queryset(request).select_related("assigned_to", "contact")
