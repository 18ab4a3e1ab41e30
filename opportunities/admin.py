"""
Django admin configuration for opportunities app.
"""
from django.contrib import admin

from opportunities.infrastructure.models import Opportunity, Pipeline, PipelineStage


class PipelineStageInline(admin.TabularInline):
    model = PipelineStage
    extra = 0
    ordering = ["order_index"]


@admin.register(Pipeline)
class PipelineAdmin(admin.ModelAdmin):
    """Admin interface for Pipeline model."""

    list_display = ["name", "user", "created_at"]
    search_fields = ["name"]
    inlines = [PipelineStageInline]


@admin.register(Opportunity)
class OpportunityAdmin(admin.ModelAdmin):
    """Admin interface for Opportunity model."""

    list_display = ["title", "value", "status", "stage", "contact", "expected_close_date"]
    list_filter = ["status", "pipeline", "expected_close_date"]
    search_fields = ["title", "contact__first_name", "contact__last_name"]
    readonly_fields = ["id", "actual_close_date", "created_at", "updated_at"]

    def get_queryset(self, request):
        """Optimize queryset."""
        return super().get_queryset(request).select_related("stage", "contact")
