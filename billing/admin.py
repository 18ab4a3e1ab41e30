"""
Django admin configuration for billing app.
"""
from django.contrib import admin

from billing.infrastructure.models import Payment, ProcessedWebhookEvent


@admin.register(Payment)
class PaymentAdmin(admin.ModelAdmin):
    """Admin interface for Payment model. Payments come from webhooks only."""

    list_display = ["stripe_reference", "license", "amount", "currency", "status", "paid_at"]
    list_filter = ["status", "currency", "paid_at"]
    search_fields = ["stripe_reference", "license__client__name", "license__client__email"]
    readonly_fields = [
        "id",
        "license",
        "amount",
        "currency",
        "status",
        "stripe_reference",
        "paid_at",
        "created_at",
    ]

    def has_add_permission(self, request):
        return False

    def get_queryset(self, request):
        """Optimize queryset."""
        return super().get_queryset(request).select_related("license__client")


@admin.register(ProcessedWebhookEvent)
class ProcessedWebhookEventAdmin(admin.ModelAdmin):
    list_display = ["event_id", "event_type", "outcome", "received_at"]
    list_filter = ["event_type", "outcome", "received_at"]
    search_fields = ["event_id"]
    readonly_fields = ["event_id", "event_type", "outcome", "received_at"]

    def has_add_permission(self, request):
        return False
