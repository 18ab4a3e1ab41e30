"""
Admin for licenses.

Status and Stripe references are read-only here: they change through the
API and the payment webhook so that audit events and the dashboard stay in
step.
"""
from django.contrib import admin
from django.utils import timezone
from django.utils.html import format_html

from licenses.infrastructure.models import License

STATUS_COLORS = {
    "activa": "#16a34a",
    "pendiente_pago": "#ea580c",
    "inactiva": "#6b7280",
}


class LapsedFilter(admin.SimpleListFilter):
    """Active licenses whose end date has passed, i.e. what the nightly sweep will pick up."""

    title = "lapsed"
    parameter_name = "lapsed"

    def lookups(self, request, model_admin):
        return [("yes", "Lapsed but still active")]

    def queryset(self, request, queryset):
        if self.value() == "yes":
            return queryset.filter(status="activa", end_date__lt=timezone.localdate())
        return queryset


@admin.register(License)
class LicenseAdmin(admin.ModelAdmin):
    list_display = ["client", "product", "type", "colored_status", "start_date", "end_date"]
    list_filter = ["status", "type", LapsedFilter]
    list_select_related = ["client", "product"]
    search_fields = ["client__name", "client__email", "product__name", "stripe_subscription_id"]
    date_hierarchy = "start_date"
    readonly_fields = [
        "id",
        "status",
        "stripe_customer_id",
        "stripe_subscription_id",
        "last_payment_event_at",
        "created_at",
        "updated_at",
    ]
    fieldsets = (
        (None, {"fields": ("id", "client", "product", "type", "status", "start_date", "end_date")}),
        (
            "Stripe",
            {
                "fields": ("stripe_customer_id", "stripe_subscription_id", "last_payment_event_at"),
                "classes": ("collapse",),
            },
        ),
    )

    @admin.display(description="Status", ordering="status")
    def colored_status(self, obj):
        return format_html(
            '<span style="color: {}; font-weight: bold;">{}</span>',
            STATUS_COLORS.get(obj.status, "#000000"),
            obj.get_status_display(),
        )
