"""
Django admin configuration for contacts app.
"""
from django.contrib import admin

from contacts.infrastructure.models import Contact, ContactTag, Interaction, Tag


class ContactTagInline(admin.TabularInline):
    model = ContactTag
    extra = 0


class InteractionInline(admin.TabularInline):
    model = Interaction
    extra = 0
    fields = ["interaction_type", "subject", "interaction_date", "user"]


@admin.register(Contact)
class ContactAdmin(admin.ModelAdmin):
    """Admin interface for Contact model."""

    list_display = [
        "first_name",
        "last_name",
        "email",
        "company_name",
        "contact_type",
        "status",
        "score",
        "created_at",
    ]
    list_filter = ["contact_type", "status", "source", "created_at"]
    search_fields = ["first_name", "last_name", "email", "company_name"]
    readonly_fields = ["id", "created_at", "updated_at"]
    inlines = [ContactTagInline, InteractionInline]

    def get_queryset(self, request):
        """Optimize queryset."""
        return super().get_queryset(request).select_related("assigned_to", "user")


@admin.register(Tag)
class TagAdmin(admin.ModelAdmin):
    list_display = ["name", "color", "user", "created_at"]
    search_fields = ["name"]


@admin.register(Interaction)
class InteractionAdmin(admin.ModelAdmin):
    list_display = ["contact", "interaction_type", "subject", "interaction_date"]
    list_filter = ["interaction_type", "interaction_date"]
    search_fields = ["subject", "contact__first_name", "contact__last_name"]
