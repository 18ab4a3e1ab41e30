"""
Django admin configuration for accounts app.
"""

from django.contrib import admin

from accounts.infrastructure.models import Profile


@admin.register(Profile)
class ProfileAdmin(admin.ModelAdmin):
    """Admin interface for Profile model."""

    list_display = ["user", "full_name", "role", "created_at"]
    list_filter = ["role", "created_at"]
    search_fields = ["full_name", "user__email", "user__username"]
    readonly_fields = ["created_at", "updated_at"]
