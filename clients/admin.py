"""
Django admin configuration for clients app.
"""

from django.contrib import admin

from clients.infrastructure.models import Client


@admin.register(Client)
class ClientAdmin(admin.ModelAdmin):
    """Admin interface for Client model."""

    list_display = ["name", "email", "company", "phone", "created_at"]
    list_filter = ["created_at"]
    search_fields = ["name", "email", "company"]
    readonly_fields = ["id", "created_at"]
