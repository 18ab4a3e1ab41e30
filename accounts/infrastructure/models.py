"""
Profile model: CRM role and display name for a Django user.
"""
from django.conf import settings
from django.db import models


class Profile(models.Model):
    """
    Role and display name of a CRM user.

    Login goes through ``django.contrib.auth``; a user without a profile
    is refused by the CRM.
    """

    ROLE_CHOICES = [
        ("admin", "Administrador"),
        ("staff", "Personal"),
    ]

    user = models.OneToOneField(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        primary_key=True,
        related_name="profile",
    )
    full_name = models.CharField(max_length=255, blank=True, default="")
    role = models.CharField(max_length=20, choices=ROLE_CHOICES, default="staff")
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = "profiles"
        ordering = ["full_name"]
        indexes = [
            models.Index(fields=["role"]),
        ]

    def __str__(self):
        return f"{self.full_name or self.user.get_username()} ({self.role})"

    @property
    def is_admin(self) -> bool:
        return self.role == "admin"
