"""
Payment and webhook bookkeeping models.
"""
import uuid
from decimal import Decimal

from django.core.validators import MinValueValidator
from django.db import models


class Payment(models.Model):
    """
    Money received for a license, as reported by the payment provider.
    """

    STATUS_CHOICES = [
        ("succeeded", "Succeeded"),
        ("failed", "Failed"),
        ("refunded", "Refunded"),
    ]

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    license = models.ForeignKey(
        "licenses.License", on_delete=models.CASCADE, related_name="payments"
    )
    amount = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        validators=[MinValueValidator(Decimal("0.00"))],
    )
    currency = models.CharField(max_length=3, default="eur")
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default="succeeded")
    stripe_reference = models.CharField(
        max_length=255,
        unique=True,
        help_text="Checkout session or invoice id the payment came from",
    )
    paid_at = models.DateTimeField(db_index=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = "payments"
        ordering = ["-paid_at"]
        indexes = [
            models.Index(fields=["status", "paid_at"]),
        ]

    def __str__(self):
        return f"{self.amount} {self.currency} ({self.stripe_reference})"


class ProcessedWebhookEvent(models.Model):
    """
    A payment-provider event that has already been handled.

    Redelivered events with the same id are acknowledged without being
    applied again.
    """

    event_id = models.CharField(max_length=255, primary_key=True)
    event_type = models.CharField(max_length=100)
    outcome = models.CharField(max_length=50, default="processing")
    received_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = "processed_webhook_events"
        ordering = ["-received_at"]

    def __str__(self):
        return f"{self.event_type} {self.event_id}"
