"""
License model.
"""
import uuid

from django.db import models
from django.utils import timezone


class License(models.Model):
    """
    A client's right to use a product.
    """

    TYPE_CHOICES = [
        ("licencia_unica", "Licencia Única"),
        ("suscripcion", "Suscripción"),
    ]

    STATUS_CHOICES = [
        ("activa", "Activa"),
        ("inactiva", "Inactiva"),
        ("pendiente_pago", "Pendiente de Pago"),
    ]

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    client = models.ForeignKey("clients.Client", on_delete=models.CASCADE, related_name="licenses")
    product = models.ForeignKey(
        "products.Product", on_delete=models.PROTECT, related_name="licenses"
    )
    type = models.CharField(max_length=20, choices=TYPE_CHOICES)
    start_date = models.DateField(default=timezone.localdate)
    end_date = models.DateField(null=True, blank=True)
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default="activa")
    stripe_customer_id = models.CharField(max_length=255, null=True, blank=True)
    stripe_subscription_id = models.CharField(
        max_length=255, null=True, blank=True, db_index=True
    )
    last_payment_event_at = models.DateTimeField(
        null=True, blank=True, help_text="Creation time of the last payment event applied"
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = "licenses"
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["status"]),
            models.Index(fields=["client", "status"]),
            models.Index(fields=["end_date"]),
        ]

    def __str__(self):
        return f"{self.client.name} - {self.product.name} ({self.status})"

    @property
    def is_expired(self) -> bool:
        return self.end_date is not None and self.end_date < timezone.localdate()
