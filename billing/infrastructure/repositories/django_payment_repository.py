"""
Django implementation of PaymentRepository port.
"""
import uuid
from datetime import date
from decimal import Decimal
from typing import Dict, List, Tuple

from asgiref.sync import sync_to_async
from django.db.models import Count, Sum
from django.db.models.functions import TruncDate

from billing.domain.payment import Payment, PaymentStatus
from billing.infrastructure.models import Payment as PaymentModel
from billing.ports.payment_repository import PaymentRepository


class DjangoPaymentRepository(PaymentRepository):
    """Django ORM implementation of PaymentRepository."""

    def _to_domain(self, model: PaymentModel) -> Payment:
        return Payment(
            id=model.id,
            license_id=model.license_id,
            amount=model.amount,
            currency=model.currency,
            status=PaymentStatus(model.status),
            stripe_reference=model.stripe_reference,
            paid_at=model.paid_at,
            created_at=model.created_at,
        )

    @sync_to_async
    def record(self, payment: Payment) -> Tuple[Payment, bool]:
        model, created = PaymentModel.objects.get_or_create(
            stripe_reference=payment.stripe_reference,
            defaults={
                "id": payment.id,
                "license_id": payment.license_id,
                "amount": payment.amount,
                "currency": payment.currency,
                "status": payment.status.value,
                "paid_at": payment.paid_at,
            },
        )
        return self._to_domain(model), created

    @sync_to_async
    def list_for_license(self, license_id: uuid.UUID) -> List[Payment]:
        models = PaymentModel.objects.filter(license_id=license_id).order_by("-paid_at")
        return [self._to_domain(model) for model in models]

    @sync_to_async
    def daily_totals(self, start: date, end: date) -> Dict[date, Tuple[Decimal, int]]:
        rows = (
            PaymentModel.objects.filter(
                status=PaymentStatus.SUCCEEDED.value,
                paid_at__date__gte=start,
                paid_at__date__lte=end,
            )
            .annotate(day=TruncDate("paid_at"))
            .values("day")
            .annotate(amount=Sum("amount"), count=Count("id"))
            .order_by("day")
        )
        return {row["day"]: (row["amount"] or Decimal("0"), row["count"]) for row in rows}
