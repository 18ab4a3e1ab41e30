"""
Celery tasks for background processing.

The nightly sweep moves lapsed subscription licenses to ``pendiente_pago``.
"""
import logging

from asgiref.sync import async_to_sync

from SoftControlCRM.celery import app

logger = logging.getLogger(__name__)


def build_license_service():
    from clients.infrastructure.repositories.django_client_repository import DjangoClientRepository
    from core.infrastructure.events import event_bus
    from licenses.application.services.license_service import LicenseService
    from licenses.infrastructure.repositories.django_license_repository import (
        DjangoLicenseRepository,
    )
    from products.infrastructure.repositories.django_product_repository import (
        DjangoProductRepository,
    )

    return LicenseService(
        license_repository=DjangoLicenseRepository(),
        client_repository=DjangoClientRepository(),
        product_repository=DjangoProductRepository(),
        event_bus=event_bus,
    )


@app.task(bind=True, max_retries=3)
def sweep_expired_licenses_task(self):
    """
    Celery task for the license expiration sweep.

    Returns:
        Number of licenses moved to ``pendiente_pago``
    """
    result = async_to_sync(build_license_service().sweep_lapsed_subscriptions)()
    if not result.success:
        logger.error("License sweep failed: %s", result.error)
        raise self.retry(countdown=2 ** self.request.retries * 60)
    logger.info("License sweep: %s", result.message)
    return len(result.data)
