"""
Django management command to create demo data for development.

Creates:
- An admin and a staff user with profiles
- A demo client, product and subscription license
- A sales pipeline with its stages
"""

import logging

from asgiref.sync import async_to_sync
from django.core.management.base import BaseCommand
from django.utils import timezone

from accounts.application.services.auth_service import AuthService
from accounts.infrastructure.repositories.django_profile_repository import DjangoProfileRepository
from clients.domain.client import Client
from clients.infrastructure.repositories.django_client_repository import DjangoClientRepository
from core.domain.value_objects import LicenseType, UserRole
from licenses.domain.license import License
from licenses.infrastructure.repositories.django_license_repository import DjangoLicenseRepository
from opportunities.domain.pipeline import Pipeline
from opportunities.infrastructure.repositories.django_pipeline_repository import (
    DjangoPipelineRepository,
)
from products.domain.product import Product
from products.infrastructure.repositories.django_product_repository import DjangoProductRepository

logger = logging.getLogger(__name__)

DEFAULT_STAGES = [
    {"name": "Prospecto", "color": "#94a3b8", "probability": 10},
    {"name": "Calificado", "color": "#6366f1", "probability": 30},
    {"name": "Propuesta", "color": "#f59e0b", "probability": 60},
    {"name": "Negociación", "color": "#10b981", "probability": 80},
]


class Command(BaseCommand):
    """Command to create demo data."""

    help = "Create demo data (users, client, product, license, pipeline)"

    def add_arguments(self, parser):
        """Add command arguments."""
        parser.add_argument(
            "--admin-email",
            type=str,
            default="admin@softcontrol.local",
            help="Admin login email (default: admin@softcontrol.local)",
        )
        parser.add_argument(
            "--password",
            type=str,
            default="admin123",
            help="Password for the demo users (default: admin123)",
        )
        parser.add_argument(
            "--skip-users",
            action="store_true",
            help="Skip creating users",
        )

    def handle(self, *args, **options):
        """Execute the command."""
        if not options["skip_users"]:
            self.create_user(options["admin_email"], options["password"], "Administrador", UserRole.ADMIN)
            self.create_user("staff@softcontrol.local", options["password"], "Personal", UserRole.STAFF)
        async_to_sync(self.create_crm_data)()

    def create_user(self, email: str, password: str, full_name: str, role: UserRole):
        """Create a user with profile unless the email is taken."""
        service = AuthService(DjangoProfileRepository())
        result = async_to_sync(service.sign_up)(email, password, full_name, role.value)
        if result.success:
            # pylint: disable=no-member
            self.stdout.write(self.style.SUCCESS(f"Created {role.value} user: {email} / {password}"))
        else:
            # pylint: disable=no-member
            self.stdout.write(self.style.WARNING(f"User {email} not created: {result.error}"))

    async def create_crm_data(self):
        """Create the demo client, product, license and pipeline."""
        client = await DjangoClientRepository().save(
            Client.create(
                name="Cliente Demo",
                email="cliente@demo.local",
                phone="+34 600 000 000",
                company="Demo S.L.",
            )
        )
        product = await DjangoProductRepository().save(
            Product.create(
                name="SoftControl Pro",
                price_one_payment="499.00",
                price_subscription="49.00",
                description="Licencia de software de gestión",
            )
        )
        license = await DjangoLicenseRepository().save(
            License.create(
                client_id=client.id,
                product_id=product.id,
                license_type=LicenseType.SUBSCRIPTION,
                start_date=timezone.localdate(),
            )
        )
        pipeline = await DjangoPipelineRepository().save(
            Pipeline.create(name="Ventas", stages=DEFAULT_STAGES, description="Pipeline de ventas")
        )
        logger.info("Demo data created: license %s, pipeline %s", license.id, pipeline.id)
        # pylint: disable=no-member
        self.stdout.write(self.style.SUCCESS(f"Created client: {client.name} ({client.email})"))
        self.stdout.write(self.style.SUCCESS(f"Created product: {product.name}"))
        self.stdout.write(self.style.SUCCESS(f"Created license: {license.id}"))
        self.stdout.write(
            self.style.SUCCESS(f"Created pipeline: {pipeline.name} with {len(pipeline.stages)} stages")
        )
