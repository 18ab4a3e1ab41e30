"""
Pytest configuration and shared fixtures.
"""

import uuid
from datetime import date, timedelta

import pytest
from asgiref.sync import async_to_sync
from django.contrib.auth import get_user_model
from django.core.cache import cache

from accounts.infrastructure.repositories.django_profile_repository import DjangoProfileRepository
from clients.domain.client import Client
from clients.infrastructure.repositories.django_client_repository import DjangoClientRepository
from core.domain.value_objects import LicenseStatus, LicenseType, UserRole
from licenses.domain.license import License
from licenses.infrastructure.repositories.django_license_repository import DjangoLicenseRepository
from products.domain.product import Product
from products.infrastructure.repositories.django_product_repository import DjangoProductRepository
from tests.fakes import RecordingEventBus

PASSWORD = "secret123"


@pytest.fixture(autouse=True)
def clear_cache():
    """Every test starts with an empty cache."""
    cache.clear()
    yield
    cache.clear()


@pytest.fixture
def client_repository():
    """Fixture for ClientRepository."""
    return DjangoClientRepository()


@pytest.fixture
def product_repository():
    """Fixture for ProductRepository."""
    return DjangoProductRepository()


@pytest.fixture
def license_repository():
    """Fixture for LicenseRepository."""
    return DjangoLicenseRepository()


@pytest.fixture
def profile_repository():
    return DjangoProfileRepository()


@pytest.fixture
def event_recorder():
    return RecordingEventBus()


@pytest.fixture
def sample_client():
    """Fixture for a sample Client entity."""
    unique_id = uuid.uuid4().hex[:8]
    return Client.create(
        name="Acme Cliente",
        email=f"cliente-{unique_id}@example.com",
        phone="+34 600 111 222",
        company="Acme S.L.",
    )


@pytest.fixture
def sample_product():
    """Fixture for a sample Product entity."""
    return Product.create(
        name="SoftControl Pro",
        price_one_payment="499.00",
        price_subscription="49.90",
        description="Gestión",
    )


@pytest.fixture
def sample_license():
    """Fixture for a subscription License entity."""
    return License.create(
        client_id=uuid.uuid4(),
        product_id=uuid.uuid4(),
        license_type=LicenseType.SUBSCRIPTION,
        start_date=date(2024, 1, 1),
    )


@pytest.fixture
def db_client(db, client_repository, sample_client):
    """Fixture for a Client saved in database."""
    return async_to_sync(client_repository.save)(sample_client)


@pytest.fixture
def db_product(db, product_repository, sample_product):
    """Fixture for a Product saved in database."""
    return async_to_sync(product_repository.save)(sample_product)


@pytest.fixture
def db_license(db, db_client, db_product, license_repository):
    """Fixture for a subscription License saved in database."""
    license = License.create(
        client_id=db_client.id,
        product_id=db_product.id,
        license_type=LicenseType.SUBSCRIPTION,
        start_date=date.today() - timedelta(days=40),
        end_date=date.today() + timedelta(days=20),
        status=LicenseStatus.PENDING_PAYMENT,
    )
    return async_to_sync(license_repository.save)(license)


def _create_user(profile_repository, email, role):
    return async_to_sync(profile_repository.create_user)(email, PASSWORD, "Usuario Prueba", role)


@pytest.fixture
def admin_profile(db, profile_repository):
    return _create_user(profile_repository, "admin@example.com", UserRole.ADMIN)


@pytest.fixture
def staff_profile(db, profile_repository):
    return _create_user(profile_repository, "staff@example.com", UserRole.STAFF)


@pytest.fixture
def api_client():
    """Fixture for DRF API client."""
    from rest_framework.test import APIClient

    return APIClient()


@pytest.fixture
def admin_client(api_client, admin_profile):
    """API client logged in as an admin."""
    api_client.force_login(get_user_model().objects.get(pk=admin_profile.id))
    return api_client


@pytest.fixture
def staff_client(api_client, staff_profile):
    """API client logged in as a staff member."""
    api_client.force_login(get_user_model().objects.get(pk=staff_profile.id))
    return api_client
