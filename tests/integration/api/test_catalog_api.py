"""
Integration tests for client, product and license endpoints.
"""

import uuid
from datetime import date, timedelta

import pytest

from core.infrastructure.events import event_bus
from licenses.domain.events import LicenseStatusChanged


@pytest.mark.django_db
@pytest.mark.integration
class TestPermissions:
    """Reads need a session, writes need an admin."""

    def test_unauthenticated_is_401(self, api_client):
        response = api_client.get("/api/products")

        assert response.status_code == 401
        assert response.json() == {"success": False, "error": "Not authenticated"}

    def test_staff_can_read(self, staff_client, db_product):
        response = staff_client.get("/api/products")

        assert response.status_code == 200
        assert [row["name"] for row in response.json()["data"]] == ["SoftControl Pro"]

    def test_staff_cannot_write(self, staff_client):
        response = staff_client.post(
            "/api/products",
            {"name": "Nuevo", "price_one_payment": "10.00", "price_subscription": "1.00"},
            format="json",
        )

        assert response.status_code == 403


@pytest.mark.django_db
@pytest.mark.integration
class TestClientAPI:
    def test_create_and_get_with_licenses(self, admin_client, db_license, db_client):
        response = admin_client.get(f"/api/clients/{db_client.id}")

        data = response.json()["data"]
        assert data["client"]["email"] == db_client.email
        assert [item["license"]["id"] for item in data["licenses"]] == [str(db_license.id)]

    def test_create_normalises_email(self, admin_client):
        response = admin_client.post(
            "/api/clients", {"name": "Otro", "email": "Otro@Example.com"}, format="json"
        )

        assert response.status_code == 201
        assert response.json()["data"]["email"] == "otro@example.com"

    def test_unknown_client(self, admin_client):
        response = admin_client.get(f"/api/clients/{uuid.uuid4()}")

        assert response.status_code == 404
        assert response.json()["code"] == "CLIENT_NOT_FOUND"


@pytest.mark.django_db
@pytest.mark.integration
class TestLicenseAPI:
    """Integration tests for license endpoints."""

    def test_create_defaults_to_active(self, admin_client, db_client, db_product):
        response = admin_client.post(
            "/api/licenses",
            {"client_id": str(db_client.id), "product_id": str(db_product.id), "type": "licencia_unica"},
            format="json",
        )

        assert response.status_code == 201
        data = response.json()["data"]
        assert data["status"] == "activa"
        assert data["start_date"] == date.today().isoformat()

    def test_create_for_unknown_product(self, admin_client, db_client):
        response = admin_client.post(
            "/api/licenses",
            {"client_id": str(db_client.id), "product_id": str(uuid.uuid4()), "type": "suscripcion"},
            format="json",
        )

        assert response.status_code == 404
        assert response.json()["code"] == "PRODUCT_NOT_FOUND"

    def test_end_before_start(self, admin_client, db_client, db_product):
        today = date.today()
        response = admin_client.post(
            "/api/licenses",
            {
                "client_id": str(db_client.id),
                "product_id": str(db_product.id),
                "type": "suscripcion",
                "start_date": today.isoformat(),
                "end_date": (today - timedelta(days=1)).isoformat(),
            },
            format="json",
        )

        assert response.status_code == 400

    def test_full_view_price_follows_type(self, staff_client, db_license):
        response = staff_client.get(f"/api/licenses/{db_license.id}")

        data = response.json()["data"]
        assert data["price"] == "49.90"
        assert data["license"]["status_label"]
        assert data["is_expired"] is False

    def test_status_change_publishes_event(self, admin_client, db_license, monkeypatch):
        published = []

        async def record(event):
            published.append(event)

        monkeypatch.setattr(event_bus, "publish", record)

        response = admin_client.patch(
            f"/api/licenses/{db_license.id}/status", {"status": "activa"}, format="json"
        )

        assert response.status_code == 200
        assert response.json()["data"]["status"] == "activa"
        [event] = [item for item in published if isinstance(item, LicenseStatusChanged)]
        assert event.actor == "admin@example.com"

    def test_list_filters_by_status(self, staff_client, db_license):
        response = staff_client.get("/api/licenses", {"status": "pendiente_pago"})

        assert len(response.json()["data"]) == 1
        assert staff_client.get("/api/licenses", {"status": "activa"}).json()["data"] == []

    def test_counts(self, staff_client, db_license):
        response = staff_client.get("/api/licenses/counts")

        assert response.json()["data"] == {"activa": 0, "inactiva": 0, "pendiente_pago": 1}
