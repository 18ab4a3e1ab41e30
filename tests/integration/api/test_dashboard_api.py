"""
Integration tests for dashboard endpoints.
"""

from datetime import date, timedelta

import pytest

from core.infrastructure.models import AuditLog


@pytest.mark.django_db
@pytest.mark.integration
class TestDashboardAPI:
    """Integration tests for dashboard counters and the sales chart."""

    def test_stats(self, staff_client, db_license):
        data = staff_client.get("/api/dashboard/stats").json()["data"]

        assert data["total_clients"] == 1
        assert data["total_products"] == 1
        assert data["total_licenses"] == 1
        assert data["pending_payment_licenses"] == 1
        assert data["expired_licenses"] == 0

    def test_status_change_refreshes_cached_stats(self, admin_client, db_license):
        assert admin_client.get("/api/dashboard/stats").json()["data"]["active_licenses"] == 0

        admin_client.patch(f"/api/licenses/{db_license.id}/status", {"status": "activa"}, format="json")

        data = admin_client.get("/api/dashboard/stats").json()["data"]
        assert data["active_licenses"] == 1
        assert data["pending_payment_licenses"] == 0
        assert AuditLog.objects.filter(action="LicenseStatusChanged", actor="admin@example.com").exists()

    def test_new_client_and_product_refresh_cached_stats(self, admin_client, db_license):
        before = admin_client.get("/api/dashboard/stats").json()["data"]
        assert before["total_clients"] == 1

        admin_client.post("/api/clients", {"name": "Otro", "email": "otro@example.com"}, format="json")
        admin_client.post(
            "/api/products",
            {"name": "Backup", "price_one_payment": "100.00", "price_subscription": "10.00"},
            format="json",
        )

        data = admin_client.get("/api/dashboard/stats").json()["data"]
        assert data["total_clients"] == 2
        assert data["total_products"] == 2
        assert AuditLog.objects.filter(action="ClientCreated", actor="admin@example.com").exists()

    def test_license_delete_refreshes_cached_stats(self, admin_client, db_license):
        assert admin_client.get("/api/dashboard/stats").json()["data"]["total_licenses"] == 1

        admin_client.delete(f"/api/licenses/{db_license.id}")

        data = admin_client.get("/api/dashboard/stats").json()["data"]
        assert data["total_licenses"] == 0
        assert data["pending_payment_licenses"] == 0

    def test_client_delete_refreshes_cached_stats(self, admin_client, db_license):
        assert admin_client.get("/api/dashboard/stats").json()["data"]["total_licenses"] == 1

        admin_client.delete(f"/api/clients/{db_license.client_id}")

        data = admin_client.get("/api/dashboard/stats").json()["data"]
        assert data["total_clients"] == 0
        assert data["total_licenses"] == 0

    def test_end_date_move_refreshes_expired_count(self, admin_client, db_license):
        assert admin_client.get("/api/dashboard/stats").json()["data"]["expired_licenses"] == 0

        yesterday = (date.today() - timedelta(days=1)).isoformat()
        admin_client.put(f"/api/licenses/{db_license.id}", {"end_date": yesterday}, format="json")

        assert admin_client.get("/api/dashboard/stats").json()["data"]["expired_licenses"] == 1
        assert AuditLog.objects.filter(action="LicenseEndDateChanged").exists()

    def test_sales_default_interval(self, staff_client):
        data = staff_client.get("/api/sales/data").json()["data"]

        assert data["interval"] == "6m"
        assert data["granularity"] == "monthly"
        assert len(data["labels"]) == 6
        assert data["count"] == 0

    def test_sales_daily(self, staff_client):
        data = staff_client.get("/api/sales/data", {"interval": "7d"}).json()["data"]

        assert data["granularity"] == "daily"
        assert len(data["values"]) == 7

    def test_invalid_interval(self, staff_client):
        response = staff_client.get("/api/sales/data", {"interval": "1y"})

        assert response.status_code == 400
        assert response.json()["error"].startswith("Invalid interval: 1y.")
