"""
Integration tests for auth API endpoints.
"""

import pytest

from tests.conftest import PASSWORD


@pytest.mark.django_db
@pytest.mark.integration
class TestLoginAPI:
    """Login answers with redirects for the HTML form."""

    def test_login_redirects_to_dashboard(self, api_client, staff_profile):
        response = api_client.post(
            "/api/auth/login", {"email": "staff@example.com", "password": PASSWORD}
        )

        assert response.status_code == 302
        assert response["Location"] == "/dashboard"
        assert api_client.get("/api/auth/me").status_code == 200

    def test_wrong_password(self, api_client, staff_profile):
        response = api_client.post("/api/auth/login", {"email": "staff@example.com", "password": "nope"})

        assert response.status_code == 302
        assert response["Location"] == "/auth/login?error=invalid"

    def test_missing_fields(self, api_client):
        response = api_client.post("/api/auth/login", {})

        assert response["Location"] == "/auth/login?error=invalid"

    def test_logout(self, staff_client):
        response = staff_client.post("/api/auth/logout")

        assert response.status_code == 302
        assert staff_client.get("/api/auth/me").status_code == 401


@pytest.mark.django_db
@pytest.mark.integration
class TestCurrentUserAPI:
    def test_me(self, admin_client):
        response = admin_client.get("/api/auth/me")

        data = response.json()["data"]
        assert data["email"] == "admin@example.com"
        assert data["role"] == "admin"
        assert data["is_admin"] is True

    def test_me_without_session(self, api_client):
        response = api_client.get("/api/auth/me")

        assert response.status_code == 401
        assert response.json()["success"] is False


@pytest.mark.django_db
@pytest.mark.integration
class TestUsersAPI:
    def test_admin_creates_user(self, admin_client):
        response = admin_client.post(
            "/api/auth/users",
            {"email": "Nuevo@Example.com", "password": "secret123", "full_name": "Nuevo"},
            format="json",
        )

        assert response.status_code == 201
        assert response.json()["data"]["email"] == "nuevo@example.com"
        assert response.json()["data"]["role"] == "staff"

    def test_short_password(self, admin_client):
        response = admin_client.post(
            "/api/auth/users", {"email": "nuevo@example.com", "password": "123"}, format="json"
        )

        assert response.status_code == 400
        assert response.json()["code"] == "VALIDATION_ERROR"

    def test_duplicate_email(self, admin_client, staff_profile):
        response = admin_client.post(
            "/api/auth/users", {"email": "staff@example.com", "password": "secret123"}, format="json"
        )

        assert response.status_code == 409

    def test_staff_cannot_create_users(self, staff_client):
        response = staff_client.post(
            "/api/auth/users", {"email": "nuevo@example.com", "password": "secret123"}, format="json"
        )

        assert response.status_code == 403
