"""
Integration tests for health, metrics, error envelopes and login throttling.
"""

import pytest


@pytest.mark.django_db
@pytest.mark.integration
class TestOperationalEndpoints:
    def test_health_is_public(self, api_client):
        response = api_client.get("/health/")

        assert response.status_code == 200
        assert response.json()["status"] == "healthy"

    def test_ready_runs_every_check(self, api_client):
        body = api_client.get("/ready/").json()

        assert body["status"] == "ready"
        assert body["checks"] == {"database": True, "cache": True, "stripe": True}

    def test_ready_without_stripe_keys(self, api_client, settings):
        settings.STRIPE_WEBHOOK_SECRET = ""

        response = api_client.get("/ready/")

        assert response.status_code == 503
        assert response.json()["checks"]["stripe"] is False

    def test_metrics_scrape(self, admin_client):
        admin_client.get("/api/clients")

        response = admin_client.get("/metrics")

        assert response.status_code == 200
        assert b"http_requests_total" in response.content

    def test_correlation_id_is_echoed(self, admin_client):
        response = admin_client.get("/api/clients", HTTP_X_CORRELATION_ID="abc-123")

        assert response["X-Correlation-ID"] == "abc-123"
        assert response["X-Request-Status"] == "success"


@pytest.mark.django_db
@pytest.mark.integration
class TestErrorEnvelope:
    """DRF errors come back in the service envelope."""

    def test_permission_denied(self, staff_client):
        response = staff_client.post("/api/products", {"name": "CRM"}, format="json")

        assert response.status_code == 403
        assert response.json()["success"] is False
        assert response.json()["code"] == "PERMISSION_DENIED"

    def test_serializer_errors(self, admin_client):
        response = admin_client.post("/api/tasks", {"task_type": "call"}, format="json")

        body = response.json()
        assert response.status_code == 400
        assert body["code"] == "VALIDATION_ERROR"
        assert body["error"].startswith("title: ")
        assert "title" in body["details"]


@pytest.mark.django_db
@pytest.mark.integration
class TestLoginThrottle:
    def test_form_login_over_limit_redirects(self, api_client, staff_profile, settings):
        settings.CRM_LOGIN_RATE_LIMIT = 2
        credentials = {"email": "staff@example.com", "password": "wrong"}

        first = api_client.post("/api/auth/login", credentials)
        api_client.post("/api/auth/login", credentials)
        third = api_client.post("/api/auth/login", credentials)

        assert first["X-RateLimit-Remaining"] == "1"
        assert third.status_code == 302
        assert third["Location"] == "/auth/login?error=rate_limited"

    def test_json_login_over_limit(self, api_client, settings):
        settings.CRM_LOGIN_RATE_LIMIT = 1
        api_client.post("/api/auth/login", {"email": "a@example.com", "password": "x"}, format="json")

        response = api_client.post("/api/auth/login", {"email": "a@example.com", "password": "x"}, format="json")

        assert response.status_code == 429
        assert response.json()["code"] == "RATE_LIMITED"
        assert "Retry-After" in response
