"""
Integration tests for the Spanish customer API.
"""

import json
import uuid

import pytest


def create_customer(client, **fields):
    payload = {"nombre": "Lucía", "correo_electronico": f"lucia-{uuid.uuid4().hex[:6]}@example.com"}
    payload.update(fields)
    return client.post("/api/customers/crear", payload, format="json")


@pytest.mark.django_db
@pytest.mark.integration
class TestCustomerCreateAPI:
    """Integration tests for customer creation."""

    def test_create(self, admin_client):
        response = create_customer(
            admin_client, correo_electronico="Lucia@Example.com", empresa="Acme", estado="prospecto"
        )

        assert response.status_code == 201
        body = response.json()
        assert body["message"] == "Cliente creado exitosamente"
        assert body["data"]["email"] == "lucia@example.com"
        assert body["data"]["company_name"] == "Acme"
        assert body["data"]["contact_type"] == "customer"
        assert body["data"]["source"] == "manual"
        assert body["data"]["status"] == "qualified"

    def test_status_defaults_to_active(self, admin_client):
        response = create_customer(admin_client)

        assert response.json()["data"]["status"] == "active"

    def test_short_name(self, admin_client):
        response = create_customer(admin_client, nombre="L")

        assert response.status_code == 400
        body = response.json()
        assert body["field"] == "nombre"
        assert body["error"] == "El nombre es requerido y debe tener al menos 2 caracteres"

    def test_invalid_email(self, admin_client):
        response = create_customer(admin_client, correo_electronico="no-es-email")

        assert response.status_code == 400
        assert response.json()["error"] == "El correo electrónico no es válido"

    def test_duplicate_email(self, admin_client):
        create_customer(admin_client, correo_electronico="dup@example.com")

        response = create_customer(admin_client, correo_electronico="DUP@example.com")

        assert response.status_code == 409
        assert response.json()["code"] == "DUPLICATE_EMAIL"

    def test_requires_json(self, admin_client):
        response = admin_client.post(
            "/api/customers/crear", {"nombre": "Lucía", "correo_electronico": "l@example.com"}
        )

        assert response.status_code == 400
        assert response.json()["error"] == "Content-Type debe ser application/json"

    def test_staff_cannot_create(self, staff_client):
        assert create_customer(staff_client).status_code == 403


@pytest.mark.django_db
@pytest.mark.integration
class TestCustomerListAPI:
    def test_pagination(self, admin_client):
        for _ in range(3):
            create_customer(admin_client)

        response = admin_client.get("/api/customers", {"page": 1, "limite": 2})

        body = response.json()
        assert body["total"] == 3
        assert body["limite"] == 2
        assert len(body["data"]) == 2
        assert body["tiene_mas"] is True

    def test_search(self, admin_client):
        create_customer(admin_client, nombre="Bernardo")
        create_customer(admin_client, nombre="Carla")

        body = admin_client.get("/api/customers", {"busqueda": "bern"}).json()

        assert [row["first_name"] for row in body["data"]] == ["Bernardo"]
        assert body["page"] == 1
        assert body["tiene_mas"] is False

    def test_status_filter(self, admin_client):
        create_customer(admin_client, estado="inactivo")
        create_customer(admin_client)

        body = admin_client.get("/api/customers", {"estado": "inactivo"}).json()

        assert body["total"] == 1
        assert body["data"][0]["status"] == "inactive"

    def test_requires_session(self, api_client):
        assert api_client.get("/api/customers").status_code == 401


@pytest.mark.django_db
@pytest.mark.integration
class TestCustomerDetailAPI:
    def test_get_update_delete(self, admin_client):
        customer_id = create_customer(admin_client).json()["data"]["id"]

        assert admin_client.get(f"/api/customers/{customer_id}").status_code == 200

        response = admin_client.put(
            f"/api/customers/{customer_id}",
            json.dumps({"telefono": "+34 600 000 000"}),
            content_type="application/json",
        )
        assert response.json()["message"] == "Cliente actualizado exitosamente"
        assert response.json()["data"]["phone"] == "+34 600 000 000"

        response = admin_client.delete(f"/api/customers/{customer_id}")
        assert response.json()["message"] == "Cliente eliminado exitosamente"
        assert admin_client.get(f"/api/customers/{customer_id}").status_code == 404

    def test_unknown_customer(self, staff_client):
        response = staff_client.get(f"/api/customers/{uuid.uuid4()}")

        assert response.status_code == 404
        assert response.json()["code"] == "CONTACT_NOT_FOUND"
