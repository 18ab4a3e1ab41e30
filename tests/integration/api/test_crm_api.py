"""
Integration tests for contact, tag, opportunity and task endpoints.
"""

import pytest


def create_contact(client, first_name="Ana", **fields):
    payload = {"first_name": first_name}
    payload.update(fields)
    response = client.post("/api/contacts", payload, format="json")
    assert response.status_code == 201
    return response.json()["data"]


@pytest.mark.django_db
@pytest.mark.integration
class TestContactAPI:
    """Integration tests for contact endpoints."""

    def test_list_is_paginated(self, admin_client):
        for name in ("Ana", "Luis", "Marta"):
            create_contact(admin_client, name)

        body = admin_client.get("/api/contacts", {"per_page": 2, "page": 2}).json()

        assert len(body["data"]) == 1
        assert body["pagination"] == {"total": 3, "page": 2, "per_page": 2, "total_pages": 2}

    def test_score_bounds(self, admin_client):
        contact = create_contact(admin_client)

        assert admin_client.patch(
            f"/api/contacts/{contact['id']}/score", {"score": 90}, format="json"
        ).json()["data"]["score"] == 90
        assert admin_client.patch(
            f"/api/contacts/{contact['id']}/score", {"score": 101}, format="json"
        ).status_code == 400

    def test_interaction_updates_last_contact_date(self, admin_client):
        contact = create_contact(admin_client)

        response = admin_client.post(
            f"/api/contacts/{contact['id']}/interactions",
            {"subject": "Llamada inicial", "interaction_type": "call"},
            format="json",
        )

        assert response.status_code == 201
        detail = admin_client.get(f"/api/contacts/{contact['id']}").json()["data"]
        assert detail["last_contact_date"] is not None
        interactions = admin_client.get(f"/api/contacts/{contact['id']}/interactions").json()["data"]
        assert [item["interaction_type"] for item in interactions] == ["call"]

    def test_import(self, admin_client):
        response = admin_client.post(
            "/api/contacts/import",
            {"contacts": [{"first_name": "Ana"}, {"first_name": "Luis", "email": "luis@example.com"}]},
            format="json",
        )

        assert response.status_code == 201
        assert response.json()["imported"] == 2
        assert response.json()["message"] == "2 contacts imported"

    def test_stats(self, admin_client):
        create_contact(admin_client, contact_type="customer")
        create_contact(admin_client, "Luis")

        data = admin_client.get("/api/contacts/stats").json()["data"]

        assert data["total"] == 2
        assert data["new_this_month"] == 2
        assert data["by_type"]["customer"] == 1

    def test_tags(self, admin_client):
        contact = create_contact(admin_client)
        tag = admin_client.post("/api/tags", {"name": "VIP"}, format="json").json()["data"]

        admin_client.post(f"/api/contacts/{contact['id']}/tags/{tag['id']}")
        admin_client.post(f"/api/contacts/{contact['id']}/tags/{tag['id']}")

        tags = admin_client.get(f"/api/contacts/{contact['id']}/tags").json()["data"]
        assert [item["name"] for item in tags] == ["VIP"]
        assert tag["color"] == "#6366f1"
        tagged = admin_client.get(f"/api/tags/{tag['id']}/contacts").json()["data"]
        assert [item["id"] for item in tagged] == [contact["id"]]

        admin_client.delete(f"/api/contacts/{contact['id']}/tags/{tag['id']}")
        assert admin_client.get(f"/api/contacts/{contact['id']}/tags").json()["data"] == []


@pytest.mark.django_db
@pytest.mark.integration
class TestOpportunityAPI:
    def _pipeline(self, client):
        response = client.post(
            "/api/pipelines",
            {
                "name": "Ventas",
                "stages": [
                    {"name": "Propuesta", "order_index": 1, "probability": 50},
                    {"name": "Contacto", "order_index": 0, "probability": 10},
                ],
            },
            format="json",
        )
        assert response.status_code == 201
        return response.json()["data"]

    def test_new_deal_lands_in_first_stage(self, admin_client):
        pipeline = self._pipeline(admin_client)

        response = admin_client.post(
            "/api/opportunities",
            {"title": "Renovación", "value": "1200.00", "pipeline_id": pipeline["id"]},
            format="json",
        )

        assert [stage["name"] for stage in pipeline["stages"]] == ["Contacto", "Propuesta"]
        assert response.json()["data"]["stage_id"] == pipeline["stages"][0]["id"]

    def test_board_and_metrics(self, admin_client):
        pipeline = self._pipeline(admin_client)
        first, second = pipeline["stages"]
        won = admin_client.post(
            "/api/opportunities", {"title": "A", "value": "1000", "pipeline_id": pipeline["id"]}, format="json"
        ).json()["data"]
        lost = admin_client.post(
            "/api/opportunities", {"title": "B", "value": "400", "pipeline_id": pipeline["id"]}, format="json"
        ).json()["data"]
        moved = admin_client.post(
            "/api/opportunities", {"title": "C", "value": "250", "pipeline_id": pipeline["id"]}, format="json"
        ).json()["data"]

        admin_client.patch(f"/api/opportunities/{moved['id']}/stage", {"stage_id": second["id"]}, format="json")
        admin_client.post(f"/api/opportunities/{won['id']}/won")
        response = admin_client.post(f"/api/opportunities/{lost['id']}/lost", {"reason": "Precio"}, format="json")
        assert response.json()["data"]["lost_reason"] == "Precio"

        board = admin_client.get(f"/api/pipelines/{pipeline['id']}/board").json()["data"]
        assert [column["stage"]["name"] for column in board] == ["Contacto", "Propuesta"]
        assert board[0]["opportunities"] == []
        assert board[1]["total_value"] == "250.00"

        metrics = admin_client.get("/api/opportunities/metrics").json()["data"]
        assert metrics["won_count"] == 1
        assert metrics["lost_count"] == 1
        assert metrics["win_rate"] == "50.00"
        assert metrics["average_deal_size"] == "1000.00"


@pytest.mark.django_db
@pytest.mark.integration
class TestTaskAPI:
    """Integration tests for task endpoints."""

    def test_create_and_complete(self, admin_client, admin_profile):
        task = admin_client.post(
            "/api/tasks", {"title": "Enviar propuesta", "task_type": "email"}, format="json"
        ).json()["data"]

        assert task["assigned_to"] == admin_profile.id
        assert [item["task"]["id"] for item in admin_client.get("/api/tasks/pending").json()["data"]] == [task["id"]]

        completed = admin_client.post(f"/api/tasks/{task['id']}/complete").json()["data"]

        assert completed["status"] == "completed"
        assert completed["completed_at"] is not None
        stats = admin_client.get("/api/tasks/stats").json()["data"]
        assert stats["completed"] == 1
        assert stats["pending"] == 0

    def test_unknown_task_type(self, admin_client):
        response = admin_client.post("/api/tasks", {"title": "Comer", "task_type": "lunch"}, format="json")

        assert response.status_code == 400

    def test_overdue(self, admin_client):
        admin_client.post(
            "/api/tasks", {"title": "Llamar", "due_date": "2020-01-01T09:00:00Z"}, format="json"
        )

        overdue = admin_client.get("/api/tasks/overdue").json()["data"]

        assert [item["task"]["title"] for item in overdue] == ["Llamar"]
