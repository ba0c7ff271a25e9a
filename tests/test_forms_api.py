"""Tests for the JSON forms API"""

from unittest.mock import MagicMock

from form_builder.exceptions import TransportFailure
from form_builder.main import app
from form_builder.services.form_service import get_form_service

FORM_PAYLOAD = {
    "title": "Workshop Signup",
    "description": "Saturday workshop",
    "fields": [
        {"id": "text-1", "type": "text", "label": "Name", "required": True, "order": 0},
        {
            "id": "radio-2",
            "type": "radio",
            "label": "Session",
            "options": ["Morning", "Afternoon"],
            "order": 1,
        },
    ],
}


class TestFormsApi:
    """CRUD over stored forms"""

    def test_create_and_get_form(self, client):
        response = client.post("/api/forms", json=FORM_PAYLOAD)
        assert response.status_code == 201
        created = response.json()
        assert created["title"] == "Workshop Signup"
        assert [f["id"] for f in created["fields"]] == ["text-1", "radio-2"]

        response = client.get(f"/api/forms/{created['id']}")
        assert response.status_code == 200
        assert response.json()["fields"][1]["options"] == ["Morning", "Afternoon"]

    def test_list_forms(self, client):
        client.post("/api/forms", json=FORM_PAYLOAD)

        response = client.get("/api/forms")

        assert response.status_code == 200
        assert len(response.json()) == 1

    def test_get_unknown_form(self, client):
        response = client.get("/api/forms/form-404")
        assert response.status_code == 404
        assert response.json()["detail"] == "Form not found"

    def test_update_form_partially(self, client):
        form_id = client.post("/api/forms", json=FORM_PAYLOAD).json()["id"]

        response = client.put(f"/api/forms/{form_id}", json={"title": "Renamed"})

        assert response.status_code == 200
        body = response.json()
        assert body["title"] == "Renamed"
        assert body["description"] == "Saturday workshop"
        assert len(body["fields"]) == 2

    def test_update_unknown_form(self, client):
        response = client.put("/api/forms/form-404", json={"title": "x"})
        assert response.status_code == 404

    def test_delete_form(self, client):
        form_id = client.post("/api/forms", json=FORM_PAYLOAD).json()["id"]

        response = client.delete(f"/api/forms/{form_id}")

        assert response.status_code == 200
        assert response.json() == {"message": "Form deleted successfully"}
        assert client.get(f"/api/forms/{form_id}").status_code == 404

    def test_delete_unknown_form(self, client):
        assert client.delete("/api/forms/form-404").status_code == 404

    def test_storage_failure_returns_500(self, client):
        failing = MagicMock()
        failing.create_form.side_effect = TransportFailure("db down")
        app.dependency_overrides[get_form_service] = lambda: failing

        response = client.post("/api/forms", json=FORM_PAYLOAD)

        assert response.status_code == 500
        assert response.json()["detail"] == "Failed to create form"

    def test_invalid_field_type_rejected(self, client):
        payload = {
            "title": "Bad",
            "fields": [{"id": "x", "type": "number", "label": "Age"}],
        }
        assert client.post("/api/forms", json=payload).status_code == 422


class TestSubmissionsApi:
    """Raw submissions are appended without validation"""

    def test_create_and_list_submissions(self, client):
        form_id = client.post("/api/forms", json=FORM_PAYLOAD).json()["id"]

        response = client.post(
            f"/api/forms/{form_id}/submissions",
            json={"text-1": "Ann", "radio-2": "Morning"},
        )
        assert response.status_code == 201
        assert response.json()["data"] == {"text-1": "Ann", "radio-2": "Morning"}

        response = client.get(f"/api/forms/{form_id}/submissions")
        assert response.status_code == 200
        assert len(response.json()) == 1

    def test_submission_for_unknown_form_is_stored(self, client):
        response = client.post("/api/forms/form-404/submissions", json={"a": "b"})

        assert response.status_code == 201
        assert response.json()["form_id"] == "form-404"
