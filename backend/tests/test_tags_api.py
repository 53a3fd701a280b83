"""
Tests for the /api/tags endpoints.
"""
from datetime import datetime

import pytest

from conftest import note_payload, person_payload, tag_payload

pytestmark = pytest.mark.slow


class TestCreateTag:
    def test_create_returns_envelope(self, client):
        response = client.post("/api/tags", json=tag_payload("Travelling", isTag=True, description="Trips"))
        body = response.json()

        assert response.status_code == 201
        assert body["status"] == "ok"
        assert body["messages"] == []
        assert body["data"]["name"] == "Travelling"
        assert body["data"]["isTag"] is True
        assert body["data"]["isType"] is False
        assert body["data"]["createdAt"] == body["data"]["updatedAt"]

    def test_string_flags_are_accepted(self, client):
        payload = tag_payload("Yoga")
        payload["isWorkout"] = "true"
        response = client.post("/api/tags", json=payload)

        assert response.status_code == 201
        assert response.json()["data"]["isWorkout"] is True

    def test_duplicate_name(self, client, make_tag):
        make_tag("Travelling", isTag=True)
        response = client.post("/api/tags", json=tag_payload(" Travelling ", isTag=True))
        body = response.json()

        assert response.status_code == 422
        assert body["status"] == "error"
        assert body["messages"] == ["A tag called 'Travelling' already exists."]
        assert body["data"]["name"] == "Travelling"
        assert client.get("/api/tags/count").json()["data"] == 1

    def test_shape_errors_echo_coerced_payload(self, client):
        payload = tag_payload("", isTag=True)
        payload["isType"] = "maybe"
        response = client.post("/api/tags", json=payload)
        body = response.json()

        assert response.status_code == 422
        assert body["messages"] == [
            {
                "value": "",
                "msg": "A tag name is required; it must be between 1 and 25 characters long.",
                "param": "name",
                "location": "body",
            },
            {
                "value": "maybe",
                "msg": "IsType is required and it must be either true or false.",
                "param": "isType",
                "location": "body",
            },
        ]
        assert body["data"]["isTag"] == "true"

    def test_body_must_be_an_object(self, client):
        response = client.post("/api/tags", json=["Travelling"])

        assert response.status_code == 422
        assert response.json() == {
            "status": "error",
            "messages": ["Request body must be a JSON object."],
            "data": None,
        }


class TestReadTags:
    def test_list_is_sorted_by_name(self, client, make_tag):
        for name in ("Yoga", "Family", "Reading"):
            make_tag(name, isTag=True)

        response = client.get("/api/tags")
        assert [t["name"] for t in response.json()["data"]] == ["Family", "Reading", "Yoga"]

    def test_filter_by_role(self, client, taxonomy):
        response = client.get("/api/tags", params={"role": "isWorkout"})
        assert [t["name"] for t in response.json()["data"]] == ["Yoga"]

    def test_get_by_id(self, client, make_tag):
        tag = make_tag("Reading", isTag=True)
        response = client.get(f"/api/tags/{tag['id']}")

        assert response.status_code == 200
        assert response.json()["data"] == tag

    def test_get_missing(self, client):
        response = client.get("/api/tags/nope")

        assert response.status_code == 404
        assert response.json() == {
            "status": "error",
            "messages": ["Could not find a tag with ID 'nope'."],
            "data": "nope",
        }


class TestUpdateTag:
    def test_rename(self, client, make_tag):
        tag = make_tag("Reading", isTag=True)
        response = client.put(f"/api/tags/{tag['id']}", json=tag_payload("Books", isTag=True))
        data = response.json()["data"]

        assert response.status_code == 200
        assert data["name"] == "Books"
        assert data["createdAt"] == tag["createdAt"]
        assert datetime.fromisoformat(data["updatedAt"]) >= datetime.fromisoformat(tag["updatedAt"])

    def test_rename_onto_another_tag(self, client, make_tag):
        make_tag("Reading", isTag=True)
        tag = make_tag("Books", isTag=True)
        response = client.put(f"/api/tags/{tag['id']}", json=tag_payload("Reading", isTag=True))

        assert response.status_code == 422
        assert response.json()["messages"] == ["A tag called 'Reading' already exists."]

    def test_missing_tag_after_validation(self, client):
        response = client.put("/api/tags/nope", json=tag_payload("Books", isTag=True))
        assert response.status_code == 404

    def test_invalid_payload_wins_over_missing_tag(self, client):
        response = client.put("/api/tags/nope", json={})
        assert response.status_code == 422

    def test_clearing_a_referenced_role_is_blocked(self, client, taxonomy):
        note = note_payload("Life", "Day out", tags=["Travelling"])
        assert client.post("/api/notes", json=note).status_code == 201
        travelling = taxonomy["Travelling"]

        response = client.put(f"/api/tags/{travelling['id']}", json=tag_payload("Travelling", isType=False))

        assert response.status_code == 422
        assert response.json()["messages"] == [
            f"Cannot update tag with ID '{travelling['id']}' without breaking referential integrity.  "
            "The tag is referenced in: 1 notes.tags field(s)."
        ]

    def test_editing_a_referenced_tag_keeping_roles(self, client, taxonomy):
        assert client.post("/api/notes", json=note_payload("Life", "Day out", tags=["Travelling"])).status_code == 201
        travelling = taxonomy["Travelling"]

        response = client.put(
            f"/api/tags/{travelling['id']}",
            json=tag_payload("Travel", isTag=True, description="Trips away from home"),
        )

        assert response.status_code == 200
        assert response.json()["data"]["description"] == "Trips away from home"


class TestDeleteTag:
    def test_delete_unreferenced(self, client, make_tag):
        tag = make_tag("Reading", isTag=True)
        response = client.delete(f"/api/tags/{tag['id']}")

        assert response.status_code == 200
        assert response.json()["data"]["id"] == tag["id"]
        assert client.get("/api/tags/count").json()["data"] == 0

    def test_delete_tag_used_by_a_person(self, client, taxonomy):
        person = person_payload("Janet", tags=["Family"])
        assert client.post("/api/people", json=person).status_code == 201
        family = taxonomy["Family"]
        before = client.get("/api/tags/count").json()["data"]

        response = client.delete(f"/api/tags/{family['id']}")

        assert response.status_code == 422
        assert response.json()["messages"][0].endswith("referenced in: 1 people.tags field(s).")
        assert response.json()["data"] == family["id"]
        assert client.get("/api/tags/count").json()["data"] == before

    def test_delete_note_type_in_use(self, client, taxonomy):
        assert client.post("/api/notes", json=note_payload("Health", "Checkup")).status_code == 201
        response = client.delete(f"/api/tags/{taxonomy['Health']['id']}")

        assert response.status_code == 422
        assert "1 notes.type" in response.json()["messages"][0]

    def test_delete_missing(self, client):
        response = client.delete("/api/tags/nope")
        assert response.status_code == 404
        assert response.json()["messages"] == ["Could not find a tag with ID 'nope'."]
