"""
Tests for the /api/people endpoints.
"""
import pytest

from conftest import note_payload, person_payload

pytestmark = pytest.mark.slow


class TestCreatePerson:
    def test_create_resolves_tag_names(self, client, taxonomy):
        payload = person_payload(
            "Janet",
            "M",
            "Doe",
            preferredName="Jan",
            birthdate="1980-02-29",
            tags=["Family"],
            notes=[{"date": "2020-01-01", "note": "Moved to Vancouver"}],
            photos=[{"image": "janet.jpg"}],
        )
        response = client.post("/api/people", json=payload)
        data = response.json()["data"]

        assert response.status_code == 201
        assert data["name"] == "Janet (Jan) M. Doe"
        assert data["tags"] == [taxonomy["Family"]["id"]]
        assert data["birthdate"] == "1980-02-29"
        assert data["notes"] == [{"date": "2020-01-01", "note": "Moved to Vancouver"}]
        assert data["photos"] == [{"image": "janet.jpg"}]

    def test_tag_must_be_a_person_tag(self, client, taxonomy):
        response = client.post("/api/people", json=person_payload("Janet", tags=["Travelling", "Nope"]))

        assert response.status_code == 422
        assert response.json()["messages"] == ["Invalid tag(s): Travelling, Nope."]
        assert client.get("/api/people/count").json()["data"] == 0

    def test_tag_given_by_name_and_id_is_a_duplicate(self, client, taxonomy):
        payload = person_payload("Janet", tags=["Family", taxonomy["Family"]["id"]])
        response = client.post("/api/people", json=payload)

        assert response.status_code == 422
        assert response.json()["messages"] == ["Duplicate tags are not allowed."]
        assert client.get("/api/people/count").json()["data"] == 0

    def test_duplicate_person(self, client, make_person):
        make_person("Janet", "M", "Doe")
        response = client.post("/api/people", json=person_payload("Janet", "M", "Doe", preferredName="Jan"))

        assert response.status_code == 422
        assert response.json()["messages"] == [
            "A person with the following first, middle and last names already exists: 'Janet', 'M', 'Doe'."
        ]

    def test_same_first_and_last_name_with_other_middle_name(self, client, make_person):
        make_person("Janet", "M", "Doe")
        response = client.post("/api/people", json=person_payload("Janet", "", "Doe"))
        assert response.status_code == 201

    def test_shape_errors(self, client):
        response = client.post("/api/people", json={"firstName": "", "tags": []})
        params = [m["param"] for m in response.json()["messages"]]

        assert response.status_code == 422
        assert params == ["firstName", "middleName", "preferredName", "googlePhotoUrl", "picasaContactId"]


class TestReadPeople:
    def test_list_sorted_by_first_then_last_name(self, client, make_person):
        make_person("Zoe", last="Adams")
        make_person("Janet", last="Smith")
        make_person("Janet", last="Doe")

        names = [p["name"] for p in client.get("/api/people").json()["data"]]
        assert names == ["Janet Doe", "Janet Smith", "Zoe Adams"]

    def test_get_missing(self, client):
        response = client.get("/api/people/nope")
        assert response.status_code == 404
        assert response.json()["messages"] == ["Could not find a person with ID 'nope'."]


class TestUpdatePerson:
    def test_update_unreferenced_person(self, client, make_person):
        person = make_person("Janet", last="Doe")
        response = client.put(f"/api/people/{person['id']}", json=person_payload("Janet", last="Smith"))

        assert response.status_code == 200
        assert response.json()["data"]["name"] == "Janet Smith"

    def test_rename_of_referenced_person_is_blocked(self, client, taxonomy, make_person):
        person = make_person("Janet", last="Doe")
        assert client.post("/api/notes", json=note_payload("Life", "Lunch", people=[person["id"]])).status_code == 201

        response = client.put(f"/api/people/{person['id']}", json=person_payload("Janet", last="Smith"))

        assert response.status_code == 422
        assert response.json()["messages"] == [
            f"Cannot update person with ID '{person['id']}' without breaking referential integrity.  "
            "The person is referenced in: 1 notes.people field(s)."
        ]

    def test_other_fields_of_referenced_person_can_change(self, client, taxonomy, make_person):
        person = make_person("Janet", last="Doe")
        assert client.post("/api/notes", json=note_payload("Life", "Lunch", people=["Janet Doe"])).status_code == 201

        response = client.put(
            f"/api/people/{person['id']}",
            json=person_payload("Janet", last="Doe", preferredName="Jan", tags=["Family"]),
        )

        assert response.status_code == 200
        assert response.json()["data"]["name"] == "Janet (Jan) Doe"

    def test_rename_onto_existing_person(self, client, make_person):
        make_person("Janet", last="Doe")
        person = make_person("Bob")
        response = client.put(f"/api/people/{person['id']}", json=person_payload("Janet", last="Doe"))

        assert response.status_code == 422
        assert response.json()["messages"][0].startswith("A person with the following")


class TestDeletePerson:
    def test_delete_referenced_person(self, client, taxonomy, make_person):
        person = make_person("Janet", last="Doe")
        client.post("/api/notes", json=note_payload("Life", "Lunch", people=[person["id"]]))
        client.post("/api/notes", json=note_payload("Life", "Dinner", people=[person["id"]]))

        response = client.delete(f"/api/people/{person['id']}")

        assert response.status_code == 422
        assert response.json()["messages"][0].endswith("referenced in: 2 notes.people field(s).")
        assert client.get("/api/people/count").json()["data"] == 1

    def test_delete_unreferenced_person(self, client, make_person):
        person = make_person("Janet")
        response = client.delete(f"/api/people/{person['id']}")

        assert response.status_code == 200
        assert client.get(f"/api/people/{person['id']}").status_code == 404
