"""
Shared fixtures: an in-memory store and an application bound to it.
"""
from __future__ import annotations

from typing import Any

import pytest
from fastapi.testclient import TestClient

from mylife.core.repositories.implementations.memory.document_store import InMemoryDocumentStore
from mylife.core.services.note_types import build_default_registry
from mylife.main import create_app

NOTE_TYPES = ("Book", "Hike", "Bike Ride", "Workout", "Health", "Life")


@pytest.fixture
def store():
    """Fresh in-memory document store."""
    return InMemoryDocumentStore()


@pytest.fixture
def registry():
    return build_default_registry()


@pytest.fixture
def client(store):
    """Test client whose lifespan opens ``store``."""
    app = create_app(store=store)
    with TestClient(app) as test_client:
        yield test_client


def tag_payload(name: str, **flags: Any) -> dict[str, Any]:
    return {
        "name": name,
        "description": flags.pop("description", ""),
        "isType": flags.pop("isType", False),
        "isTag": flags.pop("isTag", False),
        "isWorkout": flags.pop("isWorkout", False),
        "isPerson": flags.pop("isPerson", False),
    }


def person_payload(first: str, middle: str = "", last: str = "", **fields: Any) -> dict[str, Any]:
    payload = {
        "firstName": first,
        "middleName": middle,
        "lastName": last,
        "preferredName": "",
        "googlePhotoUrl": "",
        "picasaContactId": "",
        "tags": [],
        "notes": [],
        "photos": [],
    }
    payload.update(fields)
    return payload


def note_payload(note_type: str, title: str, date: str = "2020-09-13", **fields: Any) -> dict[str, Any]:
    payload = {
        "type": note_type,
        "tags": [],
        "date": date,
        "title": title,
        "description": "",
        "people": [],
        "place": "",
    }
    payload.update(fields)
    return payload


@pytest.fixture
def make_tag(client):
    """Create a tag through the API and return its wire representation."""

    def _make(name: str, **flags: Any) -> dict[str, Any]:
        response = client.post("/api/tags", json=tag_payload(name, **flags))
        assert response.status_code == 201, response.json()
        return response.json()["data"]

    return _make


@pytest.fixture
def make_person(client):
    def _make(first: str, middle: str = "", last: str = "", **fields: Any) -> dict[str, Any]:
        response = client.post("/api/people", json=person_payload(first, middle, last, **fields))
        assert response.status_code == 201, response.json()
        return response.json()["data"]

    return _make


@pytest.fixture
def taxonomy(make_tag):
    """Type tags for every note type plus a few labels."""
    tags = {name: make_tag(name, isType=True) for name in NOTE_TYPES}
    tags["Travelling"] = make_tag("Travelling", isTag=True)
    tags["Reading"] = make_tag("Reading", isTag=True)
    tags["Yoga"] = make_tag("Yoga", isWorkout=True)
    tags["Family"] = make_tag("Family", isPerson=True)
    return tags
