"""Pytest configuration and shared fixtures."""

import asyncio

import pytest
from fastapi.testclient import TestClient
from mongomock_motor import AsyncMongoMockClient

from council_feedback.core.security import create_access_token
from council_feedback.db import mongo


@pytest.fixture()
def mongo_db(monkeypatch):
    """In-memory Motor-compatible database with the production indexes."""
    client = AsyncMongoMockClient()
    database = client["council_feedback_test"]
    monkeypatch.setattr(mongo, "client", client)
    monkeypatch.setattr(mongo, "db", database)
    asyncio.run(mongo.ensure_indexes())
    return database


@pytest.fixture()
def client(mongo_db):
    """TestClient without lifespan, so the real Mongo connection is never opened."""
    from council_feedback.main import app

    return TestClient(app)


@pytest.fixture()
def admin_headers():
    return {"Authorization": f"Bearer {create_access_token('admin')}"}


@pytest.fixture()
def make_feedback(client):
    """Submit feedback through the public endpoint and return its id."""

    def _make(name="A. Karim", email=None, suggestions=None):
        body = {
            "name": name,
            "suggestions": suggestions
            or [{"issueDescription": "Long queues", "suggestedImprovement": "Add more staff"}],
        }
        if email is not None:
            body["email"] = email
        response = client.post("/api/feedback", json=body)
        assert response.status_code == 201, response.json()
        return response.json()["data"]["id"]

    return _make


@pytest.fixture()
def make_suggestion(client, admin_headers):
    """Create a voting suggestion directly, optionally activating it."""

    def _make(title="Staffing", activate=True):
        response = client.post(
            "/api/admin/suggestions",
            json={
                "title": title,
                "issueDescription": "Long queues",
                "suggestedImprovement": "Add more staff",
                "submitterName": "A. Karim",
            },
            headers=admin_headers,
        )
        assert response.status_code == 201, response.json()
        suggestion_id = response.json()["data"]["id"]
        if activate:
            client.post(f"/api/admin/suggestions/{suggestion_id}/activate", headers=admin_headers)
        return suggestion_id

    return _make
