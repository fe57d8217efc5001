"""
Shared fixtures for the API tests.

Every test runs against its own SQLite file under ``tmp_path`` with a
fresh rate limiter, so tests never see each other's data.
"""

import asyncio

import pytest
from fastapi.testclient import TestClient

from event_management_api.app.core.config import settings
from event_management_api.app.core.db import init_db
from event_management_api.app.core.rate_limit import rate_limiter
from event_management_api.app.main import app
from event_management_api.app.services.user_service import UserService

from .helpers import MEETUP, bearer, login


@pytest.fixture(autouse=True)
def database(tmp_path, monkeypatch):
    monkeypatch.setattr(settings, "database_url", str(tmp_path / "test.db"))
    init_db()
    rate_limiter.reset()
    yield tmp_path / "test.db"
    rate_limiter.reset()


@pytest.fixture()
def client():
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture()
def make_user():
    def _make(email, password="secret123", name="User"):
        return asyncio.run(UserService.create_user(name, email, password))
    return _make


@pytest.fixture()
def alice(make_user):
    return make_user("a@x.com", "secret123", "Alice")


@pytest.fixture()
def bob(make_user):
    return make_user("b@x.com", "secret456", "Bob")


@pytest.fixture()
def alice_headers(client, alice):
    return bearer(login(client, "a@x.com", "secret123"))


@pytest.fixture()
def bob_headers(client, bob):
    return bearer(login(client, "b@x.com", "secret456"))


@pytest.fixture()
def create_event(client):
    def _create(headers, **overrides):
        resp = client.post("/api/events", json={**MEETUP, **overrides}, headers=headers)
        assert resp.status_code == 201, resp.text
        return resp.json()
    return _create
