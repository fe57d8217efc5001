"""
Tests for POST /api/login and POST /api/logout.

Run from the project root:
    pytest tests/test_auth.py -v
"""

import logging

import pytest

from event_management_api.app.core.db import MAX_ROW_ID, get_cursor
from event_management_api.app.core.security import resolve_token

from .helpers import MEETUP, bearer, login


class TestLogin:

    def test_returns_token(self, client, alice):
        resp = client.post("/api/login", json={"email": "a@x.com", "password": "secret123"})
        assert resp.status_code == 200
        token = resp.json()["token"]
        token_id, _, secret = token.partition("|")
        assert token_id.isdigit() and secret

    def test_only_digest_is_stored(self, client, alice):
        token = login(client, "a@x.com", "secret123")
        with get_cursor() as cursor:
            stored = [row["token"] for row in cursor.execute("SELECT token FROM personal_access_tokens")]
        assert stored and token.split("|", 1)[1] not in stored

    def test_token_authenticates_writes(self, client, alice):
        token = login(client, "a@x.com", "secret123")
        resp = client.post("/api/events", json=MEETUP, headers=bearer(token))
        assert resp.status_code == 201

    def test_wrong_password_and_unknown_email_look_the_same(self, client, alice):
        wrong_password = client.post("/api/login", json={"email": "a@x.com", "password": "nope"})
        unknown_email = client.post("/api/login", json={"email": "ghost@x.com", "password": "secret123"})
        assert wrong_password.status_code == unknown_email.status_code == 422
        assert wrong_password.json() == unknown_email.json()
        assert wrong_password.json()["errors"] == {"email": ["The provided credentials are incorrect."]}

    def test_missing_fields(self, client):
        resp = client.post("/api/login", json={})
        assert resp.status_code == 422
        assert set(resp.json()["errors"]) == {"email", "password"}

    def test_malformed_email(self, client):
        resp = client.post("/api/login", json={"email": "not-an-email", "password": "x"})
        assert resp.status_code == 422
        assert "email" in resp.json()["errors"]

    def test_earlier_tokens_stay_valid(self, client, alice):
        first = login(client, "a@x.com", "secret123")
        second = login(client, "a@x.com", "secret123")
        assert first != second
        assert client.post("/api/events", json=MEETUP, headers=bearer(first)).status_code == 201
        assert client.post("/api/events", json=MEETUP, headers=bearer(second)).status_code == 201


class TestAuthentication:

    def test_missing_header(self, client):
        resp = client.post("/api/events", json=MEETUP)
        assert resp.status_code == 401
        assert resp.json() == {"message": "Unauthenticated."}
        assert resp.headers["WWW-Authenticate"] == "Bearer"

    def test_unknown_token(self, client, alice):
        assert client.post("/api/events", json=MEETUP, headers=bearer("999|abc")).status_code == 401
        assert client.post("/api/events", json=MEETUP, headers=bearer("garbage")).status_code == 401

    def test_tampered_secret(self, client, alice):
        token = login(client, "a@x.com", "secret123")
        token_id = token.split("|", 1)[0]
        resp = client.post("/api/events", json=MEETUP, headers=bearer(f"{token_id}|{'0' * 40}"))
        assert resp.status_code == 401

    def test_authentication_checked_before_body(self, client):
        resp = client.post("/api/events", json={"name": ""})
        assert resp.status_code == 401

    def test_last_used_at_is_recorded(self, client, alice):
        token = login(client, "a@x.com", "secret123")
        client.post("/api/events", json=MEETUP, headers=bearer(token))
        with get_cursor() as cursor:
            row = cursor.execute("SELECT last_used_at FROM personal_access_tokens").fetchone()
        assert row["last_used_at"] is not None

    @pytest.mark.parametrize("token", [f"{MAX_ROW_ID + 1}|abc", "99999999999999999999|abc", "\u00b2|abc"])
    def test_malformed_token_id(self, client, alice, token):
        # Latin-1 bytes so the non-ASCII digit reaches the server as sent.
        headers = {"Authorization": f"Bearer {token}".encode("latin-1")}
        assert client.get("/api/events", headers=headers).status_code == 200
        assert client.post("/api/events", json=MEETUP, headers=headers).status_code == 401

    def test_resolve_token_rejects_unusable_ids(self, alice):
        assert resolve_token(f"{MAX_ROW_ID + 1}|abc") is None
        assert resolve_token("\u00b2|abc") is None
        assert resolve_token("\u0661|abc") is None


class TestLogout:

    def test_revokes_all_tokens(self, client, alice):
        first = login(client, "a@x.com", "secret123")
        second = login(client, "a@x.com", "secret123")
        resp = client.post("/api/logout", headers=bearer(first))
        assert resp.status_code == 200
        assert resp.json() == {"message": "Logged out successfully"}
        assert client.post("/api/events", json=MEETUP, headers=bearer(first)).status_code == 401
        assert client.post("/api/events", json=MEETUP, headers=bearer(second)).status_code == 401

    def test_leaves_other_users_tokens_alone(self, client, alice, bob):
        alice_token = login(client, "a@x.com", "secret123")
        bob_token = login(client, "b@x.com", "secret456")
        client.post("/api/logout", headers=bearer(alice_token))
        assert client.post("/api/events", json=MEETUP, headers=bearer(bob_token)).status_code == 201

    def test_requires_authentication(self, client):
        assert client.post("/api/logout").status_code == 401

    def test_logs_the_token_used(self, client, alice, caplog):
        token = login(client, "a@x.com", "secret123")
        token_id = token.split("|", 1)[0]
        with caplog.at_level(logging.INFO, logger="event_management_api.app.api.endpoints.auth"):
            client.post("/api/logout", headers=bearer(token))
        assert f"logged out with token {token_id}" in caplog.text

    def test_login_again_after_logout(self, client, alice):
        client.post("/api/logout", headers=bearer(login(client, "a@x.com", "secret123")))
        token = login(client, "a@x.com", "secret123")
        assert client.post("/api/events", json=MEETUP, headers=bearer(token)).status_code == 201
