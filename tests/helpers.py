"""Small helpers shared by the API tests."""

from datetime import datetime

MEETUP = {
    "name": "Meetup",
    "start_time": "2025-06-01T10:00:00Z",
    "end_time": "2025-06-01T12:00:00Z",
}


def login(client, email, password):
    resp = client.post("/api/login", json={"email": email, "password": password})
    assert resp.status_code == 200, resp.text
    return resp.json()["token"]


def bearer(token):
    return {"Authorization": f"Bearer {token}"}


def parse_time(value):
    return datetime.fromisoformat(value.replace("Z", "+00:00"))
