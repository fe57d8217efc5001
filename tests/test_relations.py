"""
Unit tests for the include‑driven relation loading in core/relations.py.

parse_include() and relations_to_load() are pure and tested directly;
resolve() and load() run against the per‑test SQLite database.

Run from the project root:
    pytest tests/test_relations.py -v
"""

import asyncio

import pytest

from event_management_api.app.core.db import get_cursor, utcnow
from event_management_api.app.core.relations import (
    RELATIONS,
    Resource,
    load,
    parse_include,
    relations_to_load,
    resolve,
)
from event_management_api.app.services.user_service import UserService


# ---------------------------------------------------------------------------
# parse_include / relations_to_load
# ---------------------------------------------------------------------------

class TestParseInclude:

    @pytest.mark.parametrize("raw", [None, "", " ", ",,"])
    def test_empty_values_request_nothing(self, raw):
        assert parse_include(raw) == set()

    def test_names_are_trimmed(self):
        assert parse_include(" user ,  attendees ") == {"user", "attendees"}


class TestRelationsToLoad:

    def test_allow_list_order_not_client_order(self):
        names = relations_to_load(Resource.EVENT, "attendees.user,attendees,user")
        assert names == ["user", "attendees", "attendees.user"]

    def test_unknown_names_are_ignored(self):
        assert relations_to_load(Resource.EVENT, "owner,secrets,user") == ["user"]

    def test_names_are_matched_literally(self):
        # Neither a prefix nor a case variant of an allow-listed name matches.
        assert relations_to_load(Resource.EVENT, "attendees.user.events,USER,attendee") == []

    def test_allow_list_is_per_resource(self):
        assert relations_to_load(Resource.ATTENDEE, "user,attendees") == ["user"]

    def test_allow_lists(self):
        assert list(RELATIONS[Resource.EVENT]) == ["user", "attendees", "attendees.user"]
        assert list(RELATIONS[Resource.ATTENDEE]) == ["user"]


# ---------------------------------------------------------------------------
# resolve / load against the database
# ---------------------------------------------------------------------------

@pytest.fixture()
def seeded():
    owner = asyncio.run(UserService.create_user("Owner", "owner@x.com", "pw123456"))
    guest = asyncio.run(UserService.create_user("Guest", "guest@x.com", "pw123456"))
    now = utcnow()
    with get_cursor() as cursor:
        cursor.execute(
            "INSERT INTO events (name, start_time, end_time, owner_id, created_at, updated_at) "
            "VALUES ('One', ?, ?, ?, ?, ?)",
            ("2025-06-01T10:00:00+00:00", "2025-06-01T12:00:00+00:00", owner.id, now, now),
        )
        first = cursor.lastrowid
        cursor.execute(
            "INSERT INTO events (name, start_time, end_time, owner_id, created_at, updated_at) "
            "VALUES ('Two', ?, ?, ?, ?, ?)",
            ("2025-07-01T10:00:00+00:00", "2025-07-01T12:00:00+00:00", guest.id, now, now),
        )
        second = cursor.lastrowid
        cursor.execute(
            "INSERT INTO attendees (event_id, user_id, created_at, updated_at) VALUES (?, ?, ?, ?)",
            (first, guest.id, now, now),
        )
    return {"owner": owner, "guest": guest, "events": [first, second]}


def _event_rows(cursor):
    rows = cursor.execute(
        "SELECT id, name, owner_id FROM events ORDER BY id"
    ).fetchall()
    return [dict(row) for row in rows]


class TestResolve:

    def test_no_include_loads_nothing(self, seeded):
        with get_cursor() as cursor:
            events = resolve(cursor, Resource.EVENT, _event_rows(cursor), None)
        assert all("user" not in e and "attendees" not in e for e in events)

    def test_unknown_relation_is_a_noop(self, seeded):
        with get_cursor() as cursor:
            events = _event_rows(cursor)
            before = [dict(e) for e in events]
            resolve(cursor, Resource.EVENT, events, "owner,password")
        assert events == before

    def test_user_is_attached_per_row(self, seeded):
        with get_cursor() as cursor:
            events = resolve(cursor, Resource.EVENT, _event_rows(cursor), "user")
        assert events[0]["user"]["email"] == "owner@x.com"
        assert events[1]["user"]["email"] == "guest@x.com"
        assert "password" not in events[0]["user"]

    def test_attendees_default_to_empty_list(self, seeded):
        with get_cursor() as cursor:
            events = resolve(cursor, Resource.EVENT, _event_rows(cursor), "attendees")
        assert [a["user_id"] for a in events[0]["attendees"]] == [seeded["guest"].id]
        assert events[1]["attendees"] == []
        assert "user" not in events[0]["attendees"][0]

    def test_nested_name_loads_attendees_with_users(self, seeded):
        with get_cursor() as cursor:
            events = resolve(cursor, Resource.EVENT, _event_rows(cursor), "attendees.user")
        assert events[0]["attendees"][0]["user"]["name"] == "Guest"
        assert "user" not in events[0]

    def test_load_single_entity(self, seeded):
        with get_cursor() as cursor:
            row = dict(cursor.execute(
                "SELECT id, event_id, user_id FROM attendees LIMIT 1"
            ).fetchone())
            load(cursor, Resource.ATTENDEE, [row], ["user"])
        assert row["user"]["id"] == seeded["guest"].id

    def test_empty_batch(self, seeded):
        with get_cursor() as cursor:
            assert resolve(cursor, Resource.EVENT, [], "user,attendees,attendees.user") == []
