"""
Optional relation loading driven by the ``include`` query parameter.

Each resource declares an allow‑list of relations that clients may ask
for, mapped to the loader function that fetches them::

    GET /api/events?include=user,attendees.user

Only names present in the allow‑list are ever loaded, in allow‑list
order; anything else in ``include`` is ignored.  Names are opaque:
``"attendees.user"`` is a relation of its own, not a path that gets
parsed.

Loaders work on a batch of rows already fetched as dicts (one page of
a list, or a single entity wrapped in a list).  They issue one
``IN (...)`` query per relation and attach the result to each row
under the relation's name, so a relation key is only present in the
output when it was loaded.
"""

import sqlite3
from enum import Enum
from typing import Callable, Dict, Iterable, List, Optional, Set

Loader = Callable[[sqlite3.Cursor, List[dict]], None]


class Resource(str, Enum):
    EVENT = "event"
    ATTENDEE = "attendee"


def _placeholders(values: list) -> str:
    return ", ".join("?" for _ in values)


def _users_by_id(cursor: sqlite3.Cursor, user_ids: Iterable[int]) -> Dict[int, dict]:
    ids = sorted(set(user_ids))
    if not ids:
        return {}
    rows = cursor.execute(
        f"SELECT id, name, email FROM users WHERE id IN ({_placeholders(ids)})",
        ids,
    ).fetchall()
    return {row["id"]: dict(row) for row in rows}


def load_event_user(cursor: sqlite3.Cursor, events: List[dict]) -> None:
    users = _users_by_id(cursor, (event["owner_id"] for event in events))
    for event in events:
        event["user"] = users.get(event["owner_id"])


def load_event_attendees(cursor: sqlite3.Cursor, events: List[dict]) -> None:
    ids = [event["id"] for event in events]
    grouped: Dict[int, List[dict]] = {event_id: [] for event_id in ids}
    if ids:
        rows = cursor.execute(
            f"""
            SELECT id, event_id, user_id, created_at, updated_at
            FROM attendees WHERE event_id IN ({_placeholders(ids)})
            ORDER BY id
            """,
            ids,
        ).fetchall()
        for row in rows:
            grouped[row["event_id"]].append(dict(row))
    for event in events:
        event["attendees"] = grouped[event["id"]]


def load_event_attendee_users(cursor: sqlite3.Cursor, events: List[dict]) -> None:
    missing = [event for event in events if "attendees" not in event]
    if missing:
        load_event_attendees(cursor, missing)
    load_attendee_user(cursor, [attendee for event in events for attendee in event["attendees"]])


def load_attendee_user(cursor: sqlite3.Cursor, attendees: List[dict]) -> None:
    users = _users_by_id(cursor, (attendee["user_id"] for attendee in attendees))
    for attendee in attendees:
        attendee["user"] = users.get(attendee["user_id"])


# Allow‑lists.  Dict order is the order relations are loaded in.
RELATIONS: Dict[Resource, Dict[str, Loader]] = {
    Resource.EVENT: {
        "user": load_event_user,
        "attendees": load_event_attendees,
        "attendees.user": load_event_attendee_users,
    },
    Resource.ATTENDEE: {
        "user": load_attendee_user,
    },
}


def parse_include(include: Optional[str]) -> Set[str]:
    """Split the raw ``include`` value into trimmed, non‑empty names."""
    if not include:
        return set()
    return {name.strip() for name in include.split(",") if name.strip()}


def relations_to_load(resource: Resource, include: Optional[str]) -> List[str]:
    """Allow‑listed relations of ``resource`` requested by ``include``, in allow‑list order."""
    requested = parse_include(include)
    return [name for name in RELATIONS[resource] if name in requested]


def load(cursor: sqlite3.Cursor, resource: Resource, records: List[dict], names: Iterable[str]) -> List[dict]:
    """Load the named relations onto ``records`` unconditionally.

    ``names`` must come from the resource's allow‑list.
    """
    loaders = RELATIONS[resource]
    for name in names:
        loaders[name](cursor, records)
    return records


def resolve(cursor: sqlite3.Cursor, resource: Resource, records: List[dict], include: Optional[str]) -> List[dict]:
    """Eager‑load the relations the client asked for via ``include``."""
    return load(cursor, resource, records, relations_to_load(resource, include))
