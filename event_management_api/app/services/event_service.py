"""
Business logic for events.

Every operation opens one connection, performs a single read or a
write followed by a read, and commits as a unit.  Mutations are
allowed for the event owner only; the authenticated ``Actor`` is
passed in explicitly by the endpoints.
"""

import logging
import sqlite3
from datetime import datetime
from typing import Optional

from ..core.db import MAX_ROW_ID, get_cursor, utcnow
from ..core.errors import AuthorizationError, NotFoundError, ValidationError
from ..core.pagination import PageParams, paginate
from ..core.relations import Resource, load, relations_to_load, resolve
from ..core.security import Actor
from ..schemas.common import Page, PageMeta
from ..schemas.event import END_BEFORE_START, EventCreate, EventRead, EventUpdate

logger = logging.getLogger(__name__)

EVENT_COLUMNS = "id, name, description, start_time, end_time, owner_id, created_at, updated_at"

# Relations the single‑event view always carries.
DEFAULT_EVENT_RELATIONS = ["user", "attendees"]


def fetch_event(cursor: sqlite3.Cursor, event_id: int) -> dict:
    """Return the event row as a dict or raise ``NotFoundError``."""
    if not 0 < event_id <= MAX_ROW_ID:
        raise NotFoundError(f"Event {event_id} not found")
    row = cursor.execute(
        f"SELECT {EVENT_COLUMNS} FROM events WHERE id = ?", (event_id,)
    ).fetchone()
    if not row:
        raise NotFoundError(f"Event {event_id} not found")
    return dict(row)


def ensure_owner(event: dict, actor: Actor, action: str) -> None:
    if event["owner_id"] != actor.id:
        logger.warning(
            "User %s denied %s on event %s owned by %s",
            actor.id, action, event["id"], event["owner_id"],
        )
        raise AuthorizationError()


class EventService:
    """Service for managing events."""

    @classmethod
    async def list_events(cls, params: PageParams, include: Optional[str] = None) -> Page[EventRead]:
        """Return one page of events, newest first, with the requested relations."""
        with get_cursor() as cursor:
            rows, meta = paginate(
                cursor,
                f"SELECT {EVENT_COLUMNS} FROM events ORDER BY created_at DESC, id DESC",
                "SELECT COUNT(*) FROM events",
                (),
                params,
            )
            resolve(cursor, Resource.EVENT, rows, include)
        return Page[EventRead](
            data=[EventRead.model_validate(row) for row in rows],
            meta=PageMeta(**meta),
        )

    @classmethod
    async def create_event(cls, data: EventCreate, actor: Actor, include: Optional[str] = None) -> EventRead:
        """Create an event owned by ``actor`` and return it."""
        logger.info("User %s is creating event '%s'", actor.id, data.name)
        now = utcnow()
        with get_cursor() as cursor:
            cursor.execute(
                """
                INSERT INTO events (name, description, start_time, end_time, owner_id, created_at, updated_at)
                VALUES (?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    data.name,
                    data.description,
                    data.start_time.isoformat(),
                    data.end_time.isoformat(),
                    actor.id,
                    now,
                    now,
                ),
            )
            event = fetch_event(cursor, cursor.lastrowid)
            resolve(cursor, Resource.EVENT, [event], include)
        return EventRead.model_validate(event)

    @classmethod
    async def get_event(cls, event_id: int, include: Optional[str] = None) -> EventRead:
        """Retrieve a single event with its owner and attendees.

        Further relations (``attendees.user``) are added when requested.
        Raises ``NotFoundError`` if the event does not exist.
        """
        with get_cursor() as cursor:
            event = fetch_event(cursor, event_id)
            extra = [
                name for name in relations_to_load(Resource.EVENT, include)
                if name not in DEFAULT_EVENT_RELATIONS
            ]
            load(cursor, Resource.EVENT, [event], DEFAULT_EVENT_RELATIONS + extra)
        return EventRead.model_validate(event)

    @classmethod
    async def update_event(
        cls,
        event_id: int,
        updates: EventUpdate,
        actor: Actor,
        include: Optional[str] = None,
    ) -> EventRead:
        """Apply a partial update to an event owned by ``actor``.

        Only fields present in the request are written.  The stored end
        time must stay after the stored start time once the update is
        applied, otherwise ``ValidationError`` is raised for
        ``end_time``.
        """
        fields = updates.model_dump(exclude_unset=True)
        with get_cursor() as cursor:
            event = fetch_event(cursor, event_id)
            ensure_owner(event, actor, "update")

            start = fields.get("start_time") or datetime.fromisoformat(event["start_time"])
            end = fields.get("end_time") or datetime.fromisoformat(event["end_time"])
            if end <= start:
                raise ValidationError({"end_time": [END_BEFORE_START]})

            if fields:
                assignments = []
                values = []
                for key, value in fields.items():
                    assignments.append(f"{key} = ?")
                    values.append(value.isoformat() if isinstance(value, datetime) else value)
                values.extend([utcnow(), event_id])
                cursor.execute(
                    f"UPDATE events SET {', '.join(assignments)}, updated_at = ? WHERE id = ?",
                    tuple(values),
                )
                logger.info("User %s updated event %s: %s", actor.id, event_id, sorted(fields))
            event = fetch_event(cursor, event_id)
            resolve(cursor, Resource.EVENT, [event], include)
        return EventRead.model_validate(event)

    @classmethod
    async def delete_event(cls, event_id: int, actor: Actor) -> None:
        """Delete an event owned by ``actor`` together with its attendees."""
        with get_cursor() as cursor:
            event = fetch_event(cursor, event_id)
            ensure_owner(event, actor, "delete")
            cursor.execute("DELETE FROM attendees WHERE event_id = ?", (event_id,))
            cursor.execute("DELETE FROM events WHERE id = ?", (event_id,))
        logger.info("User %s deleted event %s", actor.id, event_id)
