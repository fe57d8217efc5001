"""
Business logic for event attendees.

Users register themselves for an event; a user can hold at most one
registration per event.  A registration can be removed by the
registered user or by the owner of the event.
"""

import logging
import sqlite3
from typing import Optional

from ..core.db import MAX_ROW_ID, get_cursor, utcnow
from ..core.errors import AuthorizationError, NotFoundError, ValidationError
from ..core.pagination import PageParams, paginate
from ..core.relations import Resource, resolve
from ..core.security import Actor
from ..schemas.attendee import AttendeeRead
from ..schemas.common import Page, PageMeta
from .event_service import fetch_event

logger = logging.getLogger(__name__)

ATTENDEE_COLUMNS = "id, event_id, user_id, created_at, updated_at"

ALREADY_REGISTERED = "You are already registered for this event."


def fetch_attendee(cursor: sqlite3.Cursor, event_id: int, attendee_id: int) -> dict:
    """Return the attendee row of ``event_id`` or raise ``NotFoundError``.

    An attendee that exists but belongs to another event is reported as
    missing.
    """
    if not 0 < attendee_id <= MAX_ROW_ID:
        raise NotFoundError(f"Attendee {attendee_id} not found")
    row = cursor.execute(
        f"SELECT {ATTENDEE_COLUMNS} FROM attendees WHERE id = ? AND event_id = ?",
        (attendee_id, event_id),
    ).fetchone()
    if not row:
        raise NotFoundError(f"Attendee {attendee_id} not found")
    return dict(row)


class AttendeeService:
    """Service for event registrations."""

    @classmethod
    async def list_attendees(
        cls, event_id: int, params: PageParams, include: Optional[str] = None
    ) -> Page[AttendeeRead]:
        """Return one page of the event's attendees, newest first."""
        with get_cursor() as cursor:
            fetch_event(cursor, event_id)
            rows, meta = paginate(
                cursor,
                f"SELECT {ATTENDEE_COLUMNS} FROM attendees WHERE event_id = ? "
                "ORDER BY created_at DESC, id DESC",
                "SELECT COUNT(*) FROM attendees WHERE event_id = ?",
                (event_id,),
                params,
            )
            resolve(cursor, Resource.ATTENDEE, rows, include)
        return Page[AttendeeRead](
            data=[AttendeeRead.model_validate(row) for row in rows],
            meta=PageMeta(**meta),
        )

    @classmethod
    async def create_attendee(cls, event_id: int, actor: Actor, include: Optional[str] = None) -> AttendeeRead:
        """Register ``actor`` for the event.

        Raises ``ValidationError`` if the actor is already registered.
        The UNIQUE(event_id, user_id) constraint decides, so two
        concurrent registrations cannot both succeed.
        """
        now = utcnow()
        with get_cursor() as cursor:
            fetch_event(cursor, event_id)
            try:
                cursor.execute(
                    "INSERT INTO attendees (event_id, user_id, created_at, updated_at) VALUES (?, ?, ?, ?)",
                    (event_id, actor.id, now, now),
                )
            except sqlite3.IntegrityError as e:
                logger.info("User %s is already registered for event %s", actor.id, event_id)
                raise ValidationError({"user_id": [ALREADY_REGISTERED]}) from e
            attendee = fetch_attendee(cursor, event_id, cursor.lastrowid)
            resolve(cursor, Resource.ATTENDEE, [attendee], include)
        logger.info("User %s registered for event %s", actor.id, event_id)
        return AttendeeRead.model_validate(attendee)

    @classmethod
    async def get_attendee(cls, event_id: int, attendee_id: int, include: Optional[str] = None) -> AttendeeRead:
        with get_cursor() as cursor:
            fetch_event(cursor, event_id)
            attendee = fetch_attendee(cursor, event_id, attendee_id)
            resolve(cursor, Resource.ATTENDEE, [attendee], include)
        return AttendeeRead.model_validate(attendee)

    @classmethod
    async def delete_attendee(cls, event_id: int, attendee_id: int, actor: Actor) -> None:
        """Remove a registration.

        Allowed for the owner of the event and for the registered user.
        """
        with get_cursor() as cursor:
            event = fetch_event(cursor, event_id)
            attendee = fetch_attendee(cursor, event_id, attendee_id)
            if actor.id not in (event["owner_id"], attendee["user_id"]):
                logger.warning(
                    "User %s denied removing attendee %s from event %s",
                    actor.id, attendee_id, event_id,
                )
                raise AuthorizationError()
            cursor.execute("DELETE FROM attendees WHERE id = ?", (attendee_id,))
        logger.info("User %s removed attendee %s from event %s", actor.id, attendee_id, event_id)
