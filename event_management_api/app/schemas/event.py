"""
Pydantic models for event data.

``EventCreate`` validates a new event; ``EventUpdate`` a partial
update where every field is optional but, when sent, must be valid.
Naive datetimes are interpreted as UTC so that start and end times can
always be compared.  ``EventRead`` is the response shape; ``user`` and
``attendees`` are only set when those relations were loaded.
"""

from datetime import datetime, timezone
from typing import List, Optional

from pydantic import BaseModel, Field, ValidationInfo, field_validator

from .attendee import AttendeeRead
from .user import UserRead

END_BEFORE_START = "The end time must be a date after start time."


def _as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


class EventCreate(BaseModel):
    """Schema for creating an event."""

    name: str = Field(..., min_length=1, max_length=255, examples=["Tech Meetup 2025"])
    description: Optional[str] = Field(None, examples=["A meetup for software engineers."])
    start_time: datetime = Field(..., examples=["2025-06-01T10:00:00Z"])
    end_time: datetime = Field(..., examples=["2025-06-01T12:00:00Z"])

    @field_validator("start_time")
    @classmethod
    def _normalise_start(cls, value: datetime) -> datetime:
        return _as_utc(value)

    @field_validator("end_time")
    @classmethod
    def _end_after_start(cls, value: datetime, info: ValidationInfo) -> datetime:
        value = _as_utc(value)
        start = info.data.get("start_time")
        if start is not None and value <= start:
            raise ValueError(END_BEFORE_START)
        return value


class EventUpdate(BaseModel):
    """Schema for updating an event.

    All fields are optional; only fields present in the request body
    are changed.  ``description`` may be cleared with ``null``, the
    other fields may not.
    """

    name: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = None
    start_time: Optional[datetime] = None
    end_time: Optional[datetime] = None

    @field_validator("name", "start_time", "end_time")
    @classmethod
    def _not_null(cls, value, info: ValidationInfo):
        if value is None:
            raise ValueError(f"The {info.field_name.replace('_', ' ')} field may not be null.")
        return value

    @field_validator("start_time")
    @classmethod
    def _normalise_start(cls, value: datetime) -> datetime:
        return _as_utc(value)

    @field_validator("end_time")
    @classmethod
    def _end_after_start(cls, value: datetime, info: ValidationInfo) -> datetime:
        value = _as_utc(value)
        start = info.data.get("start_time")
        if start is not None and value <= start:
            raise ValueError(END_BEFORE_START)
        return value


class EventRead(BaseModel):
    """Schema for reading an event from the API."""

    id: int
    name: str
    description: Optional[str] = None
    start_time: datetime
    end_time: datetime
    owner_id: int
    created_at: datetime
    updated_at: datetime
    user: Optional[UserRead] = None
    attendees: Optional[List[AttendeeRead]] = None

    model_config = {
        "from_attributes": True,
    }
