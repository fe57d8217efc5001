"""
Pydantic models for event attendees.

Registering takes no body: the attendee is always the authenticated
user.  ``user`` is only present in responses when it was requested
with ``?include=user``.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel

from .user import UserRead


class AttendeeRead(BaseModel):
    id: int
    event_id: int
    user_id: int
    created_at: datetime
    updated_at: datetime
    user: Optional[UserRead] = None

    model_config = {
        "from_attributes": True,
    }
