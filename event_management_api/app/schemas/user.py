"""
Pydantic models for user data and authentication payloads.

Users are never returned with their password hash; ``UserRead`` is the
only shape exposed through the API (as the ``user`` relation of events
and attendees).
"""

from pydantic import BaseModel, Field

# Deliberately loose: one ``@`` and a dot in the domain part.
EMAIL_PATTERN = r"^[^@\s]+@[^@\s]+\.[^@\s]+$"


class UserRead(BaseModel):
    """Schema for reading a user from the API."""

    id: int
    name: str
    email: str

    model_config = {
        "from_attributes": True,
    }


class LoginRequest(BaseModel):
    email: str = Field(..., pattern=EMAIL_PATTERN, examples=["user@example.com"])
    password: str = Field(..., min_length=1, examples=["secret123"])


class TokenResponse(BaseModel):
    token: str = Field(..., examples=["1|3f7c0a9e..."])


class MessageResponse(BaseModel):
    message: str
