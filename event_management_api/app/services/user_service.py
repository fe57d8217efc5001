"""
Business logic for users.

Users are not created or changed through the HTTP API; ``manage.py``
uses ``create_user`` and ``reset_password``.  The login endpoint uses
``authenticate``.
"""

import logging
import sqlite3
from typing import Optional

from ..core.db import get_cursor, utcnow
from ..core.errors import NotFoundError, ValidationError
from ..core.security import hash_password, verify_password
from ..schemas.user import UserRead

logger = logging.getLogger(__name__)

# Checked against when the e‑mail is unknown so both failure paths
# cost one PBKDF2 run.
_DUMMY_HASH = hash_password("dummy-password")


class UserService:
    """Service for user accounts."""

    @classmethod
    async def create_user(cls, name: str, email: str, password: str) -> UserRead:
        """Create a user with a hashed password.

        Raises ``ValidationError`` if the e‑mail is already taken.
        """
        now = utcnow()
        try:
            with get_cursor() as cursor:
                cursor.execute(
                    "INSERT INTO users (name, email, password, created_at, updated_at) VALUES (?, ?, ?, ?, ?)",
                    (name, email, hash_password(password), now, now),
                )
                user_id = cursor.lastrowid
        except sqlite3.IntegrityError as e:
            raise ValidationError({"email": ["The email has already been taken."]}) from e
        logger.info("Created user %s (%s)", user_id, email)
        return UserRead(id=user_id, name=name, email=email)

    @classmethod
    async def authenticate(cls, email: str, password: str) -> Optional[UserRead]:
        """Return the user if ``email`` and ``password`` match, otherwise ``None``.

        Callers must not tell an unknown e‑mail apart from a wrong
        password.
        """
        with get_cursor() as cursor:
            row = cursor.execute(
                "SELECT id, name, email, password FROM users WHERE email = ?", (email,)
            ).fetchone()
        if not row:
            verify_password(password, _DUMMY_HASH)
            return None
        if not verify_password(password, row["password"]):
            return None
        return UserRead(id=row["id"], name=row["name"], email=row["email"])

    @classmethod
    async def reset_password(cls, email: str, password: str) -> None:
        """Set a new password for the user with ``email``.

        Raises ``NotFoundError`` if there is no such user.
        """
        with get_cursor() as cursor:
            cursor.execute(
                "UPDATE users SET password = ?, updated_at = ? WHERE email = ?",
                (hash_password(password), utcnow(), email),
            )
            if cursor.rowcount == 0:
                raise NotFoundError(f"No user found with email: {email}")
        logger.info("Password reset for %s", email)
