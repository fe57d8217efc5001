"""
Security helpers for password hashing and bearer token authentication.

Tokens are opaque personal access tokens.  On login a random secret
is generated and only its SHA‑256 digest is stored in the
``personal_access_tokens`` table; the client receives
``"<token id>|<secret>"`` and presents it as ``Authorization: Bearer
<token>``.  Deleting the rows revokes the tokens immediately, which is
what logout relies on.

Passwords are hashed with PBKDF2‑HMAC‑SHA256 and a random salt.

``get_current_user`` resolves the bearer token into an explicit
``Actor`` that endpoints pass on to the services.
"""

import hashlib
import hmac
import os
from dataclasses import dataclass
from typing import Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from .config import settings
from .db import MAX_ROW_ID, get_cursor, utcnow
from .errors import AuthenticationError

PBKDF2_ITERATIONS = 100_000


@dataclass(frozen=True)
class Actor:
    """The authenticated user a request runs on behalf of."""

    id: int
    email: str
    name: str
    token_id: int


def _hash_token(secret: str) -> str:
    return hashlib.sha256(secret.encode("utf-8")).hexdigest()


def create_access_token(user_id: int, name: Optional[str] = None) -> str:
    """Issue a new personal access token for ``user_id``.

    Existing tokens of the user stay valid.  Returns the plain text
    token; it cannot be recovered later because only the digest of
    the secret part is stored.
    """
    secret = os.urandom(20).hex()
    with get_cursor() as cursor:
        cursor.execute(
            "INSERT INTO personal_access_tokens (user_id, name, token, created_at) VALUES (?, ?, ?, ?)",
            (user_id, name or settings.token_name, _hash_token(secret), utcnow()),
        )
        token_id = cursor.lastrowid
    return f"{token_id}|{secret}"


def resolve_token(token: str, touch: bool = True) -> Optional[Actor]:
    """Look up the user owning ``token``.

    Returns ``None`` for unknown, revoked or malformed tokens.  With
    ``touch`` the token's ``last_used_at`` is updated.
    """
    token_id, sep, secret = token.partition("|")
    by_id = bool(sep) and token_id.isascii() and token_id.isdigit()
    if by_id and int(token_id) > MAX_ROW_ID:
        return None
    with get_cursor() as cursor:
        if by_id:
            row = cursor.execute(
                """
                SELECT t.id AS token_id, t.token, u.id, u.email, u.name
                FROM personal_access_tokens t JOIN users u ON u.id = t.user_id
                WHERE t.id = ?
                """,
                (int(token_id),),
            ).fetchone()
        else:
            secret = token
            row = cursor.execute(
                """
                SELECT t.id AS token_id, t.token, u.id, u.email, u.name
                FROM personal_access_tokens t JOIN users u ON u.id = t.user_id
                WHERE t.token = ?
                """,
                (_hash_token(secret),),
            ).fetchone()
        if not row or not hmac.compare_digest(row["token"], _hash_token(secret)):
            return None
        if touch:
            cursor.execute(
                "UPDATE personal_access_tokens SET last_used_at = ? WHERE id = ?",
                (utcnow(), row["token_id"]),
            )
        return Actor(id=row["id"], email=row["email"], name=row["name"], token_id=row["token_id"])


def revoke_tokens(user_id: int) -> int:
    """Delete every token of ``user_id`` and return how many were removed."""
    with get_cursor() as cursor:
        cursor.execute("DELETE FROM personal_access_tokens WHERE user_id = ?", (user_id,))
        return cursor.rowcount


security = HTTPBearer(auto_error=False)


def get_current_user(credentials: Optional[HTTPAuthorizationCredentials] = Depends(security)) -> Actor:
    """Dependency that resolves the bearer token into an ``Actor``.

    Raises ``AuthenticationError`` (HTTP 401) if the ``Authorization``
    header is missing or the token is unknown or revoked.
    """
    if credentials is None:
        raise AuthenticationError()
    actor = resolve_token(credentials.credentials)
    if actor is None:
        raise AuthenticationError()
    return actor


def hash_password(password: str) -> str:
    """Hash a password using PBKDF2‑HMAC with SHA‑256.

    A 16‑byte random salt is generated for each password.  The
    resulting string contains the salt and hash separated by a
    ``$`` (salt in hex, then hash in hex).
    """
    salt = os.urandom(16)
    dk = hashlib.pbkdf2_hmac("sha256", password.encode("utf-8"), salt, PBKDF2_ITERATIONS)
    return f"{salt.hex()}${dk.hex()}"


def verify_password(plain_password: str, hashed_password: Optional[str]) -> bool:
    """Verify a plain password against a stored salt+hash string.

    Recomputes the PBKDF2‑HMAC digest with the stored salt and compares
    it using constant‑time comparison.  Malformed stored values never
    match.
    """
    if not hashed_password or "$" not in hashed_password:
        return False
    salt_hex, hash_hex = hashed_password.split("$", 1)
    try:
        salt = bytes.fromhex(salt_hex)
        stored_hash = bytes.fromhex(hash_hex)
    except ValueError:
        return False
    dk = hashlib.pbkdf2_hmac("sha256", plain_password.encode("utf-8"), salt, PBKDF2_ITERATIONS)
    return hmac.compare_digest(dk, stored_hash)
