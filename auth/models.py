"""
auth/models.py -- Domain dataclasses for authentication entities.

Pattern: Data class (pure data container, zero logic). Mirrors the approach
in catalog/models.py -- dataclasses own domain shape; stores and routes do
the work.

Layer rule: no imports from api/, web/ or catalog/.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass
class User:
    """The administrator identity.

    username is immutable after creation. hashed_password is a bcrypt hash and
    must never be serialized into a response.
    """

    username: str
    hashed_password: str
    id: int | None = None
    created_at: str | None = None
    updated_at: str | None = None


@dataclass(frozen=True)
class TokenClaims:
    """Identity recovered from a verified bearer token.

    Built by auth.tokens.decode_access_token() and handed to route handlers
    through the get_current_user dependency. It is the only source of "who is
    calling" for downstream operations.

    Times are POSIX seconds, as carried in the JWT.
    """

    user_id: int
    username: str
    issued_at: int
    not_before: int
    expires_at: int
