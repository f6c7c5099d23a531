"""
auth/tokens.py -- JWT and password hashing utilities.

Security design decisions:
  JWT: python-jose with HS256. Tokens are signed with SECRET_KEY and carry
       user_id, username, iat, nbf and exp. decode_access_token() raises
       AuthError on any failure -- the dependency layer turns that into a 401.

  Passwords: bcrypt directly, cost factor from Settings.bcrypt_rounds. The
       _DUMMY_HASH constant enables timing equalization in authenticate_user()
       so response time does not reveal whether a username exists.

  SECRET_KEY: sourced from core.config.get_settings(). The Settings class
       validates the key at startup; there is no fallback secret.

Layer rule: no imports from api/, web/ or catalog/. Import from core/ is
allowed -- core/ is the kernel and has no reverse dependencies.
"""

from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone
from typing import TYPE_CHECKING

import bcrypt
from jose import ExpiredSignatureError, JWTError, jwt

from auth.models import TokenClaims
from core.config import get_settings
from core.errors import AuthError

if TYPE_CHECKING:
    from auth.models import User
    from auth.store import UserStore

logger = logging.getLogger("linkdeck.auth")

_settings = get_settings()

_ALGORITHM = "HS256"
BEARER_SCHEME = "Bearer"

# ---------------------------------------------------------------------------
# Password hashing (bcrypt -- direct usage, no passlib wrapper)
# ---------------------------------------------------------------------------


def hash_password(plain: str, rounds: int = 0) -> str:
    """Return a bcrypt hash of the given plaintext password.

    rounds defaults to Settings.bcrypt_rounds. Passwords longer than 72 bytes
    are truncated by bcrypt; the API layer caps password length well below that.
    """
    cost = rounds if rounds > 0 else _settings.bcrypt_rounds
    return bcrypt.hashpw(plain.encode("utf-8"), bcrypt.gensalt(rounds=cost)).decode("utf-8")


def verify_password(plain: str, hashed: str) -> bool:
    """Return True if the plaintext password matches the bcrypt hash."""
    try:
        return bcrypt.checkpw(plain.encode("utf-8"), hashed.encode("utf-8"))
    except ValueError:
        # Malformed stored hash
        return False


# Computed once at module load so the first login attempt is not measurably
# slower than subsequent ones.
_DUMMY_HASH: str = hash_password("linkdeck_timing_dummy")


# ---------------------------------------------------------------------------
# JWT encode / decode
# ---------------------------------------------------------------------------


def create_access_token(
    user_id: int,
    username: str,
    expire_seconds: int = 0,
    *,
    secret_key: str | None = None,
    now: datetime | None = None,
) -> str:
    """Encode a signed JWT with user identity and expiry.

    Args:
        user_id:        Numeric user ID stored in the DB.
        username:       Username; also stored as the sub claim.
        expire_seconds: Token lifetime. If 0 (default), uses
                        Settings.token_expire_seconds.
        secret_key:     Signing key override. Defaults to Settings.secret_key.
        now:            Issue time override, for tests.
    """
    duration = expire_seconds if expire_seconds > 0 else _settings.token_expire_seconds
    issued = now or datetime.now(timezone.utc)
    payload = {
        "sub": username,
        "user_id": user_id,
        "username": username,
        "iat": issued,
        "nbf": issued,
        "exp": issued + timedelta(seconds=duration),
    }
    return jwt.encode(payload, secret_key or _settings.secret_key, algorithm=_ALGORITHM)


def decode_access_token(token: str, *, secret_key: str | None = None) -> TokenClaims:
    """Verify a JWT and return its claims.

    Checks the signature, exp and nbf. Raises AuthError on any failure; the
    message distinguishes an expired token from every other failure so the UI
    can show "session expired".
    """
    try:
        payload = jwt.decode(token, secret_key or _settings.secret_key, algorithms=[_ALGORITHM])
    except ExpiredSignatureError as exc:
        raise AuthError("Token has expired.", code="token_expired") from exc
    except JWTError as exc:
        raise AuthError("Invalid token.", code="invalid_token") from exc

    user_id = payload.get("user_id")
    username = payload.get("username")
    if not isinstance(user_id, int) or not isinstance(username, str):
        raise AuthError("Invalid token claims.", code="invalid_token")
    return TokenClaims(
        user_id=user_id,
        username=username,
        issued_at=int(payload.get("iat", 0)),
        not_before=int(payload.get("nbf", 0)),
        expires_at=int(payload["exp"]),
    )


def parse_bearer_header(header: str | None) -> str:
    """Extract the token from an Authorization header value.

    The header must be exactly two space-separated parts, the first being the
    literal "Bearer". Raises AuthError otherwise.
    """
    if not header:
        raise AuthError("Authorization header is required.", code="missing_token")
    parts = header.split(" ")
    if len(parts) != 2 or parts[0] != BEARER_SCHEME or not parts[1]:
        raise AuthError("Authorization header format must be Bearer {token}.", code="bad_scheme")
    return parts[1]


def validate_bearer(header: str | None) -> TokenClaims:
    """Parse an Authorization header and verify the token it carries."""
    return decode_access_token(parse_bearer_header(header))


# ---------------------------------------------------------------------------
# User authentication (constant-time)
# ---------------------------------------------------------------------------


def authenticate_user(store: UserStore, username: str, password: str) -> User | None:
    """Authenticate a username/password login with timing equalization.

    Always runs bcrypt whether or not the user exists:
    - Unknown username: bcrypt runs against _DUMMY_HASH (same cost as real check)
    - Wrong password: bcrypt runs against the real hash (same cost)

    Returns the User on success, None on any failure. Callers must not tell
    the two failure cases apart in their response.
    """
    user = store.get_by_username(username)
    if user is None:
        verify_password(password, _DUMMY_HASH)
        return None
    if not verify_password(password, user.hashed_password):
        return None
    return user
