"""
auth/dependencies.py -- FastAPI Depends() helpers for authentication.

The only accepted credential is an Authorization: Bearer <token> header.
Identity comes exclusively from the verified token claims; nothing else in
the request (body fields, query params) is consulted for "who is calling".

get_current_user() raises AuthError, which api/main.py renders as a 401.

Layer rule: no imports from api/, web/ or catalog/.
  auth/dependencies.py may import from fastapi (for Request) because this
  module is part of the FastAPI dependency injection system.
"""

from __future__ import annotations

import logging

from fastapi import Request

from auth.models import TokenClaims
from auth.tokens import validate_bearer
from core.errors import AuthError

logger = logging.getLogger("linkdeck.auth")


def get_current_user(request: Request) -> TokenClaims:
    """Require a valid bearer token.

    Use as a FastAPI dependency:
        @router.get("/protected")
        def route(claims: TokenClaims = Depends(get_current_user)): ...
    """
    try:
        return validate_bearer(request.headers.get("Authorization"))
    except AuthError as exc:
        logger.info("Rejected %s %s: %s", request.method, request.url.path, exc.code)
        raise
