"""
api/routes/auth.py -- Login and password change endpoints.

Routes:
  POST /api/login                  -- username/password login; returns a bearer token
  POST /api/admin/change-password  -- change the caller's password (requires auth)

Security:
  POST /login is rate-limited per client IP (LOGIN_RATE_LIMIT).
  authenticate_user() provides timing equalization -- use it, never inline
  get_by_username() + verify_password().
  Unknown username and wrong password produce byte-identical 401 responses.
  Cache-Control: no-store on login responses.
  change-password identifies the user from the token claims only.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from api.limiter import limiter
from api.models import ChangePasswordRequest, LoginRequest, LoginResponse, MessageResponse
from auth.dependencies import get_current_user
from auth.models import TokenClaims
from auth.store import UserStore
from auth.tokens import authenticate_user, create_access_token, hash_password, verify_password
from core.config import get_settings
from core.errors import AuthError

logger = logging.getLogger("linkdeck.auth")

# Auth policy:
# - POST /api/login:                 public -- login endpoint must be unauthenticated
# - POST /api/admin/change-password: requires auth (get_current_user)
router = APIRouter()

_BAD_CREDENTIALS = {"error": {"code": "bad_credentials", "message": "Invalid username or password."}}


@limiter.limit(get_settings().login_rate_limit)  # must be ABOVE @router to preserve FastAPI introspection
@router.post("/login", response_model=LoginResponse)
def login(request: Request, body: LoginRequest) -> JSONResponse:
    """Authenticate with username and password and return a bearer token."""
    user_store: UserStore = request.app.state.user_store
    user = authenticate_user(user_store, body.username, body.password)
    if user is None:
        logger.info("Failed login attempt")
        resp = JSONResponse(status_code=401, content=_BAD_CREDENTIALS)
        resp.headers["Cache-Control"] = "no-store"
        return resp

    token = create_access_token(user.id, user.username)
    logger.info("User %r logged in", user.username)
    resp = JSONResponse(
        status_code=200,
        content=LoginResponse(token=token, username=user.username).model_dump(),
    )
    resp.headers["Cache-Control"] = "no-store"
    return resp


@router.post("/admin/change-password", response_model=MessageResponse)
def change_password(
    request: Request,
    body: ChangePasswordRequest,
    claims: TokenClaims = Depends(get_current_user),
) -> MessageResponse:
    """Replace the caller's password after re-checking the old one."""
    user_store: UserStore = request.app.state.user_store
    user = user_store.get_by_id(claims.user_id)
    if user is None:
        # Valid signature but the account is gone (e.g. DB reset after issue).
        raise AuthError("User not authenticated.")
    if not verify_password(body.old_password, user.hashed_password):
        raise AuthError("Invalid old password.", code="bad_old_password")

    user_store.update_password(user.id, hash_password(body.new_password))
    logger.info("Password changed for user %r", user.username)
    return MessageResponse(message="Password updated successfully")
