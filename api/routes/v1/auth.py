"""
api/routes/v1/auth.py -- Sign-in REST endpoints.

Routes:
  POST /api/v1/auth/login    -- password login; sets JWT cookie
  POST /api/v1/auth/logout   -- clears cookie; 200
  GET  /api/v1/auth/me       -- current user info (requires auth)

Security:
  POST /login is rate-limited per IP (LOGIN_RATE_LIMIT, default 10/minute).
  The body is passed to the authorizer untouched. Malformed input, unknown
  email and wrong password all get the same 401 "bad_credentials" body.
  A LookupFailure is re-raised and mapped to 503 by the handler in
  api/main.py -- it is never reported as a bad login.
  Cache-Control: no-store on every login response.
"""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Body, Depends, Request
from fastapi.responses import JSONResponse

from api.models import ErrorDetail, ErrorResponse, LoginResponse, MeResponse
from auth.dependencies import get_current_user
from auth.models import User
from auth.session import create_session_token, end_session, sign_in, start_session
from core.config import get_settings
from core.limiter import limiter

router = APIRouter()

_settings = get_settings()


@router.post("/auth/login", response_model=LoginResponse)
@limiter.limit(_settings.login_rate_limit)
def login(request: Request, body: Any = Body(default=None)) -> JSONResponse:
    """Authenticate with email and password; set JWT cookie.

    Returns the same generic error for every rejected attempt to avoid leaking
    whether the email has an account.
    """
    user = sign_in(request, body)
    if user is None:
        resp = JSONResponse(
            status_code=401,
            content=ErrorResponse(
                error=ErrorDetail(code="bad_credentials", message="Invalid email or password.")
            ).model_dump(),
        )
        resp.headers["Cache-Control"] = "no-store"
        return resp

    token = create_session_token(user)
    resp = JSONResponse(
        status_code=200,
        content=LoginResponse(
            access_token=token,
            token_type="bearer",  # noqa: S106 # nosec B106 -- OAuth token type, not a password
            expires_in=_settings.token_expire_seconds,
            user_id=user.id,
            email=user.email,
            name=user.name,
        ).model_dump(),
    )
    start_session(resp, token)
    return resp


@router.post("/auth/logout")
async def logout() -> JSONResponse:
    """Clear the JWT cookie and end the session."""
    resp = JSONResponse(content={"message": "Logged out."})
    end_session(resp)
    return resp


@router.get("/auth/me", response_model=MeResponse)
async def me(current_user: User = Depends(get_current_user)) -> MeResponse:
    """Return identity information for the currently authenticated user."""
    return MeResponse(
        user_id=current_user.id,
        email=current_user.email,
        name=current_user.name,
        created_at=current_user.created_at,
    )
