"""
auth/dependencies.py -- FastAPI Depends() helpers for session resolution.

Two token sources are checked in priority order:
  1. JWT cookie ("access_token") -- set by the web sign-in flow.
  2. Authorization: Bearer <token> header -- API clients.

try_get_current_user() is the soft variant (returns None when there is no
valid session, raises LookupFailure when the store is down).
get_current_user() wraps it and raises HTTP 401 if unauthenticated.

Layer rule: no imports from api/ or web/. This module may import from fastapi
because it is part of the FastAPI dependency injection system.
"""

from __future__ import annotations

from fastapi import HTTPException, Request

from auth.models import User
from auth.tokens import decode_access_token


def try_get_current_user(request: Request) -> User | None:
    """Resolve the request's session to a User, or None.

    The token alone is not enough: the user must still exist in the store, so
    deleting an account ends its sessions. Without a valid token the result
    is None. Raises LookupFailure when the store cannot be queried,
    so an outage is never mistaken for a signed-out visitor.
    """
    token: str | None = request.cookies.get("access_token")

    if not token:
        auth_header = request.headers.get("Authorization", "")
        if auth_header.startswith("Bearer "):
            token = auth_header[7:]

    if not token:
        return None

    payload = decode_access_token(token)
    if payload is None:
        return None
    return request.app.state.user_store.get_by_id(payload["user_id"])


def get_current_user(request: Request) -> User:
    """Require authentication. Raises HTTP 401 if the request is not authenticated.

    Use as a FastAPI dependency:
        @router.get("/protected")
        async def route(user: User = Depends(get_current_user)): ...
    """
    user = try_get_current_user(request)
    if user is None:
        raise HTTPException(
            status_code=401,
            detail={"code": "unauthorized", "message": "Authentication required."},
        )
    return user
