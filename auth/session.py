"""
auth/session.py -- Sign-in and sign-out glue between routes and the authorizer.

The authorizer is registered once on app.state.authorizer (see the lifespan in
api/main.py). Routes call sign_in() with whatever the client submitted and get
back a User or None; on success they mint a token and start_session() puts it
in the cookie. Both the web form and the JSON API go through here, so they
share one decision path.

LookupFailure from the authorizer is not caught here -- each route maps it to
its own "service unavailable" response.
"""

from __future__ import annotations

from typing import Any

from fastapi import Request, Response

from auth.models import User
from auth.tokens import create_access_token, set_auth_cookie


def sign_in(request: Request, raw_credentials: Any) -> User | None:
    return request.app.state.authorizer(raw_credentials)


def create_session_token(user: User) -> str:
    return create_access_token(user.id, user.email, user.name)


def start_session(response: Response, token: str) -> None:
    """Set the session cookie on response.

    Cache-Control: no-store keeps proxies and the browser from caching a
    response that carries a fresh session.
    """
    set_auth_cookie(response, token)
    response.headers["Cache-Control"] = "no-store"


def end_session(response: Response) -> None:
    response.delete_cookie("access_token")
