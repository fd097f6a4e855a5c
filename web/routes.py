"""
web/routes.py -- Jinja2 template routes for the Acme dashboard web UI.

These routes serve server-rendered HTML. They share app.state with the API
routes (same user store, same registered authorizer) but return HTML and
redirects instead of JSON.

Every dashboard page extends templates/dashboard/layout.html, the two-region
shell: a fixed-width side navigation and a flexible main content region.

Routes:
  GET  /           -- /dashboard when signed in, /login otherwise
  GET  /dashboard  -- overview page inside the dashboard layout (auth required)
  GET  /login      -- sign-in form (redirects to /dashboard when signed in)
  POST /login      -- handle email/password sign-in
  POST /logout     -- clear cookie, redirect /login
"""

import logging
from pathlib import Path
from typing import Optional
from urllib.parse import quote, urlencode

from fastapi import APIRouter, Form, Request
from fastapi.responses import HTMLResponse, RedirectResponse
from fastapi.templating import Jinja2Templates

from auth.dependencies import try_get_current_user
from auth.errors import LookupFailure
from auth.session import create_session_token, end_session, sign_in, start_session
from core.config import get_settings
from core.limiter import limiter

logger = logging.getLogger("acme.web")

templates = Jinja2Templates(directory=str(Path(__file__).parent / "templates"))
router = APIRouter()

_settings = get_settings()

# ---------------------------------------------------------------------------
# Auth helpers
# ---------------------------------------------------------------------------

# Whitelist mapping for ?error= query params on /login.
# The raw query param is NEVER passed to templates -- only the message from
# this dict is. Prevents reflected XSS via crafted error query strings.
_ERROR_MESSAGES: dict[str, str] = {
    "bad_credentials": "Invalid email or password.",
}

_UNAVAILABLE_MESSAGE = "Sign-in is temporarily unavailable. Please try again shortly."


def _safe_next(next_url: Optional[str]) -> str:
    """Validate a post-login redirect target. Only accept relative paths.

    Prevents open redirect attacks where an attacker crafts a URL like:
      /login?next=https://attacker.com  or  /login?next=//attacker.com
    """
    if next_url and next_url.startswith("/") and not next_url.startswith("//"):
        return next_url
    return "/dashboard"


def _login_url(error: Optional[str] = None, next: Optional[str] = None) -> str:
    params = {k: v for k, v in (("error", error), ("next", next)) if v}
    if not params:
        return "/login"
    return "/login?" + urlencode(params, quote_via=quote, safe="/")


def _login_page(request: Request, error_msg: Optional[str] = None, status_code: int = 200) -> HTMLResponse:
    return templates.TemplateResponse(
        request,
        "login.html",
        {
            "error_msg": error_msg,
            "next": _safe_next(request.query_params.get("next")),
        },
        status_code=status_code,
    )


def _unavailable_page(request: Request) -> HTMLResponse:
    """Re-render the sign-in form with 503 while the user store is down."""
    logger.error("User store unavailable on %s %s", request.method, request.url.path)
    return _login_page(request, _UNAVAILABLE_MESSAGE, status_code=503)


# ---------------------------------------------------------------------------
# Dashboard
# ---------------------------------------------------------------------------


@router.get("/", response_class=HTMLResponse)
def index(request: Request) -> HTMLResponse:
    try:
        user = try_get_current_user(request)
    except LookupFailure:
        return _unavailable_page(request)
    return RedirectResponse("/dashboard" if user is not None else "/login", status_code=302)


@router.get("/dashboard", response_class=HTMLResponse)
def dashboard(request: Request) -> HTMLResponse:
    """Render the overview page inside the dashboard layout (auth required)."""
    try:
        user = try_get_current_user(request)
    except LookupFailure:
        return _unavailable_page(request)
    if user is None:
        return RedirectResponse(_login_url(next=request.url.path), status_code=302)
    return templates.TemplateResponse(request, "dashboard/overview.html", {"current_user": user})


# ---------------------------------------------------------------------------
# Sign-in / sign-out
# ---------------------------------------------------------------------------


@router.get("/login", response_class=HTMLResponse)
def login_form(request: Request) -> HTMLResponse:
    """Render the sign-in page."""
    try:
        user = try_get_current_user(request)
    except LookupFailure:
        return _unavailable_page(request)
    if user is not None:
        return RedirectResponse("/dashboard", status_code=302)
    error_msg = _ERROR_MESSAGES.get(request.query_params.get("error", ""), None)
    return _login_page(request, error_msg)


@router.post("/login", response_class=HTMLResponse)
@limiter.limit(_settings.login_rate_limit)
def login_post(
    request: Request,
    email: str = Form(""),
    password: str = Form(""),
) -> HTMLResponse:
    """Handle the sign-in form.

    Missing fields arrive as empty strings and fail the authorizer's shape
    check like any other malformed input. A store outage re-renders the form
    with 503 instead of pretending the password was wrong.
    """
    try:
        user = sign_in(request, {"email": email, "password": password})
    except LookupFailure:
        return _unavailable_page(request)

    if user is None:
        next_param = request.query_params.get("next")
        location = _login_url(error="bad_credentials", next=_safe_next(next_param) if next_param else None)
        return RedirectResponse(location, status_code=302)

    resp = RedirectResponse(_safe_next(request.query_params.get("next")), status_code=302)
    start_session(resp, create_session_token(user))
    return resp


@router.post("/logout")
def logout(request: Request) -> RedirectResponse:
    """Clear the JWT cookie and redirect to the sign-in page."""
    resp = RedirectResponse("/login", status_code=302)
    end_session(resp)
    return resp
