"""
tests/conftest.py -- Shared test fixtures for the Acme dashboard tests.

This module provides:
  - make_user_store(): isolated named shared-memory SQLite user store
  - _patch_lifespan(): wires a test store and authorizer into app.state
  - api_client: TestClient with a provisioned user and a JWT for API tests
  - web_client: TestClient with follow_redirects=False for web route tests

Design: Named shared-memory SQLite URIs (not plain :memory:) are required
because TestClient runs sync route handlers in a thread pool. Plain :memory:
DBs are per-connection and would present a blank schema to each worker thread.

Environment variables must be set before any auth/core import:
  DEBUG=true                  -- get_settings() auto-generates SECRET_KEY
  ALLOWED_HOSTS=["testserver"] -- TestClient's Host header passes TrustedHost
  LOGIN_RATE_LIMIT            -- high enough that login tests never hit 429
"""

from __future__ import annotations

import os
from collections.abc import Generator
from contextlib import asynccontextmanager

# CRITICAL: set before importing anything that reads core.config.
os.environ.setdefault("DEBUG", "true")
os.environ.setdefault("ALLOWED_HOSTS", '["testserver"]')
os.environ.setdefault("LOGIN_RATE_LIMIT", "1000/minute")

import pytest
from fastapi.testclient import TestClient

from asgi import app
from auth.authorizer import make_authorizer
from auth.models import User
from auth.store import UserStore
from auth.tokens import create_access_token, hash_password

# Must match the account provisioned by the fixtures.
TEST_NAME = "Real User"
TEST_EMAIL = "real@example.com"
TEST_PASSWORD = "correctpass"


def make_user_store(db_suffix: str) -> UserStore:
    """Create an isolated named shared-memory SQLite user store.

    Args:
        db_suffix: Unique string appended to the DB name so test modules
                   don't share state (e.g. 'api', 'web').
    """
    return UserStore(db_url=f"sqlite:///file:test_users_{db_suffix}?mode=memory&cache=shared&uri=true")


def _patch_lifespan(user_store: UserStore):
    """Return an async context manager that replaces the real lifespan."""

    @asynccontextmanager
    async def test_lifespan(app):
        app.state.user_store = user_store
        app.state.authorizer = make_authorizer(user_store)
        yield

    return test_lifespan


def _provision(user_store: UserStore) -> int:
    return user_store.create_user(
        User(name=TEST_NAME, email=TEST_EMAIL, hashed_password=hash_password(TEST_PASSWORD))
    )


@pytest.fixture(scope="module")
def api_client() -> Generator[tuple[TestClient, str, int], None, None]:
    """Yield (client, token, user_id) for API integration tests.

    The provisioned account is TEST_EMAIL / TEST_PASSWORD.
    """
    user_store = make_user_store("api")
    uid = _provision(user_store)
    token = create_access_token(user_id=uid, email=TEST_EMAIL, name=TEST_NAME, expire_seconds=3600)

    app.router.lifespan_context = _patch_lifespan(user_store)

    with TestClient(app, raise_server_exceptions=True) as client:
        yield client, token, uid

    user_store.close()


@pytest.fixture(scope="module")
def web_client() -> Generator[tuple[TestClient, str], None, None]:
    """Yield (client, token) for web route integration tests.

    follow_redirects=False is essential: the tests assert on redirect
    locations, which are invisible once the client follows them.
    """
    user_store = make_user_store("web")
    uid = _provision(user_store)
    token = create_access_token(user_id=uid, email=TEST_EMAIL, name=TEST_NAME, expire_seconds=3600)

    app.router.lifespan_context = _patch_lifespan(user_store)

    with TestClient(app, follow_redirects=False, raise_server_exceptions=True) as client:
        yield client, token

    user_store.close()
