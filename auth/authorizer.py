"""
auth/authorizer.py -- The credential authorizer behind every sign-in.

authorize() is a linear pipeline where each step is a hard gate:

  1. parse_credentials()  -- shape check; failure means no store access at all
  2. lookup(email)        -- UserStore.get_by_email; LookupFailure propagates
  3. existence check      -- None means no such user
  4. verify(password, h)  -- bcrypt, constant time
  5. decision             -- the full User on match

Uniform rejection:
  Malformed input, unknown email and wrong password all return None. The
  caller gets no hint which part was wrong, and the diagnostic line is the
  same generic "Invalid credentials" for all three. For an unknown email the
  verifier still runs against a dummy hash, so timing matches a wrong
  password. Malformed input is rejected before any stored data is read, so
  its timing says nothing about the store.

  LookupFailure is the one outcome that is NOT folded into None -- "database
  down" must stay distinguishable from "bad login".

The session layer only sees the CredentialsAuthorizer protocol: a callable
from raw input to User | None. make_authorizer() binds the collaborators.

Layer rule: no imports from api/ or web/.
"""

from __future__ import annotations

import logging
import threading
import time
from collections.abc import Callable
from typing import Any, Protocol

from auth.credentials import parse_credentials
from auth.errors import RejectionReason
from auth.models import User
from auth.tokens import DUMMY_HASH, verify_password
from core.config import get_settings

logger = logging.getLogger("acme.auth")

# ---------------------------------------------------------------------------
# Collaborator contracts
# ---------------------------------------------------------------------------


class UserLookup(Protocol):
    """Exact-match lookup by email. Returns None for no such user, raises
    LookupFailure when the store cannot be queried."""

    def __call__(self, email: str) -> User | None: ...


class SecretVerifier(Protocol):
    """Salted one-way comparison of a plaintext password against a stored hash."""

    def __call__(self, plain: str, hashed: str) -> bool: ...


class CredentialsAuthorizer(Protocol):
    """What the session layer registers: raw input in, User or None out."""

    def __call__(self, raw_credentials: Any) -> User | None: ...


# ---------------------------------------------------------------------------
# Rejection diagnostic
# ---------------------------------------------------------------------------


class RejectionLog:
    """Emits the generic "Invalid credentials" diagnostic.

    interval_seconds == 0 logs every rejection. A positive interval logs at
    most one line per interval and folds the rest into a suppressed count
    reported with the next line. The lock guards only the throttle counters;
    authorization itself holds no shared state.
    """

    def __init__(self, interval_seconds: float = 0.0, clock: Callable[[], float] = time.monotonic) -> None:
        self._interval = interval_seconds
        self._clock = clock
        self._lock = threading.Lock()
        self._last_emit: float | None = None
        self._suppressed = 0

    def record(self) -> None:
        if self._interval <= 0:
            logger.info("Invalid credentials")
            return
        with self._lock:
            now = self._clock()
            if self._last_emit is not None and now - self._last_emit < self._interval:
                self._suppressed += 1
                return
            suppressed, self._suppressed = self._suppressed, 0
            self._last_emit = now
        if suppressed:
            logger.info("Invalid credentials (%d more suppressed)", suppressed)
        else:
            logger.info("Invalid credentials")


_default_rejection_log = RejectionLog()


# ---------------------------------------------------------------------------
# Pipeline
# ---------------------------------------------------------------------------


def evaluate(raw_credentials: Any, *, lookup: UserLookup, verify: SecretVerifier) -> User | RejectionReason:
    """Run the pipeline and return the User or the specific rejection cause.

    Internal to auth/ -- callers outside this package use authorize(), which
    collapses every RejectionReason into None.
    """
    outcome = parse_credentials(raw_credentials)
    if not outcome.ok:
        return RejectionReason.validation_failure

    credentials = outcome.credentials
    user = lookup(credentials.email)
    if user is None:
        verify(credentials.password, DUMMY_HASH)
        return RejectionReason.not_found

    if not verify(credentials.password, user.hashed_password):
        return RejectionReason.secret_mismatch
    return user


def authorize(
    raw_credentials: Any,
    *,
    lookup: UserLookup,
    verify: SecretVerifier = verify_password,
    rejection_log: RejectionLog | None = None,
) -> User | None:
    """Decide a sign-in attempt. Returns the matched User, or None.

    Raises LookupFailure (from lookup) when the store is unavailable. Never
    retries.
    """
    result = evaluate(raw_credentials, lookup=lookup, verify=verify)
    if isinstance(result, RejectionReason):
        (rejection_log or _default_rejection_log).record()
        return None
    return result


def make_authorizer(store, verify: SecretVerifier = verify_password) -> CredentialsAuthorizer:
    """Bind authorize() to a UserStore for registration on app.state.

    The rejection throttle interval comes from REJECTION_LOG_INTERVAL_SECONDS.
    """
    rejection_log = RejectionLog(get_settings().rejection_log_interval_seconds)

    def authorizer(raw_credentials: Any) -> User | None:
        return authorize(raw_credentials, lookup=store.get_by_email, verify=verify, rejection_log=rejection_log)

    return authorizer
