"""
auth/errors.py -- Error taxonomy for sign-in.

Only infrastructure failures are exceptions. Bad credentials are not: the
authorizer folds every credential problem into a single None result so the
caller cannot tell which part was wrong. RejectionReason names those causes
for code paths inside auth/ and is never surfaced to callers or logs.
"""

from __future__ import annotations

from enum import Enum


class AuthError(Exception):
    """Base class for authentication infrastructure errors."""


class LookupFailure(AuthError):
    """The user store could not be queried (unreachable, query error, timeout).

    Distinct from "no such user", which is a normal None result. Routes map
    this to 503 so operators can tell "database down" from "bad login".
    """


class RejectionReason(str, Enum):
    validation_failure = "validation_failure"
    not_found = "not_found"
    secret_mismatch = "secret_mismatch"
