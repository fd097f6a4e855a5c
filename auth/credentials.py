"""
auth/credentials.py -- Shape validation for raw sign-in input.

The session layer hands the authorizer whatever the client submitted: a form,
a JSON object, or something that is neither. parse_credentials() is the guard
in front of the store -- nothing reaches UserStore unless both predicates hold.

Email shape is checked with email-validator (the library behind pydantic's
EmailStr). check_deliverability=False keeps the check free of DNS lookups, so
rejecting an address never touches the network. The check is stricter than
syntax alone: special-use domains such as .local, .test and localhost are
rejected too. main.py create-user applies the same predicate, so no account
can be provisioned with an address that could never sign in.

The submitted email is kept exactly as entered. Lookup is an exact-key match;
normalizing here would let two spellings reach the same row.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from email_validator import EmailNotValidError, validate_email

from auth.models import Credentials

MIN_PASSWORD_LENGTH = 6


@dataclass(frozen=True)
class ValidationOutcome:
    """Result of parse_credentials().

    credentials is set only when ok is True. errors lists the field names that
    failed, for tests and debugging -- it is never shown to end users.
    """

    ok: bool
    credentials: Credentials | None = None
    errors: tuple[str, ...] = ()


def is_well_formed_email(value: Any) -> bool:
    """Return True if value is a string email-validator accepts, special-use domains excluded."""
    if not isinstance(value, str):
        return False
    try:
        validate_email(value, check_deliverability=False)
    except EmailNotValidError:
        return False
    return True


def meets_min_length(value: Any, minimum: int = MIN_PASSWORD_LENGTH) -> bool:
    """Return True if value is a string of at least `minimum` characters."""
    return isinstance(value, str) and len(value) >= minimum


def parse_credentials(raw: Any) -> ValidationOutcome:
    """Validate raw sign-in input into Credentials.

    Anything that is not a mapping, is missing a key, or carries non-string
    values fails the same way a badly shaped string does.
    """
    if not isinstance(raw, Mapping):
        return ValidationOutcome(ok=False, errors=("email", "password"))

    email = raw.get("email")
    password = raw.get("password")

    errors: list[str] = []
    if not is_well_formed_email(email):
        errors.append("email")
    if not meets_min_length(password):
        errors.append("password")
    if errors:
        return ValidationOutcome(ok=False, errors=tuple(errors))

    return ValidationOutcome(ok=True, credentials=Credentials(email=email, password=password))
