"""
auth/models.py -- Domain dataclasses for authentication entities.

Pattern: Data class (pure data container, zero logic). Stores and routes do
the work; these classes only own the shape.

Layer rule: no imports from api/ or web/.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass
class User:
    """A dashboard account as stored in the users table.

    email is the unique sign-in key. hashed_password is a bcrypt hash and is
    never the plaintext. The authorizer hands the whole record back to the
    session layer on success, so every profile field travels with it.
    """

    name: str
    email: str
    hashed_password: str
    id: int | None = None
    created_at: str | None = None


@dataclass(frozen=True)
class Credentials:
    """A sign-in attempt whose shape has been validated.

    Only auth.credentials.parse_credentials() builds these -- holding one
    means the email looked like an address and the password met the minimum
    length.
    """

    email: str
    password: str
