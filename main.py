#!/usr/bin/env python3
"""
Acme dashboard -- account provisioning.

Accounts are not self-service; an operator creates them here and users sign
in through the dashboard.

Usage:
  python main.py create-user "Ada Lovelace" ada@example.com
  echo 's3cret!' | python main.py create-user "CI Bot" bot@example.com --password-stdin

Environment variables:
  DATABASE_URL  SQLAlchemy URL of the user store (default: sqlite file in auth/)
  SECRET_KEY    Required unless DEBUG=true (shared settings with the web app)
"""

import argparse
import getpass
import sys
from typing import Optional

from sqlalchemy.exc import IntegrityError

from auth.credentials import MIN_PASSWORD_LENGTH, is_well_formed_email, meets_min_length
from auth.models import User
from auth.store import UserStore
from auth.tokens import hash_password


def _prompt_password() -> Optional[str]:
    """Ask for the password twice. Returns None after three failed attempts."""
    for _ in range(3):
        password = getpass.getpass("Password: ")
        confirm = getpass.getpass("Confirm password: ")
        if password != confirm:
            print("  [!] Passwords do not match. Try again.", file=sys.stderr)
            continue
        if not meets_min_length(password):
            print(f"  [!] Password must be at least {MIN_PASSWORD_LENGTH} characters.", file=sys.stderr)
            continue
        return password
    return None


def create_user(store: UserStore, name: str, email: str, password: str) -> int:
    """Validate and insert a user. Returns the process exit code."""
    if not name.strip():
        print("  [!] Name is required.", file=sys.stderr)
        return 1
    if not is_well_formed_email(email):
        print(f"  [!] '{email}' is not a valid email address.", file=sys.stderr)
        return 1
    if not meets_min_length(password):
        print(f"  [!] Password must be at least {MIN_PASSWORD_LENGTH} characters.", file=sys.stderr)
        return 1

    try:
        user_id = store.create_user(User(name=name.strip(), email=email, hashed_password=hash_password(password)))
    except IntegrityError:
        print(f"  [!] A user with email '{email}' already exists.", file=sys.stderr)
        return 1

    print(f"Created user #{user_id}: {name.strip()} <{email}>")
    return 0


def main(argv: Optional[list[str]] = None) -> int:
    parser = argparse.ArgumentParser(
        prog="acme-dashboard",
        description="Manage Acme dashboard accounts.",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    create = subparsers.add_parser("create-user", help="Create a dashboard account")
    create.add_argument("name", help="Display name for the user")
    create.add_argument("email", help="Email address used to sign in (exact match)")
    create.add_argument(
        "--password-stdin",
        action="store_true",
        help="Read the password from the first line of stdin instead of prompting",
    )
    create.add_argument(
        "--db",
        metavar="URL",
        default=None,
        help="SQLAlchemy database URL (default: DATABASE_URL setting)",
    )

    args = parser.parse_args(argv)

    if args.password_stdin:
        password = sys.stdin.readline().rstrip("\n")
    else:
        password = _prompt_password()
        if password is None:
            print("  [!] Failed to set a password after three attempts.", file=sys.stderr)
            return 1

    store = UserStore(db_url=args.db)
    try:
        return create_user(store, args.name, args.email, password)
    finally:
        store.close()


if __name__ == "__main__":
    raise SystemExit(main())
