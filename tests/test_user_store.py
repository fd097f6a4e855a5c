"""Unit tests for auth/store.py -- the user lookup collaborator.

Covers:
- create_user() / get_by_email() / get_by_id() round trip
- get_by_email() is an exact match and returns None for unknown emails
- duplicate email raises IntegrityError
- a query error surfaces as LookupFailure, never as None
"""

import pytest
from sqlalchemy import create_engine, text
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from auth.errors import LookupFailure
from auth.models import User
from auth.store import UserStore


@pytest.fixture
def store():
    s = UserStore("sqlite:///:memory:")
    yield s
    s.close()


def _user(email: str = "real@b.com", name: str = "Real Person") -> User:
    return User(name=name, email=email, hashed_password="$2b$12$notarealhashbutstoredasis")


def test_empty_store_has_no_users(store: UserStore) -> None:
    assert store.has_users() is False


def test_create_and_get_by_email(store: UserStore) -> None:
    uid = store.create_user(_user())
    user = store.get_by_email("real@b.com")
    assert user is not None
    assert user.id == uid
    assert user.name == "Real Person"
    assert user.email == "real@b.com"
    assert user.hashed_password == "$2b$12$notarealhashbutstoredasis"
    assert user.created_at
    assert store.has_users() is True


def test_get_by_email_unknown_returns_none(store: UserStore) -> None:
    store.create_user(_user())
    assert store.get_by_email("ghost@b.com") is None


def test_get_by_email_is_exact_match(store: UserStore) -> None:
    store.create_user(_user())
    assert store.get_by_email("REAL@b.com") is None
    assert store.get_by_email("real@b.com ") is None


def test_get_by_id(store: UserStore) -> None:
    uid = store.create_user(_user())
    assert store.get_by_id(uid).email == "real@b.com"
    assert store.get_by_id(uid + 100) is None


def test_duplicate_email_rejected(store: UserStore) -> None:
    store.create_user(_user())
    with pytest.raises(IntegrityError):
        store.create_user(_user(name="Someone Else"))


def test_query_error_raises_lookup_failure(store: UserStore) -> None:
    with store.engine.connect() as conn:
        conn.execute(text("DROP TABLE users"))
        conn.commit()

    with pytest.raises(LookupFailure) as exc_info:
        store.get_by_email("real@b.com")
    assert isinstance(exc_info.value.__cause__, SQLAlchemyError)


def test_unreachable_database_raises_lookup_failure(store: UserStore, tmp_path) -> None:
    store.engine.dispose()
    store.engine = create_engine(f"sqlite:///{tmp_path / 'missing_dir' / 'users.db'}")
    with pytest.raises(LookupFailure):
        store.get_by_email("real@b.com")


def test_get_by_id_query_error_raises_lookup_failure(store: UserStore) -> None:
    uid = store.create_user(_user())
    with store.engine.connect() as conn:
        conn.execute(text("DROP TABLE users"))
        conn.commit()

    with pytest.raises(LookupFailure) as exc_info:
        store.get_by_id(uid)
    assert isinstance(exc_info.value.__cause__, SQLAlchemyError)
