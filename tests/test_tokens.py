"""Unit tests for auth/tokens.py -- bcrypt secret verifier and session JWTs."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

from jose import jwt

from auth.tokens import create_access_token, decode_access_token, hash_password, verify_password
from core.config import get_settings


class TestPasswordHashing:
    def test_hash_is_not_plaintext(self) -> None:
        hashed = hash_password("correctpass")
        assert hashed != "correctpass"
        assert hashed.startswith("$2")

    def test_hash_is_salted(self) -> None:
        assert hash_password("correctpass") != hash_password("correctpass")

    def test_verify_match_and_mismatch(self) -> None:
        hashed = hash_password("correctpass")
        assert verify_password("correctpass", hashed) is True
        assert verify_password("wrongpass", hashed) is False
        assert verify_password("correctpas", hashed) is False

    def test_malformed_stored_hash_is_a_mismatch(self) -> None:
        assert verify_password("correctpass", "not-a-bcrypt-hash") is False
        assert verify_password("correctpass", "correctpass") is False

    def test_long_password_round_trips(self) -> None:
        """Passwords past bcrypt's 72-byte limit hash and verify consistently."""
        long_password = "p" * 100
        hashed = hash_password(long_password)
        assert verify_password(long_password, hashed) is True

    def test_unicode_password(self) -> None:
        hashed = hash_password("pässwörd✓")
        assert verify_password("pässwörd✓", hashed) is True
        assert verify_password("passwords", hashed) is False


class TestAccessTokens:
    def test_round_trip(self) -> None:
        token = create_access_token(user_id=5, email="real@b.com", name="Real Person")
        payload = decode_access_token(token)
        assert payload is not None
        assert payload["user_id"] == 5
        assert payload["sub"] == "real@b.com"
        assert payload["name"] == "Real Person"

    def test_tampered_token_rejected(self) -> None:
        header, _payload, signature = create_access_token(user_id=5, email="real@b.com", name="Real Person").split(".")
        _h, other_payload, _s = create_access_token(user_id=6, email="other@b.com", name="Other").split(".")
        assert decode_access_token(f"{header}.{other_payload}.{signature}") is None

    def test_garbage_rejected(self) -> None:
        assert decode_access_token("not.a.jwt") is None
        assert decode_access_token("") is None

    def test_expired_token_rejected(self) -> None:
        payload = {"sub": "real@b.com", "user_id": 5, "exp": datetime.now(timezone.utc) - timedelta(seconds=5)}
        token = jwt.encode(payload, get_settings().secret_key, algorithm="HS256")
        assert decode_access_token(token) is None

    def test_token_without_user_id_rejected(self) -> None:
        payload = {"sub": "real@b.com", "exp": datetime.now(timezone.utc) + timedelta(minutes=5)}
        token = jwt.encode(payload, get_settings().secret_key, algorithm="HS256")
        assert decode_access_token(token) is None

    def test_token_signed_with_other_key_rejected(self) -> None:
        payload = {"sub": "real@b.com", "user_id": 5, "exp": datetime.now(timezone.utc) + timedelta(minutes=5)}
        token = jwt.encode(payload, "x" * 64, algorithm="HS256")
        assert decode_access_token(token) is None
