"""
Unit tests for core.security module.
Tests password hashing and access/refresh token minting and verification.
"""
import pytest
import datetime as dt
from types import SimpleNamespace

import jwt

from userhub.core.exceptions import InvalidTokenError
from userhub.core.security import (
    TokenPair,
    TokenService,
    hash_password,
    verify_password,
)


def make_user(user_id="user-123"):
    return SimpleNamespace(id=user_id, username="alice", email="alice@x.com", fullname="Alice A")


def make_service(clock=None, access_minutes=15, refresh_minutes=60 * 24):
    kwargs = {}
    if clock is not None:
        kwargs["clock"] = clock
    return TokenService(
        access_secret="access-secret",
        access_ttl=dt.timedelta(minutes=access_minutes),
        refresh_secret="refresh-secret",
        refresh_ttl=dt.timedelta(minutes=refresh_minutes),
        **kwargs,
    )


class TestPasswordHashing:
    """Tests for password hashing and verification."""

    def test_hash_password_returns_different_hash_each_time(self):
        """Password hashing should produce different hashes (salt included)."""
        password = "TestPassword123"
        assert hash_password(password) != hash_password(password)

    def test_hash_password_is_not_plain_text(self):
        password = "TestPassword123"
        hashed = hash_password(password)
        assert isinstance(hashed, str)
        assert hashed != password
        assert password not in hashed

    def test_verify_password_correct_password(self):
        hashed = hash_password("TestPassword123")
        assert verify_password("TestPassword123", hashed) is True

    def test_verify_password_incorrect_password(self):
        hashed = hash_password("TestPassword123")
        assert verify_password("WrongPassword456", hashed) is False

    def test_verify_password_never_raises_on_garbage_hash(self):
        """A corrupt or missing hash is a mismatch, not an exception."""
        assert verify_password("anything", "not-a-real-hash") is False
        assert verify_password("anything", "") is False
        assert verify_password("anything", None) is False


class TestTokenService:
    """Tests for the access/refresh token pair."""

    def test_issue_pair_round_trip_recovers_subject(self):
        service = make_service()
        pair = service.issue_pair(make_user("abc"))
        assert isinstance(pair, TokenPair)
        assert service.verify_access(pair.access_token)["sub"] == "abc"
        assert service.verify_refresh(pair.refresh_token)["sub"] == "abc"

    def test_access_token_carries_profile_claims(self):
        service = make_service()
        claims = service.verify_access(service.issue_pair(make_user()).access_token)
        assert claims["username"] == "alice"
        assert claims["email"] == "alice@x.com"
        assert claims["fullname"] == "Alice A"

    def test_refresh_token_carries_only_subject(self):
        service = make_service()
        claims = service.verify_refresh(service.issue_pair(make_user()).refresh_token)
        assert claims["sub"] == "user-123"
        assert "username" not in claims
        assert "email" not in claims

    def test_tokens_are_not_interchangeable(self):
        """Each kind is signed with its own secret."""
        service = make_service()
        pair = service.issue_pair(make_user())
        with pytest.raises(InvalidTokenError):
            service.verify_access(pair.refresh_token)
        with pytest.raises(InvalidTokenError):
            service.verify_refresh(pair.access_token)

    def test_two_pairs_for_same_user_differ(self):
        service = make_service()
        first = service.issue_pair(make_user())
        second = service.issue_pair(make_user())
        assert first.access_token != second.access_token
        assert first.refresh_token != second.refresh_token

    def test_expiry_matches_configured_lifetime(self):
        service = make_service(access_minutes=15, refresh_minutes=600)
        pair = service.issue_pair(make_user())
        access = service.verify_access(pair.access_token)
        refresh = service.verify_refresh(pair.refresh_token)
        assert abs((access["exp"] - access["iat"]) / 60 - 15) < 1
        assert abs((refresh["exp"] - refresh["iat"]) / 60 - 600) < 1

    def test_expired_tokens_are_rejected(self):
        """Tokens issued long enough ago fail once the clock passes exp."""
        past = dt.datetime.now(dt.timezone.utc) - dt.timedelta(days=30)
        pair = make_service(clock=lambda: past).issue_pair(make_user())
        service = make_service()
        with pytest.raises(InvalidTokenError, match="expired"):
            service.verify_access(pair.access_token)
        with pytest.raises(InvalidTokenError, match="expired"):
            service.verify_refresh(pair.refresh_token)

    def test_verification_uses_the_injected_clock(self):
        now = dt.datetime.now(dt.timezone.utc)
        clock = {"now": now - dt.timedelta(days=30)}
        service = make_service(clock=lambda: clock["now"])
        pair = service.issue_pair(make_user())

        # Still inside the access lifetime as far as the service's clock is concerned
        assert service.verify_access(pair.access_token)["sub"] == "user-123"

        clock["now"] += dt.timedelta(minutes=16)
        with pytest.raises(InvalidTokenError, match="expired"):
            service.verify_access(pair.access_token)
        assert service.verify_refresh(pair.refresh_token)["sub"] == "user-123"

    def test_tampered_token_is_rejected(self):
        service = make_service()
        forged = jwt.encode({"sub": "x", "iat": 0, "exp": 4102444800}, "wrong-secret", algorithm="HS256")
        with pytest.raises(InvalidTokenError):
            service.verify_access(forged)
        with pytest.raises(InvalidTokenError):
            service.verify_access("invalid.token.here")

    def test_token_without_subject_is_rejected(self):
        service = make_service()
        now = dt.datetime.now(dt.timezone.utc)
        token = jwt.encode(
            {"iat": now, "exp": now + dt.timedelta(minutes=5)}, "access-secret", algorithm="HS256"
        )
        with pytest.raises(InvalidTokenError):
            service.verify_access(token)

    def test_secrets_must_differ(self):
        with pytest.raises(ValueError):
            TokenService(
                access_secret="same",
                access_ttl=dt.timedelta(minutes=1),
                refresh_secret="same",
                refresh_ttl=dt.timedelta(minutes=2),
            )
