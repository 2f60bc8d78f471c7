"""Tests for JWT signing and verification."""

from datetime import datetime, timedelta, timezone

import pytest
from jose import jwt

from kinauth.core.exceptions import TokenExpiredException, TokenInvalidException, UnauthorizedException
from kinauth.core.security import TokenService
from kinauth.middleware.auth_middleware import authenticate_bearer


class TestAccessTokens:
    def test_round_trip_keeps_subject(self, token_service):
        token = token_service.sign_access({"sub": "user-1"})
        claims = token_service.verify_access(token)
        assert claims["sub"] == "user-1"

    def test_access_token_lives_fifteen_minutes(self, token_service):
        before = datetime.now(timezone.utc)
        claims = token_service.verify_access(token_service.sign_access({"sub": "user-1"}))
        expires = datetime.fromtimestamp(claims["exp"], tz=timezone.utc)
        assert timedelta(minutes=14) < expires - before <= timedelta(minutes=15, seconds=1)

    def test_subject_is_required(self, token_service):
        with pytest.raises(ValueError):
            token_service.sign_access({"role": "x"})

    def test_refresh_token_is_rejected_as_access(self, token_service):
        refresh = token_service.sign_refresh({"sub": "user-1"})
        with pytest.raises(TokenInvalidException):
            token_service.verify_access(refresh.token)

    def test_expired_access_token(self):
        tokens = TokenService("a-secret", "r-secret", access_ttl=timedelta(seconds=-5))
        token = tokens.sign_access({"sub": "user-1"})
        with pytest.raises(TokenExpiredException):
            tokens.verify_access(token)

    def test_garbage_token(self, token_service):
        with pytest.raises(TokenInvalidException):
            token_service.verify_access("not-a-jwt")

    def test_wrong_secret(self, token_service):
        forged = jwt.encode({"sub": "user-1"}, "someone-else", algorithm="HS256")
        with pytest.raises(TokenInvalidException):
            token_service.verify_access(forged)

    def test_expired_and_invalid_render_the_same(self):
        expired, invalid = TokenExpiredException(), TokenInvalidException()
        assert isinstance(expired, UnauthorizedException)
        assert expired.status_code == invalid.status_code == 401
        assert expired.detail == invalid.detail


class TestRefreshTokens:
    def test_refresh_embeds_jti_and_expiry(self, token_service):
        refresh = token_service.sign_refresh({"sub": "user-1"})
        claims = token_service.verify_refresh(refresh.token)

        assert claims["jti"] == refresh.jti
        assert claims["sub"] == "user-1"
        assert refresh.expires_at - datetime.now(timezone.utc) > timedelta(days=29)
        assert int(refresh.expires_at.timestamp()) == claims["exp"]

    def test_each_refresh_gets_a_fresh_jti(self, token_service):
        first = token_service.sign_refresh({"sub": "user-1"})
        second = token_service.sign_refresh({"sub": "user-1"})
        assert first.jti != second.jti

    def test_access_token_is_rejected_as_refresh(self, token_service):
        access = token_service.sign_access({"sub": "user-1"})
        with pytest.raises(TokenInvalidException):
            token_service.verify_refresh(access)

    def test_expired_refresh_token(self):
        tokens = TokenService("a-secret", "r-secret", refresh_ttl=timedelta(seconds=-5))
        refresh = tokens.sign_refresh({"sub": "user-1"})
        with pytest.raises(TokenExpiredException):
            tokens.verify_refresh(refresh.token)


def test_secrets_must_differ():
    with pytest.raises(ValueError):
        TokenService("same", "same")


class TestBearerCheck:
    def test_valid_bearer_returns_subject(self, token_service):
        token = token_service.sign_access({"sub": "user-1"})
        assert authenticate_bearer(token_service, f"Bearer {token}") == "user-1"

    def test_scheme_is_case_insensitive(self, token_service):
        token = token_service.sign_access({"sub": "user-1"})
        assert authenticate_bearer(token_service, f"bearer {token}") == "user-1"

    @pytest.mark.parametrize("header", [None, "", "Basic abc", "Bearer nope"])
    def test_rejected_headers(self, token_service, header):
        assert authenticate_bearer(token_service, header) is None
