"""Unit tests for JWTService."""

from datetime import timedelta
from uuid import uuid4

import jwt
import pytest

from bookbuddy_auth.exceptions import ExpiredTokenError, InvalidTokenError
from bookbuddy_auth.schemas import TokenKind
from bookbuddy_auth.services import JWTService

ACCESS_SECRET = "test-access-secret-12345"  # NOQA: S105
REFRESH_SECRET = "test-refresh-secret-67890"  # NOQA: S105


class TestJWTServiceInit:
    """Tests for JWTService initialization."""

    def test_init_with_valid_secrets(self):
        service = JWTService(access_secret="a", refresh_secret="b")
        assert service.access_token_lifetime == timedelta(minutes=15)
        assert service.refresh_token_lifetime == timedelta(days=7)

    def test_init_with_empty_secret_raises(self):
        with pytest.raises(ValueError, match="cannot be empty"):
            JWTService(access_secret="", refresh_secret="b")

    def test_init_with_equal_secrets_raises(self):
        """Access and refresh tokens must never share a key."""
        with pytest.raises(ValueError, match="must be different"):
            JWTService(access_secret="same", refresh_secret="same")

    def test_init_with_custom_expiry(self):
        service = JWTService(
            access_secret="a",
            refresh_secret="b",
            access_token_expire_minutes=5,
            refresh_token_expire_days=1,
        )
        assert service.access_token_lifetime == timedelta(minutes=5)
        assert service.refresh_token_lifetime == timedelta(days=1)


class TestAccessTokens:
    """Tests for access token creation and verification."""

    def setup_method(self):
        self.service = JWTService(
            access_secret=ACCESS_SECRET,
            refresh_secret=REFRESH_SECRET,
        )
        self.user_id = uuid4()

    def test_verify_valid_access_token(self):
        token = self.service.create_access_token(self.user_id)

        payload = self.service.verify_access_token(token)

        assert payload.user_id == self.user_id
        assert payload.kind == TokenKind.ACCESS
        assert payload.is_access_token()
        assert payload.jti is None
        assert payload.exp > payload.issued_at

    def test_token_carries_issuer_and_audience(self):
        token = self.service.create_access_token(self.user_id)

        claims = jwt.decode(token, options={"verify_signature": False})

        assert claims["iss"] == "bookbuddy-api"
        assert claims["aud"] == "bookbuddy-client"
        assert claims["sub"] == str(self.user_id)

    def test_verify_expired_token_raises(self):
        token = self.service.create_access_token(
            self.user_id,
            expires_delta=timedelta(seconds=-1),
        )

        with pytest.raises(ExpiredTokenError):
            self.service.verify_access_token(token)

    def test_verify_invalid_token_raises(self):
        with pytest.raises(InvalidTokenError):
            self.service.verify_access_token("invalid.token.string")

    def test_verify_tampered_token_raises(self):
        token = self.service.create_access_token(self.user_id)
        tampered = token[:-5] + ("xxxxx" if not token.endswith("xxxxx") else "yyyyy")

        with pytest.raises(InvalidTokenError):
            self.service.verify_access_token(tampered)

    def test_refresh_token_rejected_as_access_token(self):
        """Each kind is verified only with its own secret."""
        token = self.service.create_refresh_token(self.user_id, jti="abc")

        with pytest.raises(InvalidTokenError):
            self.service.verify_access_token(token)

    def test_wrong_audience_rejected(self):
        other = JWTService(
            access_secret=ACCESS_SECRET,
            refresh_secret=REFRESH_SECRET,
            audience="someone-else",
        )
        token = other.create_access_token(self.user_id)

        with pytest.raises(InvalidTokenError):
            self.service.verify_access_token(token)

    def test_wrong_issuer_rejected(self):
        other = JWTService(
            access_secret=ACCESS_SECRET,
            refresh_secret=REFRESH_SECRET,
            issuer="evil-api",
        )
        token = other.create_access_token(self.user_id)

        with pytest.raises(InvalidTokenError):
            self.service.verify_access_token(token)

    def test_non_uuid_subject_rejected(self):
        token = jwt.encode(
            {
                "sub": "not-a-uuid",
                "iss": "bookbuddy-api",
                "aud": "bookbuddy-client",
                "iat": 1,
                "exp": 9999999999,
            },
            ACCESS_SECRET,
            algorithm="HS256",
        )

        with pytest.raises(InvalidTokenError):
            self.service.verify_access_token(token)

    def test_reserved_claims_cannot_be_overridden(self):
        with pytest.raises(ValueError, match="Reserved claims"):
            self.service.sign(TokenKind.ACCESS, self.user_id, extra_claims={"sub": "x"})


class TestRefreshTokens:
    """Tests for refresh token creation and verification."""

    def setup_method(self):
        self.service = JWTService(
            access_secret=ACCESS_SECRET,
            refresh_secret=REFRESH_SECRET,
        )
        self.user_id = uuid4()

    def test_verify_valid_refresh_token(self):
        token = self.service.create_refresh_token(self.user_id, jti="session-1")

        payload = self.service.verify_refresh_token(token)

        assert payload.user_id == self.user_id
        assert payload.is_refresh_token()
        assert payload.jti == "session-1"

    def test_refresh_token_lifetime_is_seven_days(self):
        token = self.service.create_refresh_token(self.user_id, jti="j")

        payload = self.service.verify_refresh_token(token)

        assert payload.exp - payload.issued_at == timedelta(days=7)

    def test_access_token_rejected_as_refresh_token(self):
        token = self.service.create_access_token(self.user_id)

        with pytest.raises(InvalidTokenError):
            self.service.verify_refresh_token(token)

    def test_refresh_token_without_jti_rejected(self):
        token = self.service.sign(TokenKind.REFRESH, self.user_id)

        with pytest.raises(InvalidTokenError):
            self.service.verify_refresh_token(token)

    def test_expired_refresh_token_raises(self):
        token = self.service.create_refresh_token(
            self.user_id,
            jti="j",
            expires_delta=timedelta(seconds=-1),
        )

        with pytest.raises(ExpiredTokenError):
            self.service.verify_refresh_token(token)
