"""Unit tests for AuthenticationService."""

from datetime import datetime, timedelta, timezone
from unittest.mock import AsyncMock, MagicMock, Mock
from uuid import UUID, uuid4

import pytest

from bookbuddy_auth import (
    InvalidOrExpiredCodeError,
    InvalidTokenError,
    JWTService,
    PasswordHashingService,
    TokenKind,
    TokenPayload,
    VerificationCodeService,
    WeakPasswordError,
)
from bookbuddy_auth.repositories import RefreshSessionData
from bookbuddy_identity import AuthenticationService
from bookbuddy_identity.application.context import RequestContext
from bookbuddy_identity.domain.user import (
    EmailAlreadyExistsError,
    User,
    UsernameAlreadyExistsError,
    UserNotFoundError,
)
from bookbuddy_identity.exceptions import InvalidCredentialsError, UnauthorizedError
from bookbuddy_identity.infrastructure.audit import AuditLogger
from bookbuddy_identity.repositories import AuthEventAction

TEST_USER_ID = UUID("12345678-1234-5678-1234-567812345678")
TEST_USERNAME = "alice"
TEST_EMAIL = "alice@example.com"
TEST_PASSWORD = "secure_password_123"  # NOQA: S105
NOW = datetime(2026, 1, 1, 12, 0, tzinfo=timezone.utc)
CONTEXT = RequestContext(request_id="req-1", ip_address="127.0.0.1")


def _session(user_id: UUID = TEST_USER_ID, jti: str = "jti-new") -> RefreshSessionData:
    return RefreshSessionData(
        id=uuid4(),
        jti=jti,
        user_id=user_id,
        created_at=NOW,
        expires_at=NOW + timedelta(days=7),
        revoked_at=None,
    )


def _refresh_payload(user_id: UUID = TEST_USER_ID, jti: str = "jti-old") -> TokenPayload:
    return TokenPayload(
        user_id=user_id,
        kind=TokenKind.REFRESH,
        issued_at=NOW,
        exp=NOW + timedelta(days=7),
        jti=jti,
    )


class _ServiceFixture:
    """Builds the service with every collaborator mocked."""

    def setup_method(self):
        """Set up test fixtures."""
        self.user_repo = AsyncMock()
        self.credential_repo = AsyncMock()
        self.session_repo = AsyncMock()
        self.session_repo.create_session.return_value = _session()
        self.session_repo.revoke_all.return_value = 0
        self.event_repo = AsyncMock()
        self.password_service = Mock(spec=PasswordHashingService)
        self.password_service.needs_rehash.return_value = False
        self.jwt_service = Mock(spec=JWTService)
        self.jwt_service.refresh_token_lifetime = timedelta(days=7)
        self.jwt_service.create_access_token.return_value = "access_token"
        self.jwt_service.create_refresh_token.return_value = "refresh_token"
        self.code_service = Mock(spec=VerificationCodeService)
        self.code_service.ttl = timedelta(minutes=10)
        self.mailer = Mock()
        self.audit = Mock(spec=AuditLogger)

        self.service = AuthenticationService(
            user_repository=self.user_repo,
            credential_repository=self.credential_repo,
            session_repository=self.session_repo,
            auth_event_repository=self.event_repo,
            password_service=self.password_service,
            jwt_service=self.jwt_service,
            code_service=self.code_service,
            mailer=self.mailer,
            audit=self.audit,
        )


class TestAuthenticationServiceRegister(_ServiceFixture):
    """Tests for user registration."""

    @pytest.mark.asyncio
    async def test_register_creates_user_and_returns_tokens(self):
        """Test that register stores user and credential, then opens a session."""
        # Arrange
        self.user_repo.find_by_email.return_value = None
        self.user_repo.find_by_username.return_value = None
        self.password_service.hash_async.return_value = "hashed_password"

        # Act
        result = await self.service.register(
            TEST_USERNAME,
            "  Alice@Example.com ",
            TEST_PASSWORD,
            CONTEXT,
        )

        # Assert
        assert result.user.email == TEST_EMAIL
        assert result.access_token == "access_token"
        assert result.refresh_token == "refresh_token"
        self.user_repo.save.assert_awaited_once()
        self.credential_repo.save.assert_awaited_once_with(
            user_id=result.user.id,
            password_hash="hashed_password",
        )
        self.jwt_service.create_refresh_token.assert_called_once_with(
            result.user.id,
            "jti-new",
        )
        self.event_repo.record.assert_awaited_once_with(
            result.user.id,
            AuthEventAction.REGISTER,
        )
        self.audit.info.assert_called_once_with(
            "auth.register.success",
            CONTEXT,
            result.user.id,
        )

    @pytest.mark.asyncio
    async def test_register_raises_when_email_exists(self):
        """Test that register raises EmailAlreadyExistsError for existing email."""
        # Arrange
        self.user_repo.find_by_email.return_value = User.create("other", TEST_EMAIL)

        # Act & Assert
        with pytest.raises(EmailAlreadyExistsError):
            await self.service.register(TEST_USERNAME, TEST_EMAIL, TEST_PASSWORD)

        self.user_repo.save.assert_not_called()

    @pytest.mark.asyncio
    async def test_register_raises_when_username_taken(self):
        """Test that register raises UsernameAlreadyExistsError for taken username."""
        # Arrange
        self.user_repo.find_by_email.return_value = None
        self.user_repo.find_by_username.return_value = User.create(
            TEST_USERNAME,
            "other@example.com",
        )

        # Act & Assert
        with pytest.raises(UsernameAlreadyExistsError):
            await self.service.register(TEST_USERNAME, TEST_EMAIL, TEST_PASSWORD)

        self.user_repo.save.assert_not_called()

    @pytest.mark.asyncio
    async def test_register_raises_for_weak_password(self):
        """Test that a weak password is rejected before any lookup."""
        # Arrange
        self.password_service.validate_strength.side_effect = WeakPasswordError("short")

        # Act & Assert
        with pytest.raises(WeakPasswordError):
            await self.service.register(TEST_USERNAME, TEST_EMAIL, "short")

        self.user_repo.find_by_email.assert_not_called()


class TestAuthenticationServiceLogin(_ServiceFixture):
    """Tests for password login."""

    def setup_method(self):
        """Set up a stored user with a credential."""
        super().setup_method()
        self.user = User.create(TEST_USERNAME, TEST_EMAIL)
        credential = MagicMock()
        credential.password_hash = "hashed_password"
        self.user_repo.find_by_identifier.return_value = self.user
        self.credential_repo.find_by_user_id.return_value = credential

    @pytest.mark.asyncio
    async def test_login_returns_user_and_tokens(self):
        """Test that login returns user and tokens for valid credentials."""
        # Arrange
        self.password_service.verify_async.return_value = True

        # Act
        result = await self.service.login(TEST_EMAIL, TEST_PASSWORD)

        # Assert
        assert result.user == self.user
        assert result.access_token == "access_token"
        self.credential_repo.update_last_login.assert_awaited_once_with(self.user.id)
        self.event_repo.record.assert_awaited_once_with(
            self.user.id,
            AuthEventAction.LOGIN,
        )

    @pytest.mark.asyncio
    async def test_login_revokes_earlier_sessions_first(self):
        """Test that a new login ends all earlier refresh chains."""
        # Arrange
        self.password_service.verify_async.return_value = True
        self.session_repo.revoke_all.return_value = 2

        # Act
        await self.service.login(TEST_USERNAME, TEST_PASSWORD)

        # Assert
        self.session_repo.revoke_all.assert_awaited_once_with(self.user.id)
        self.session_repo.create_session.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_login_keeps_sessions_when_multi_chain(self):
        """Test that multi-chain mode leaves other sessions alive."""
        # Arrange
        self.service._single_chain = False
        self.password_service.verify_async.return_value = True

        # Act
        await self.service.login(TEST_USERNAME, TEST_PASSWORD)

        # Assert
        self.session_repo.revoke_all.assert_not_called()

    @pytest.mark.asyncio
    async def test_login_wrong_password_raises_invalid_credentials(self):
        """Test that a wrong password raises InvalidCredentialsError."""
        # Arrange
        self.password_service.verify_async.return_value = False

        # Act & Assert
        with pytest.raises(InvalidCredentialsError):
            await self.service.login(TEST_EMAIL, "wrong")

        self.session_repo.create_session.assert_not_called()
        self.audit.warn.assert_called_once()

    @pytest.mark.asyncio
    async def test_login_unknown_user_raises_same_error(self):
        """Test that an unknown identifier is indistinguishable from a bad password."""
        # Arrange
        self.user_repo.find_by_identifier.return_value = None

        # Act & Assert
        with pytest.raises(InvalidCredentialsError) as exc_info:
            await self.service.login("nobody", TEST_PASSWORD)

        assert str(exc_info.value) == "Invalid credentials"
        self.password_service.verify_async.assert_not_called()

    @pytest.mark.asyncio
    async def test_login_rehashes_outdated_hash(self):
        """Test that a hash with an old cost factor is upgraded on login."""
        # Arrange
        self.password_service.verify_async.return_value = True
        self.password_service.needs_rehash.return_value = True
        self.password_service.hash_async.return_value = "new_hash"

        # Act
        await self.service.login(TEST_EMAIL, TEST_PASSWORD)

        # Assert
        self.credential_repo.save.assert_awaited_once_with(
            user_id=self.user.id,
            password_hash="new_hash",
        )


class TestAuthenticationServiceRefresh(_ServiceFixture):
    """Tests for refresh-token rotation."""

    @pytest.mark.asyncio
    async def test_refresh_rotates_session(self):
        """Test that refresh revokes the old session and issues a new pair."""
        # Arrange
        self.jwt_service.verify_refresh_token.return_value = _refresh_payload()
        self.session_repo.find_active.return_value = _session(jti="jti-old")
        self.session_repo.revoke.return_value = True

        # Act
        tokens = await self.service.refresh("refresh_token_old", CONTEXT)

        # Assert
        assert tokens.access_token == "access_token"
        assert tokens.refresh_token == "refresh_token"
        self.session_repo.revoke.assert_awaited_once_with("jti-old")
        self.session_repo.create_session.assert_awaited_once_with(
            TEST_USER_ID,
            timedelta(days=7),
        )
        self.event_repo.record.assert_awaited_once_with(
            TEST_USER_ID,
            AuthEventAction.REFRESH_TOKEN,
        )
        self.audit.info.assert_called_once_with(
            "auth.refresh.rotate",
            CONTEXT,
            TEST_USER_ID,
            old_jti="jti-old",
            new_jti="jti-new",
        )

    @pytest.mark.asyncio
    @pytest.mark.parametrize("token", [None, ""])
    async def test_missing_token_is_unauthorized(self, token):
        """Test that a missing cookie is rejected without verification."""
        with pytest.raises(UnauthorizedError):
            await self.service.refresh(token)

        self.jwt_service.verify_refresh_token.assert_not_called()

    @pytest.mark.asyncio
    async def test_invalid_token_is_unauthorized(self):
        """Test that a token failing verification is rejected."""
        # Arrange
        self.jwt_service.verify_refresh_token.side_effect = InvalidTokenError()

        # Act & Assert
        with pytest.raises(UnauthorizedError):
            await self.service.refresh("garbage")

        self.session_repo.find_active.assert_not_called()

    @pytest.mark.asyncio
    async def test_revoked_session_is_unauthorized_and_audited(self):
        """Test that replaying a rotated-away token is rejected and logged."""
        # Arrange
        self.jwt_service.verify_refresh_token.return_value = _refresh_payload()
        self.session_repo.find_active.return_value = None

        # Act & Assert
        with pytest.raises(UnauthorizedError):
            await self.service.refresh("refresh_token_old")

        self.session_repo.create_session.assert_not_called()
        self.audit.error.assert_called_once()

    @pytest.mark.asyncio
    async def test_losing_concurrent_rotation_is_unauthorized(self):
        """Test that the caller whose revoke affects no row gets nothing."""
        # Arrange
        self.jwt_service.verify_refresh_token.return_value = _refresh_payload()
        self.session_repo.find_active.return_value = _session(jti="jti-old")
        self.session_repo.revoke.return_value = False

        # Act & Assert
        with pytest.raises(UnauthorizedError):
            await self.service.refresh("refresh_token_old")

        self.session_repo.create_session.assert_not_called()

    @pytest.mark.asyncio
    async def test_session_of_other_user_is_unauthorized(self):
        """Test that a token whose sub does not own the session is rejected."""
        # Arrange
        self.jwt_service.verify_refresh_token.return_value = _refresh_payload()
        self.session_repo.find_active.return_value = _session(user_id=uuid4(), jti="jti-old")

        # Act & Assert
        with pytest.raises(UnauthorizedError):
            await self.service.refresh("refresh_token_old")

        self.session_repo.revoke.assert_not_called()


class TestAuthenticationServiceLogout(_ServiceFixture):
    """Tests for logout and logout-all."""

    @pytest.mark.asyncio
    async def test_logout_revokes_session(self):
        """Test that logout revokes the session named by the token."""
        # Arrange
        self.jwt_service.verify_refresh_token.return_value = _refresh_payload()
        self.session_repo.revoke.return_value = True

        # Act
        revoked = await self.service.logout("refresh_token")

        # Assert
        assert revoked is True
        self.session_repo.revoke.assert_awaited_once_with("jti-old")
        self.event_repo.record.assert_awaited_once_with(
            TEST_USER_ID,
            AuthEventAction.LOGOUT,
        )

    @pytest.mark.asyncio
    async def test_logout_without_token_is_a_noop(self):
        """Test that logout never fails when no cookie is present."""
        assert await self.service.logout(None) is False
        self.session_repo.revoke.assert_not_called()

    @pytest.mark.asyncio
    async def test_logout_with_invalid_token_is_a_noop(self):
        """Test that logout swallows an unusable token."""
        # Arrange
        self.jwt_service.verify_refresh_token.side_effect = InvalidTokenError()

        # Act & Assert
        assert await self.service.logout("garbage") is False
        self.session_repo.revoke.assert_not_called()

    @pytest.mark.asyncio
    async def test_logout_all_returns_revoked_count(self):
        """Test that logout_all revokes every session of the user."""
        # Arrange
        self.session_repo.revoke_all.return_value = 3

        # Act
        count = await self.service.logout_all(TEST_USER_ID)

        # Assert
        assert count == 3
        self.session_repo.revoke_all.assert_awaited_once_with(TEST_USER_ID)


class TestAuthenticationServiceMe(_ServiceFixture):
    """Tests for get_me."""

    @pytest.mark.asyncio
    async def test_get_me_returns_user(self):
        user = User.create(TEST_USERNAME, TEST_EMAIL)
        self.user_repo.find_by_id.return_value = user

        assert await self.service.get_me(user.id) == user

    @pytest.mark.asyncio
    async def test_get_me_missing_user_raises(self):
        self.user_repo.find_by_id.return_value = None

        with pytest.raises(UserNotFoundError):
            await self.service.get_me(TEST_USER_ID)


class TestAuthenticationServiceLoginCode(_ServiceFixture):
    """Tests for the emailed one-time login code."""

    @pytest.mark.asyncio
    async def test_send_login_verification_mails_code(self):
        """Test that a code is issued and mailed to the stored address."""
        # Arrange
        user = User.create(TEST_USERNAME, TEST_EMAIL)
        self.user_repo.find_by_identifier.return_value = user
        self.code_service.issue.return_value = "123456"

        # Act
        await self.service.send_login_verification(TEST_USERNAME)

        # Assert
        self.code_service.issue.assert_awaited_once_with(TEST_EMAIL)
        to, subject, text, _html = self.mailer.send_mail.call_args.args
        assert to == TEST_EMAIL
        assert "123456" in text
        assert "10 minutes" in text

    @pytest.mark.asyncio
    async def test_send_login_verification_unknown_user_is_silent(self):
        """Test that unknown identifiers do not raise and send nothing."""
        # Arrange
        self.user_repo.find_by_identifier.return_value = None

        # Act
        await self.service.send_login_verification("nobody@example.com")

        # Assert
        self.code_service.issue.assert_not_called()
        self.mailer.send_mail.assert_not_called()

    @pytest.mark.asyncio
    async def test_verify_login_code_signs_in_and_verifies_email(self):
        """Test that a valid code yields tokens and marks the email verified."""
        # Arrange
        user = User.create(TEST_USERNAME, TEST_EMAIL)
        self.user_repo.find_by_identifier.return_value = user

        # Act
        result = await self.service.verify_login_code(TEST_EMAIL, "123456")

        # Assert
        assert result.user.is_email_verified is True
        assert result.access_token == "access_token"
        self.code_service.consume.assert_awaited_once_with(TEST_EMAIL, "123456")
        self.user_repo.save.assert_awaited_once_with(user)
        self.event_repo.record.assert_awaited_once_with(
            user.id,
            AuthEventAction.LOGIN,
            {"method": "code"},
        )

    @pytest.mark.asyncio
    async def test_verify_login_code_rejected_code_propagates(self):
        """Test that a wrong or expired code issues no tokens."""
        # Arrange
        self.user_repo.find_by_identifier.return_value = User.create(
            TEST_USERNAME,
            TEST_EMAIL,
        )
        self.code_service.consume.side_effect = InvalidOrExpiredCodeError()

        # Act & Assert
        with pytest.raises(InvalidOrExpiredCodeError):
            await self.service.verify_login_code(TEST_EMAIL, "000000")

        self.session_repo.create_session.assert_not_called()

    @pytest.mark.asyncio
    async def test_verify_login_code_unknown_user_raises(self):
        """Test that an unknown identifier is reported like a bad code."""
        # Arrange
        self.user_repo.find_by_identifier.return_value = None

        # Act & Assert
        with pytest.raises(InvalidOrExpiredCodeError):
            await self.service.verify_login_code("nobody@example.com", "123456")

        self.code_service.consume.assert_not_called()
