"""Tests for PasswordResetService."""

from datetime import timedelta
from unittest.mock import AsyncMock, Mock
from uuid import uuid4

import pytest

from bookbuddy_auth import (
    InvalidOrUsedTokenError,
    PasswordHashingService,
    SingleUseTokenService,
    TokenPurpose,
    WeakPasswordError,
)
from bookbuddy_identity import PasswordResetService
from bookbuddy_identity.domain.user import User
from bookbuddy_identity.infrastructure.audit import AuditLogger
from bookbuddy_identity.repositories import AuthEventAction

TEST_EMAIL = "alice@example.com"
RAW_TOKEN = "cd" * 32


@pytest.fixture
def user_repo():
    return AsyncMock()


@pytest.fixture
def credential_repo():
    return AsyncMock()


@pytest.fixture
def session_repo():
    repo = AsyncMock()
    repo.revoke_all.return_value = 2
    return repo


@pytest.fixture
def token_service():
    service = Mock(spec=SingleUseTokenService)
    service.issue = AsyncMock(return_value=RAW_TOKEN)
    service.consume = AsyncMock()
    service.discard_unused = AsyncMock(return_value=0)
    return service


@pytest.fixture
def password_service():
    service = Mock(spec=PasswordHashingService)
    service.hash_async = AsyncMock(return_value="new_hash")
    return service


@pytest.fixture
def event_repo():
    return AsyncMock()


@pytest.fixture
def mailer():
    return Mock()


@pytest.fixture
def audit():
    return Mock(spec=AuditLogger)


@pytest.fixture
def service(  # noqa: PLR0913
    user_repo,
    credential_repo,
    session_repo,
    token_service,
    password_service,
    event_repo,
    mailer,
    audit,
):
    return PasswordResetService(
        user_repository=user_repo,
        credential_repository=credential_repo,
        session_repository=session_repo,
        token_service=token_service,
        password_service=password_service,
        auth_event_repository=event_repo,
        mailer=mailer,
        audit=audit,
        frontend_base_url="https://app.example.com",
    )


class TestRequestReset:
    @pytest.mark.asyncio
    async def test_existing_user_gets_reset_link(
        self,
        service,
        user_repo,
        token_service,
        mailer,
    ):
        user = User.create("alice", TEST_EMAIL)
        user_repo.find_by_email.return_value = user

        message = await service.request_reset(TEST_EMAIL)

        assert message == PasswordResetService.RESET_REQUESTED_MESSAGE
        token_service.issue.assert_awaited_once_with(
            TokenPurpose.PASSWORD_RESET,
            user.id,
            timedelta(minutes=30),
        )
        to, _subject, text, _html = mailer.send_mail.call_args.args
        assert to == TEST_EMAIL
        assert f"https://app.example.com/reset-password?token={RAW_TOKEN}" in text

    @pytest.mark.asyncio
    async def test_unknown_email_gives_same_message(
        self,
        service,
        user_repo,
        token_service,
        mailer,
        audit,
    ):
        user_repo.find_by_email.return_value = None

        message = await service.request_reset("nobody@example.com")

        assert message == PasswordResetService.RESET_REQUESTED_MESSAGE
        token_service.issue.assert_not_called()
        mailer.send_mail.assert_not_called()
        audit.info.assert_called_once_with(
            "password.reset.requested",
            None,
            found=False,
        )


class TestResetPassword:
    @pytest.mark.asyncio
    async def test_reset_updates_hash_and_revokes_sessions(
        self,
        service,
        token_service,
        credential_repo,
        session_repo,
        event_repo,
    ):
        user_id = uuid4()
        token_service.consume.return_value = user_id

        await service.reset_password(RAW_TOKEN, "NewSecret123!")

        token_service.consume.assert_awaited_once_with(TokenPurpose.PASSWORD_RESET, RAW_TOKEN)
        credential_repo.save.assert_awaited_once_with(user_id=user_id, password_hash="new_hash")
        session_repo.revoke_all.assert_awaited_once_with(user_id)
        token_service.discard_unused.assert_awaited_once_with(
            TokenPurpose.PASSWORD_RESET,
            user_id,
        )
        event_repo.record.assert_awaited_once_with(user_id, AuthEventAction.PASSWORD_RESET)

    @pytest.mark.asyncio
    async def test_weak_password_does_not_consume_token(
        self,
        service,
        password_service,
        token_service,
    ):
        password_service.validate_strength.side_effect = WeakPasswordError("too short")

        with pytest.raises(WeakPasswordError):
            await service.reset_password(RAW_TOKEN, "short")

        token_service.consume.assert_not_called()

    @pytest.mark.asyncio
    async def test_used_token_changes_nothing(
        self,
        service,
        token_service,
        credential_repo,
        session_repo,
    ):
        token_service.consume.side_effect = InvalidOrUsedTokenError()

        with pytest.raises(InvalidOrUsedTokenError):
            await service.reset_password(RAW_TOKEN, "NewSecret123!")

        credential_repo.save.assert_not_called()
        session_repo.revoke_all.assert_not_called()


class TestEmailReminder:
    @pytest.mark.asyncio
    async def test_known_username_gets_email(self, service, user_repo, mailer):
        user_repo.find_by_username.return_value = User.create("alice", TEST_EMAIL)

        message = await service.request_email_reminder("Alice")

        assert message == PasswordResetService.REMINDER_SENT_MESSAGE
        to, _subject, text, _html = mailer.send_mail.call_args.args
        assert to == TEST_EMAIL
        assert TEST_EMAIL in text

    @pytest.mark.asyncio
    async def test_unknown_username_gives_same_message(self, service, user_repo, mailer):
        user_repo.find_by_username.return_value = None

        message = await service.request_email_reminder("nobody")

        assert message == PasswordResetService.REMINDER_SENT_MESSAGE
        mailer.send_mail.assert_not_called()
