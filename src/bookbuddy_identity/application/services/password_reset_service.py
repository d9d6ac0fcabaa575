from __future__ import annotations

import logging
from datetime import timedelta
from typing import TYPE_CHECKING

from bookbuddy_auth import PasswordHashingService, SingleUseTokenService, TokenPurpose
from bookbuddy_auth.repositories import (
    RefreshSessionRepository,
    UserCredentialRepository,
)
from bookbuddy_identity.application.context import RequestContext
from bookbuddy_identity.infrastructure.email import deliver_email, templates
from bookbuddy_identity.repositories import AuthEventAction

if TYPE_CHECKING:
    from bookbuddy_identity.domain.user import UserRepository
    from bookbuddy_identity.infrastructure.audit import AuditLogger
    from bookbuddy_identity.infrastructure.email import Mailer
    from bookbuddy_identity.repositories import AuthEventRepository

logger = logging.getLogger(__name__)


class PasswordResetService:
    """Service for password reset requests, resets and email reminders.

    The request operations answer with the same fixed message whether or
    not the account exists; only the audit log records the difference.
    """

    RESET_REQUESTED_MESSAGE = "If that email exists, a reset link has been sent"
    REMINDER_SENT_MESSAGE = (
        "If that username exists, the associated email has been sent to you"
    )
    DEFAULT_TTL = timedelta(minutes=30)

    def __init__(  # noqa: PLR0913
        self,
        user_repository: UserRepository,
        credential_repository: UserCredentialRepository,
        session_repository: RefreshSessionRepository,
        token_service: SingleUseTokenService,
        password_service: PasswordHashingService,
        auth_event_repository: AuthEventRepository,
        mailer: Mailer,
        audit: AuditLogger,
        frontend_base_url: str,
        ttl: timedelta = DEFAULT_TTL,
    ):
        self._user_repo = user_repository
        self._credential_repo = credential_repository
        self._session_repo = session_repository
        self._token_service = token_service
        self._password_service = password_service
        self._auth_events = auth_event_repository
        self._mailer = mailer
        self._audit = audit
        self._frontend_base_url = frontend_base_url.rstrip("/")
        self._ttl = ttl

    async def request_reset(
        self,
        email: str,
        context: RequestContext | None = None,
    ) -> str:
        user = await self._user_repo.find_by_email(email)
        if not user:
            # Silent success to prevent email enumeration
            self._audit.info("password.reset.requested", context, found=False)
            return self.RESET_REQUESTED_MESSAGE

        raw_token = await self._token_service.issue(
            TokenPurpose.PASSWORD_RESET,
            user.id,
            self._ttl,
        )
        reset_link = f"{self._frontend_base_url}/reset-password?token={raw_token}"
        await deliver_email(self._mailer, user.email, templates.password_reset(reset_link))

        self._audit.info("password.reset.requested", context, user.id, found=True)
        return self.RESET_REQUESTED_MESSAGE

    async def reset_password(
        self,
        token: str,
        new_password: str,
        context: RequestContext | None = None,
    ) -> None:
        """Set a new password using a reset token and sign out everywhere.

        Raises
        ------
        WeakPasswordError
            If the new password fails validation (the token is not consumed)
        InvalidOrUsedTokenError
            If the token is unknown or already used
        ExpiredTokenError
            If the token has expired
        """
        self._password_service.validate_strength(new_password)

        user_id = await self._token_service.consume(TokenPurpose.PASSWORD_RESET, token)

        new_hash = await self._password_service.hash_async(new_password)
        await self._credential_repo.save(user_id=user_id, password_hash=new_hash)

        # A stolen session must not survive a password reset
        revoked = await self._session_repo.revoke_all(user_id)
        await self._token_service.discard_unused(TokenPurpose.PASSWORD_RESET, user_id)
        await self._auth_events.record(user_id, AuthEventAction.PASSWORD_RESET)

        self._audit.info("password.reset.success", context, user_id, revoked=revoked)
        logger.info("Password reset completed for user: %s", user_id)

    async def request_email_reminder(
        self,
        username: str,
        context: RequestContext | None = None,
    ) -> str:
        user = await self._user_repo.find_by_username(username)
        if not user:
            self._audit.info("email.reminder.requested", context, found=False)
            return self.REMINDER_SENT_MESSAGE

        await deliver_email(self._mailer, user.email, templates.email_reminder(user.email))

        self._audit.info("email.reminder.requested", context, user.id, found=True)
        return self.REMINDER_SENT_MESSAGE
