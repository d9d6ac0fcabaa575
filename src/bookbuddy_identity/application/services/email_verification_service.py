from __future__ import annotations

import logging
from datetime import timedelta
from typing import TYPE_CHECKING
from uuid import UUID

from bookbuddy_auth import SingleUseTokenService, TokenPurpose
from bookbuddy_identity.application.context import RequestContext
from bookbuddy_identity.domain.user import User, UserNotFoundError
from bookbuddy_identity.exceptions import InvalidOrUsedTokenError
from bookbuddy_identity.infrastructure.email import deliver_email, templates
from bookbuddy_identity.repositories import AuthEventAction

if TYPE_CHECKING:
    from bookbuddy_identity.domain.user import UserRepository
    from bookbuddy_identity.infrastructure.audit import AuditLogger
    from bookbuddy_identity.infrastructure.email import Mailer
    from bookbuddy_identity.repositories import AuthEventRepository

logger = logging.getLogger(__name__)


class EmailVerificationService:
    """Sends email verification links and redeems them."""

    DEFAULT_TTL = timedelta(hours=24)

    def __init__(  # noqa: PLR0913
        self,
        user_repository: UserRepository,
        token_service: SingleUseTokenService,
        auth_event_repository: AuthEventRepository,
        mailer: Mailer,
        audit: AuditLogger,
        api_base_url: str,
        ttl: timedelta = DEFAULT_TTL,
    ):
        self._user_repo = user_repository
        self._token_service = token_service
        self._auth_events = auth_event_repository
        self._mailer = mailer
        self._audit = audit
        self._api_base_url = api_base_url.rstrip("/")
        self._ttl = ttl

    async def request_verification(
        self,
        user_id: UUID,
        context: RequestContext | None = None,
    ) -> bool:
        """Email a verification link to the user.

        Returns
        -------
        False if the email was already verified and nothing was sent
        """
        user = await self._user_repo.find_by_id(user_id)
        if user is None:
            raise UserNotFoundError(str(user_id))

        if user.is_email_verified:
            return False

        token = await self._token_service.issue(
            TokenPurpose.EMAIL_VERIFICATION,
            user.id,
            self._ttl,
        )
        verify_link = f"{self._api_base_url}/api/v1/auth/verify-email?token={token}"
        await deliver_email(
            self._mailer,
            user.email,
            templates.email_verification(verify_link),
        )

        self._audit.info("email.verify.requested", context, user.id)
        return True

    async def verify_email(
        self,
        token: str,
        context: RequestContext | None = None,
    ) -> User:
        """Redeem a verification token and mark the owner's email verified.

        Raises
        ------
        InvalidOrUsedTokenError
            If the token is unknown or already used
        ExpiredTokenError
            If the token has expired
        """
        user_id = await self._token_service.consume(TokenPurpose.EMAIL_VERIFICATION, token)

        user = await self._user_repo.find_by_id(user_id)
        if user is None:
            raise InvalidOrUsedTokenError

        if user.mark_email_verified():
            await self._user_repo.save(user)

        # Other outstanding verification links are now pointless
        await self._token_service.discard_unused(TokenPurpose.EMAIL_VERIFICATION, user.id)
        await self._auth_events.record(user.id, AuthEventAction.EMAIL_VERIFIED)

        self._audit.info("email.verify.success", context, user.id)
        logger.info("Email verified for user %s", user.id)
        return user
