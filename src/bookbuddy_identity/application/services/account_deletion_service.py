from __future__ import annotations

import logging
from typing import TYPE_CHECKING
from uuid import UUID

from bookbuddy.domain.shared.exceptions import ValidationError
from bookbuddy_identity.application.context import RequestContext
from bookbuddy_identity.domain.user import DeletionRequestPendingError, UserNotFoundError

if TYPE_CHECKING:
    from bookbuddy.domain.books import BookRepository
    from bookbuddy_auth.repositories import (
        RefreshSessionRepository,
        SingleUseTokenRepository,
        UserCredentialRepository,
        VerificationCodeRepository,
    )
    from bookbuddy_identity.domain.user import UserRepository
    from bookbuddy_identity.infrastructure.audit import AuditLogger
    from bookbuddy_identity.repositories import (
        AccountDeletionRequestRepository,
        AuthEventRepository,
    )

logger = logging.getLogger(__name__)


class AccountDeletionService:
    """Records a deletion request and deletes the account right away.

    Everything the user owns goes: books, refresh sessions, single-use
    tokens, login codes, auth history, credentials and finally the user
    record. The request record itself is kept, marked ``processed``.
    """

    MAX_REASON_LENGTH = 1000

    def __init__(  # noqa: PLR0913
        self,
        user_repository: UserRepository,
        credential_repository: UserCredentialRepository,
        session_repository: RefreshSessionRepository,
        token_repository: SingleUseTokenRepository,
        code_repository: VerificationCodeRepository,
        book_repository: BookRepository,
        auth_event_repository: AuthEventRepository,
        deletion_repository: AccountDeletionRequestRepository,
        audit: AuditLogger,
    ):
        self._user_repo = user_repository
        self._credential_repo = credential_repository
        self._session_repo = session_repository
        self._token_repo = token_repository
        self._code_repo = code_repository
        self._book_repo = book_repository
        self._auth_events = auth_event_repository
        self._deletion_repo = deletion_repository
        self._audit = audit

    async def request_deletion(
        self,
        user_id: UUID,
        reason: str,
        context: RequestContext | None = None,
    ) -> None:
        """Delete the account of ``user_id``.

        Raises
        ------
        ValidationError
            If no reason is given
        UserNotFoundError
            If the user no longer exists
        DeletionRequestPendingError
            If a pending request already exists for the user
        """
        reason = (reason or "").strip()
        if not reason:
            msg = "Reason is required"
            raise ValidationError(msg)
        if len(reason) > self.MAX_REASON_LENGTH:
            msg = f"Reason cannot exceed {self.MAX_REASON_LENGTH} characters"
            raise ValidationError(msg)

        user = await self._user_repo.find_by_id(user_id)
        if user is None:
            raise UserNotFoundError(str(user_id))

        if await self._deletion_repo.find_pending_for_user(user.id) is not None:
            raise DeletionRequestPendingError(str(user.id))

        request = await self._deletion_repo.create(
            user_id=user.id,
            email=user.email,
            reason=reason,
        )

        books = await self._book_repo.delete_all_for_user(user.id)
        sessions = await self._session_repo.delete_all_for_user(user.id)
        tokens = await self._token_repo.delete_all_for_user(user.id)
        codes = await self._code_repo.delete_all_for_email(user.email)
        events = await self._auth_events.delete_all_for_user(user.id)
        await self._credential_repo.delete(user.id)
        await self._deletion_repo.mark_processed(request.id)
        await self._user_repo.delete(user.id)

        self._audit.info(
            "account.delete.processed",
            context,
            user.id,
            books=books,
            sessions=sessions,
            tokens=tokens,
            codes=codes,
            events=events,
        )
        logger.info("Account %s deleted", user.id)
