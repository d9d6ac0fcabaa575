"""Authentication service for registration, login and session management."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING
from uuid import UUID

from bookbuddy_auth import (
    AuthError,
    JWTService,
    PasswordHashingService,
    TokenPair,
    VerificationCodeService,
)
from bookbuddy_auth.repositories import (
    RefreshSessionData,
    RefreshSessionRepository,
    UserCredentialRepository,
)
from bookbuddy_identity.application.context import RequestContext
from bookbuddy_identity.domain.user import (
    Email,
    EmailAlreadyExistsError,
    User,
    Username,
    UsernameAlreadyExistsError,
    UserNotFoundError,
)
from bookbuddy_identity.exceptions import (
    InvalidCredentialsError,
    InvalidOrExpiredCodeError,
    UnauthorizedError,
)
from bookbuddy_identity.infrastructure.email import deliver_email, templates
from bookbuddy_identity.repositories import AuthEventAction

if TYPE_CHECKING:
    from bookbuddy_identity.domain.user import UserRepository
    from bookbuddy_identity.infrastructure.audit import AuditLogger
    from bookbuddy_identity.infrastructure.email import Mailer
    from bookbuddy_identity.repositories import AuthEventRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AuthResult:
    """Outcome of a successful sign-in: the user and a fresh token pair."""

    user: User
    tokens: TokenPair

    @property
    def access_token(self) -> str:
        return self.tokens.access_token

    @property
    def refresh_token(self) -> str:
        return self.tokens.refresh_token


class AuthenticationService:
    """
    Application service for user authentication.

    Orchestrates bookbuddy_auth infrastructure (password hashing, JWT tokens,
    refresh-session ledger, one-time codes) with the User domain to provide:
    - User registration
    - Login with password or emailed one-time code
    - Refresh-token rotation
    - Logout of one session or all sessions

    Every sign-in creates a new refresh session. When ``single_chain`` is
    enabled, login and code verification first revoke all earlier sessions
    of the user, so only one refresh chain is alive at a time.
    """

    def __init__(  # noqa: PLR0913
        self,
        user_repository: UserRepository,
        credential_repository: UserCredentialRepository,
        session_repository: RefreshSessionRepository,
        auth_event_repository: AuthEventRepository,
        password_service: PasswordHashingService,
        jwt_service: JWTService,
        code_service: VerificationCodeService,
        mailer: Mailer,
        audit: AuditLogger,
        single_chain: bool = True,
    ):
        self._user_repo = user_repository
        self._credential_repo = credential_repository
        self._session_repo = session_repository
        self._auth_events = auth_event_repository
        self._password_service = password_service
        self._jwt_service = jwt_service
        self._code_service = code_service
        self._mailer = mailer
        self._audit = audit
        self._single_chain = single_chain

    async def _issue_session(self, user_id: UUID) -> tuple[TokenPair, RefreshSessionData]:
        session = await self._session_repo.create_session(
            user_id,
            self._jwt_service.refresh_token_lifetime,
        )
        tokens = TokenPair(
            access_token=self._jwt_service.create_access_token(user_id),
            refresh_token=self._jwt_service.create_refresh_token(user_id, session.jti),
        )
        return tokens, session

    async def register(
        self,
        username: str,
        email: str,
        password: str,
        context: RequestContext | None = None,
    ) -> AuthResult:
        """Create an account and sign the new user in.

        Raises
        ------
        EmailAlreadyExistsError / UsernameAlreadyExistsError
            If either identifier is already taken (case-insensitively)
        InvalidEmailError / InvalidUsernameError / WeakPasswordError
            If the input does not pass validation
        """
        username_obj = Username(username)
        email_obj = Email(email)
        self._password_service.validate_strength(password)

        if await self._user_repo.find_by_email(email_obj) is not None:
            raise EmailAlreadyExistsError(email_obj.value)
        if await self._user_repo.find_by_username(username_obj) is not None:
            raise UsernameAlreadyExistsError(username_obj.value)

        password_hash = await self._password_service.hash_async(password)
        user = User.create(username=username_obj, email=email_obj)
        await self._user_repo.save(user)
        await self._credential_repo.save(user_id=user.id, password_hash=password_hash)

        tokens, _ = await self._issue_session(user.id)
        await self._auth_events.record(user.id, AuthEventAction.REGISTER)

        self._audit.info("auth.register.success", context, user.id)
        logger.info("User registered: %s", user.username)
        return AuthResult(user=user, tokens=tokens)

    async def login(
        self,
        email_or_username: str,
        password: str,
        context: RequestContext | None = None,
    ) -> AuthResult:
        """Sign in with a password.

        The identifier is treated as an email if it contains ``@``.

        Raises
        ------
        InvalidCredentialsError
            If the user is unknown or the password is wrong (same message)
        """
        user = await self._user_repo.find_by_identifier(email_or_username)
        credential = (
            await self._credential_repo.find_by_user_id(user.id) if user else None
        )

        if (
            user is None
            or credential is None
            or not await self._password_service.verify_async(
                password,
                credential.password_hash,
            )
        ):
            self._audit.warn(
                "auth.login.failed",
                context,
                user.id if user else None,
                identifier=email_or_username,
            )
            raise InvalidCredentialsError

        if self._password_service.needs_rehash(credential.password_hash):
            new_hash = await self._password_service.hash_async(password)
            await self._credential_repo.save(user_id=user.id, password_hash=new_hash)
            logger.info("Rehashed password for user %s", user.id)

        tokens = await self._start_new_chain(user, context)
        await self._credential_repo.update_last_login(user.id)
        await self._auth_events.record(user.id, AuthEventAction.LOGIN)

        self._audit.info("auth.login.success", context, user.id)
        return AuthResult(user=user, tokens=tokens)

    async def _start_new_chain(
        self,
        user: User,
        context: RequestContext | None,
    ) -> TokenPair:
        if self._single_chain:
            revoked = await self._session_repo.revoke_all(user.id)
            if revoked:
                logger.debug(
                    "Revoked %d earlier sessions of %s (request %s)",
                    revoked,
                    user.id,
                    context.request_id if context else None,
                )
        tokens, _ = await self._issue_session(user.id)
        return tokens

    async def refresh(
        self,
        refresh_token: str | None,
        context: RequestContext | None = None,
    ) -> TokenPair:
        """Rotate a refresh token.

        The presented session is revoked and a new one is created. Of two
        concurrent calls presenting the same token only one succeeds.

        Raises
        ------
        UnauthorizedError
            If the token is missing, invalid, expired, or its session is
            unknown or already revoked
        """
        if not refresh_token:
            self._audit.warn("auth.refresh.denied", context, reason="missing")
            raise UnauthorizedError

        try:
            payload = self._jwt_service.verify_refresh_token(refresh_token)
        except AuthError as e:
            self._audit.warn("auth.refresh.denied", context, reason="invalid")
            raise UnauthorizedError from e

        jti = payload.jti or ""
        session = await self._session_repo.find_active(jti)
        if (
            session is None
            or session.user_id != payload.user_id
            or not await self._session_repo.revoke(jti)
        ):
            # Presenting a rotated-away or revoked token may indicate replay
            self._audit.warn(
                "auth.refresh.denied",
                context,
                payload.user_id,
                reason="revoked_or_unknown",
            )
            self._audit.error(
                "auth.refresh.error",
                context,
                payload.user_id,
                jti=jti,
            )
            raise UnauthorizedError

        tokens, new_session = await self._issue_session(payload.user_id)
        await self._auth_events.record(payload.user_id, AuthEventAction.REFRESH_TOKEN)

        self._audit.info(
            "auth.refresh.rotate",
            context,
            payload.user_id,
            old_jti=jti,
            new_jti=new_session.jti,
        )
        return tokens

    async def logout(
        self,
        refresh_token: str | None,
        context: RequestContext | None = None,
    ) -> bool:
        """Revoke the session behind a refresh token, if there is one.

        Never fails: a missing or unusable token simply yields ``False``.

        Returns
        -------
        True if a session was revoked by this call
        """
        if not refresh_token:
            return False

        try:
            payload = self._jwt_service.verify_refresh_token(refresh_token)
        except AuthError:
            logger.debug("Logout with unusable refresh token")
            return False

        revoked = await self._session_repo.revoke(payload.jti or "")
        if revoked:
            await self._auth_events.record(payload.user_id, AuthEventAction.LOGOUT)
        self._audit.info("auth.logout", context, payload.user_id, revoked=revoked)
        return revoked

    async def logout_all(
        self,
        user_id: UUID,
        context: RequestContext | None = None,
    ) -> int:
        """Revoke every active session of a user. Returns the count."""
        count = await self._session_repo.revoke_all(user_id)
        await self._auth_events.record(
            user_id,
            AuthEventAction.LOGOUT,
            {"all_sessions": True, "revoked": count},
        )
        self._audit.info("auth.logout_all", context, user_id, revoked=count)
        return count

    async def get_me(self, user_id: UUID) -> User:
        user = await self._user_repo.find_by_id(user_id)
        if user is None:
            raise UserNotFoundError(str(user_id))
        return user

    async def send_login_verification(
        self,
        email_or_username: str,
        context: RequestContext | None = None,
    ) -> None:
        """Email a one-time login code.

        Unknown identifiers are accepted silently so that the response does
        not reveal whether an account exists.
        """
        user = await self._user_repo.find_by_identifier(email_or_username)
        if user is None:
            logger.debug("Login code requested for unknown identifier")
            self._audit.info(
                "auth.verify.code_sent",
                context,
                found=False,
            )
            return

        code = await self._code_service.issue(user.email)
        minutes = int(self._code_service.ttl.total_seconds() // 60)
        await deliver_email(self._mailer, user.email, templates.login_code(code, minutes))

        self._audit.info("auth.verify.code_sent", context, user.id, found=True)

    async def verify_login_code(
        self,
        email_or_username: str,
        code: str,
        context: RequestContext | None = None,
    ) -> AuthResult:
        """Sign in with an emailed one-time code.

        A successful verification also marks the email verified.

        Raises
        ------
        InvalidOrExpiredCodeError
            If the identifier is unknown or the code is wrong, used or expired
        """
        user = await self._user_repo.find_by_identifier(email_or_username)
        if user is None:
            raise InvalidOrExpiredCodeError

        await self._code_service.consume(user.email, code)

        if user.mark_email_verified():
            await self._user_repo.save(user)

        tokens = await self._start_new_chain(user, context)
        await self._credential_repo.update_last_login(user.id)
        await self._auth_events.record(
            user.id,
            AuthEventAction.LOGIN,
            {"method": "code"},
        )

        self._audit.info("auth.verify.success", context, user.id)
        return AuthResult(user=user, tokens=tokens)
