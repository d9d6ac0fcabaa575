"""FastAPI dependency injection for the BookBuddy API.

Provides dependencies for:
- Database sessions
- Authentication (current user id from the access token)
- Request context for audit records
- Service instances wired from settings
"""

import logging
from datetime import timedelta
from functools import lru_cache
from typing import Annotated, AsyncGenerator
from uuid import UUID, uuid4

from fastapi import Depends, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from bookbuddy.domain.shared.exceptions import ErrorCode
from bookbuddy.infrastructure.persistence.sqlalchemy.repositories import (
    BookRepositorySQLAlchemy,
)
from bookbuddy.presentation.api.config import get_api_settings
from bookbuddy.presentation.api.exception_handlers import CodedHTTPException
from bookbuddy_auth import (
    AuthError,
    ExpiredTokenError,
    JWTService,
    PasswordHashingService,
    SingleUseTokenService,
    VerificationCodeService,
)
from bookbuddy_auth.persistence.sqlalchemy import (
    RefreshSessionRepositorySQLAlchemy,
    SingleUseTokenRepositorySQLAlchemy,
    UserCredentialRepositorySQLAlchemy,
    VerificationCodeRepositorySQLAlchemy,
)
from bookbuddy_config.settings import Settings, get_settings
from bookbuddy_identity import (
    AccountDeletionService,
    AuthenticationService,
    EmailVerificationService,
    PasswordResetService,
    RequestContext,
)
from bookbuddy_identity.infrastructure.audit import AuditLogger
from bookbuddy_identity.infrastructure.email import EmailService, Mailer
from bookbuddy_identity.infrastructure.persistence.sqlalchemy import (
    AccountDeletionRequestRepositorySQLAlchemy,
    AuthEventRepositorySQLAlchemy,
    UserRepositorySQLAlchemy,
)

logger = logging.getLogger(__name__)

# Security scheme for JWT Bearer tokens
security = HTTPBearer(auto_error=False)
_BEARER_CHALLENGE = {"WWW-Authenticate": "Bearer"}

SettingsDep = Annotated[Settings, Depends(get_api_settings)]


# -----------------------------------------------------------------------------
# Database Engine & Session (Singleton)
# -----------------------------------------------------------------------------


@lru_cache(maxsize=1)
def get_engine() -> AsyncEngine:
    """
    Get the shared async database engine (singleton).

    The engine manages the connection pool and is reused across all requests.

    Returns
    -------
    AsyncEngine instance
    """
    return create_async_engine(
        get_settings().database_url,
        echo=False,
        pool_pre_ping=True,  # Verify connections before use
    )


@lru_cache(maxsize=1)
def get_session_maker() -> async_sessionmaker[AsyncSession]:
    """
    Get the shared async session maker (singleton).

    Returns
    -------
    async_sessionmaker configured with the shared engine
    """
    return async_sessionmaker(
        get_engine(),
        class_=AsyncSession,
        expire_on_commit=False,
    )


async def get_db_session() -> AsyncGenerator[AsyncSession, None]:
    """
    Database session dependency.

    One session per request. Routers commit on success; anything left
    uncommitted when the request fails is rolled back here.

    Yields
    ------
    AsyncSession for database operations
    """
    async with get_session_maker()() as session:
        try:
            yield session
        except Exception:
            await session.rollback()
            raise


# Type alias for injected session
DBSession = Annotated[AsyncSession, Depends(get_db_session)]


# -----------------------------------------------------------------------------
# Infrastructure Services
# -----------------------------------------------------------------------------


def get_jwt_service(settings: SettingsDep) -> JWTService:
    """Get JWT service configured with API settings."""
    return JWTService(
        access_secret=settings.jwt_access_secret.get_secret_value(),
        refresh_secret=settings.jwt_refresh_secret.get_secret_value(),
        issuer=settings.jwt_issuer,
        audience=settings.jwt_audience,
        access_token_expire_minutes=settings.jwt_access_token_expire_minutes,
        refresh_token_expire_days=settings.jwt_refresh_token_expire_days,
    )


def get_password_service(settings: SettingsDep) -> PasswordHashingService:
    """Get password hashing service."""
    return PasswordHashingService(rounds=settings.bcrypt_rounds)


def get_mailer(settings: SettingsDep) -> Mailer:
    return EmailService(settings)


def get_audit_logger() -> AuditLogger:
    return AuditLogger()


def get_request_context(request: Request) -> RequestContext:
    """Describe the calling request for audit records.

    The request id is the one the request-id middleware assigned and echoes
    back in the ``X-Request-ID`` response header.
    """
    request_id = getattr(request.state, "request_id", None)
    return RequestContext(
        request_id=request_id or str(uuid4()),
        ip_address=request.client.host if request.client else None,
        user_agent=request.headers.get("User-Agent"),
    )


async def require_trusted_origin(request: Request, settings: SettingsDep) -> None:
    """Reject cookie-authenticated calls made from a foreign site.

    Browsers attach ``Origin`` or ``Referer`` to cross-site requests, so a
    request carrying either must come from ``CLIENT_URL``. Requests with
    neither header (non-browser clients) pass.

    Raises
    ------
    CodedHTTPException
        403 ``FORBIDDEN_ORIGIN`` if the origin is not the web client
    """
    client_url = settings.client_url.rstrip("/")
    origin = request.headers.get("Origin")
    referer = request.headers.get("Referer")
    if not origin and not referer:
        return

    if origin and origin.rstrip("/") == client_url:
        return
    if referer and (referer == client_url or referer.startswith(f"{client_url}/")):
        return

    logger.warning(
        "Blocked cross-site request to %s (origin=%s, referer=%s)",
        request.url.path,
        origin,
        referer,
    )
    raise CodedHTTPException(
        status.HTTP_403_FORBIDDEN,
        ErrorCode.FORBIDDEN_ORIGIN,
        "Cross-site request blocked",
    )


JWTServiceDep = Annotated[JWTService, Depends(get_jwt_service)]
PasswordServiceDep = Annotated[PasswordHashingService, Depends(get_password_service)]
MailerDep = Annotated[Mailer, Depends(get_mailer)]
AuditDep = Annotated[AuditLogger, Depends(get_audit_logger)]
RequestCtx = Annotated[RequestContext, Depends(get_request_context)]


# -----------------------------------------------------------------------------
# Application Services
# -----------------------------------------------------------------------------


async def get_authentication_service(  # noqa: PLR0913
    session: DBSession,
    settings: SettingsDep,
    jwt_service: JWTServiceDep,
    password_service: PasswordServiceDep,
    mailer: MailerDep,
    audit: AuditDep,
) -> AuthenticationService:
    """
    Get authentication service with all dependencies.

    This service orchestrates registration, login, refresh rotation,
    logout and one-time login codes.
    """
    code_service = VerificationCodeService(
        VerificationCodeRepositorySQLAlchemy(session),
        secret=settings.login_code_secret.get_secret_value(),
        ttl=timedelta(minutes=settings.login_code_ttl_minutes),
        max_attempts=settings.login_code_max_attempts,
    )
    return AuthenticationService(
        user_repository=UserRepositorySQLAlchemy(session),
        credential_repository=UserCredentialRepositorySQLAlchemy(session),
        session_repository=RefreshSessionRepositorySQLAlchemy(session),
        auth_event_repository=AuthEventRepositorySQLAlchemy(session),
        password_service=password_service,
        jwt_service=jwt_service,
        code_service=code_service,
        mailer=mailer,
        audit=audit,
        single_chain=settings.session_single_chain,
    )


async def get_email_verification_service(
    session: DBSession,
    settings: SettingsDep,
    mailer: MailerDep,
    audit: AuditDep,
) -> EmailVerificationService:
    return EmailVerificationService(
        user_repository=UserRepositorySQLAlchemy(session),
        token_service=SingleUseTokenService(SingleUseTokenRepositorySQLAlchemy(session)),
        auth_event_repository=AuthEventRepositorySQLAlchemy(session),
        mailer=mailer,
        audit=audit,
        api_base_url=settings.api_url,
        ttl=timedelta(hours=settings.email_verify_ttl_hours),
    )


async def get_password_reset_service(  # noqa: PLR0913
    session: DBSession,
    settings: SettingsDep,
    password_service: PasswordServiceDep,
    mailer: MailerDep,
    audit: AuditDep,
) -> PasswordResetService:
    return PasswordResetService(
        user_repository=UserRepositorySQLAlchemy(session),
        credential_repository=UserCredentialRepositorySQLAlchemy(session),
        session_repository=RefreshSessionRepositorySQLAlchemy(session),
        token_service=SingleUseTokenService(SingleUseTokenRepositorySQLAlchemy(session)),
        password_service=password_service,
        auth_event_repository=AuthEventRepositorySQLAlchemy(session),
        mailer=mailer,
        audit=audit,
        frontend_base_url=settings.client_url,
        ttl=timedelta(minutes=settings.password_reset_ttl_minutes),
    )


async def get_account_deletion_service(
    session: DBSession,
    audit: AuditDep,
) -> AccountDeletionService:
    return AccountDeletionService(
        user_repository=UserRepositorySQLAlchemy(session),
        credential_repository=UserCredentialRepositorySQLAlchemy(session),
        session_repository=RefreshSessionRepositorySQLAlchemy(session),
        token_repository=SingleUseTokenRepositorySQLAlchemy(session),
        code_repository=VerificationCodeRepositorySQLAlchemy(session),
        book_repository=BookRepositorySQLAlchemy(session),
        auth_event_repository=AuthEventRepositorySQLAlchemy(session),
        deletion_repository=AccountDeletionRequestRepositorySQLAlchemy(session),
        audit=audit,
    )


# Type aliases for injected services
AuthService = Annotated[AuthenticationService, Depends(get_authentication_service)]
EmailVerificationDep = Annotated[
    EmailVerificationService,
    Depends(get_email_verification_service),
]
PasswordResetDep = Annotated[PasswordResetService, Depends(get_password_reset_service)]
AccountDeletionDep = Annotated[
    AccountDeletionService,
    Depends(get_account_deletion_service),
]


# -----------------------------------------------------------------------------
# Current User (JWT Authentication)
# -----------------------------------------------------------------------------


async def get_current_user_id(
    jwt_service: JWTServiceDep,
    credentials: HTTPAuthorizationCredentials | None = Depends(security),
) -> UUID:
    """
    FastAPI dependency resolving the caller from the access token.

    Only the signature and claims are checked; the user row is not loaded,
    so endpoints decide themselves how to treat a deleted account.

    Parameters
    ----------
    jwt_service
        JWT service for token verification
    credentials
        Bearer token from Authorization header

    Returns
    -------
    The id of the authenticated user

    Raises
    ------
    CodedHTTPException
        401 ``TOKEN_EXPIRED`` if the access token has expired, so the client
        knows to refresh; 401 ``UNAUTHORIZED`` if it is missing, invalid or
        not an access token
    """
    if credentials is None:
        raise CodedHTTPException(
            status.HTTP_401_UNAUTHORIZED,
            ErrorCode.UNAUTHORIZED,
            "Authentication required",
            headers=_BEARER_CHALLENGE,
        )

    try:
        payload = jwt_service.verify_access_token(credentials.credentials)
    except ExpiredTokenError as e:
        raise CodedHTTPException(
            status.HTTP_401_UNAUTHORIZED,
            ErrorCode.TOKEN_EXPIRED,
            "Token expired",
            headers=_BEARER_CHALLENGE,
        ) from e
    except AuthError as e:
        logger.warning("Rejected access token: %s", e.message)
        raise CodedHTTPException(
            status.HTTP_401_UNAUTHORIZED,
            ErrorCode.UNAUTHORIZED,
            "Invalid token",
            headers=_BEARER_CHALLENGE,
        ) from e

    return payload.user_id


# Type alias for the authenticated user id
CurrentUserId = Annotated[UUID, Depends(get_current_user_id)]
