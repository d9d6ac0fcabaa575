"""Authentication router for registration, login, sessions and account recovery.

Error responses are produced by the centralized exception handlers; the
handlers here only commit the unit of work and manage the refresh cookie.
"""

import logging
from typing import Annotated

from fastapi import APIRouter, Cookie, Depends, Query, Response, status

from bookbuddy.presentation.api.dependencies import (
    AccountDeletionDep,
    AuthService,
    CurrentUserId,
    DBSession,
    EmailVerificationDep,
    PasswordResetDep,
    RequestCtx,
    SettingsDep,
    require_trusted_origin,
)
from bookbuddy.presentation.api.rate_limit import (
    EMAIL_VERIFICATION_LIMIT,
    LOGIN_LIMIT,
    PASSWORD_RESET_LIMIT,
    REGISTER_LIMIT,
    rate_limited,
)
from bookbuddy.presentation.api.schemas.auth import (
    AccessTokenResponse,
    DeletionRequest,
    EmailReminderRequest,
    LoginRequest,
    MeResponse,
    MessageResponse,
    PasswordResetRequest,
    RegisterRequest,
    ResetPasswordRequest,
    SendLoginVerificationRequest,
    UserResponse,
    VerifyLoginCodeRequest,
)
from bookbuddy_auth import InvalidOrExpiredCodeError
from bookbuddy_config.settings import Settings

logger = logging.getLogger(__name__)

router = APIRouter()

# Cookie name for refresh token
REFRESH_TOKEN_COOKIE = "refreshToken"  # NOQA: S105

RefreshCookie = Annotated[str | None, Cookie(alias=REFRESH_TOKEN_COOKIE)]


def _set_refresh_token_cookie(
    response: Response,
    token: str,
    settings: Settings,
) -> None:
    """Set the refresh token as an HttpOnly cookie.

    This cookie is:
    - HttpOnly: Not accessible to JavaScript
    - Secure: Only sent over HTTPS in production
    - SameSite=strict: Never sent on cross-site requests
    """
    response.set_cookie(
        key=REFRESH_TOKEN_COOKIE,
        value=token,
        httponly=True,
        secure=settings.cookie_secure,
        samesite="strict",
        max_age=settings.refresh_token_max_age_seconds,
        path="/",
    )


def _clear_refresh_token_cookie(response: Response, settings: Settings) -> None:
    response.delete_cookie(
        key=REFRESH_TOKEN_COOKIE,
        path="/",
        secure=settings.cookie_secure,
        httponly=True,
        samesite="strict",
    )


@router.post(
    "/register",
    status_code=status.HTTP_201_CREATED,
    summary="Register a new user",
    dependencies=[Depends(rate_limited(REGISTER_LIMIT))],
    responses={
        201: {"description": "User registered and signed in"},
        400: {"description": "Invalid username, email or weak password"},
        409: {"description": "Email or username already taken"},
    },
)
async def register(
    request: RegisterRequest,
    response: Response,
    auth_service: AuthService,
    session: DBSession,
    settings: SettingsDep,
    context: RequestCtx,
) -> AccessTokenResponse:
    result = await auth_service.register(
        username=request.username,
        email=request.email,
        password=request.password,
        context=context,
    )
    await session.commit()

    _set_refresh_token_cookie(response, result.refresh_token, settings)
    return AccessTokenResponse(access_token=result.access_token)


@router.post(
    "/login",
    summary="Authenticate user",
    dependencies=[Depends(rate_limited(LOGIN_LIMIT))],
    responses={
        200: {"description": "Login successful"},
        401: {"description": "Invalid credentials"},
    },
)
async def login(
    request: LoginRequest,
    response: Response,
    auth_service: AuthService,
    session: DBSession,
    settings: SettingsDep,
    context: RequestCtx,
) -> AccessTokenResponse:
    """
    Authenticate with email or username and password.

    Returns an access token. The refresh token is set as an HttpOnly cookie.
    """
    result = await auth_service.login(
        email_or_username=request.email_or_username,
        password=request.password,
        context=context,
    )
    await session.commit()

    _set_refresh_token_cookie(response, result.refresh_token, settings)
    return AccessTokenResponse(access_token=result.access_token)


@router.post(
    "/refresh-token",
    summary="Rotate the refresh token",
    dependencies=[Depends(require_trusted_origin)],
    responses={
        200: {"description": "Tokens rotated"},
        401: {"description": "Missing, invalid, expired or revoked refresh token"},
        403: {"description": "Request made from a foreign origin"},
    },
)
async def refresh_token(
    response: Response,
    auth_service: AuthService,
    session: DBSession,
    settings: SettingsDep,
    context: RequestCtx,
    refresh_token_cookie: RefreshCookie = None,
) -> AccessTokenResponse:
    """
    Exchange the refresh cookie for a new access token.

    The presented refresh session is revoked and a new refresh token is set
    as the cookie (rotation).
    """
    tokens = await auth_service.refresh(refresh_token_cookie, context)
    await session.commit()

    _set_refresh_token_cookie(response, tokens.refresh_token, settings)
    return AccessTokenResponse(access_token=tokens.access_token)


@router.get(
    "/me",
    summary="Get current user",
    responses={
        200: {"description": "Current user data"},
        401: {"description": "Not authenticated"},
        404: {"description": "User no longer exists"},
    },
)
async def get_me(user_id: CurrentUserId, auth_service: AuthService) -> MeResponse:
    user = await auth_service.get_me(user_id)
    return MeResponse(user=UserResponse.from_user(user))


@router.post("/logout", summary="Logout this session")
async def logout(
    response: Response,
    auth_service: AuthService,
    session: DBSession,
    settings: SettingsDep,
    context: RequestCtx,
    refresh_token_cookie: RefreshCookie = None,
) -> MessageResponse:
    """Revoke the session behind the refresh cookie, if any, and clear it."""
    await auth_service.logout(refresh_token_cookie, context)
    await session.commit()

    _clear_refresh_token_cookie(response, settings)
    return MessageResponse(message="Logged out")


@router.post("/logout-all", summary="Logout every session")
async def logout_all(
    response: Response,
    user_id: CurrentUserId,
    auth_service: AuthService,
    session: DBSession,
    settings: SettingsDep,
    context: RequestCtx,
) -> MessageResponse:
    await auth_service.logout_all(user_id, context)
    await session.commit()

    _clear_refresh_token_cookie(response, settings)
    return MessageResponse(message="Logged out everywhere")


@router.post(
    "/request-email-verification",
    summary="Email a verification link",
    dependencies=[Depends(rate_limited(EMAIL_VERIFICATION_LIMIT))],
)
async def request_email_verification(
    user_id: CurrentUserId,
    verification_service: EmailVerificationDep,
    session: DBSession,
    context: RequestCtx,
) -> MessageResponse:
    sent = await verification_service.request_verification(user_id, context)
    await session.commit()

    if not sent:
        return MessageResponse(message="Email already verified")
    return MessageResponse(message="Verification email sent")


@router.get(
    "/verify-email",
    summary="Redeem an email verification link",
    responses={
        200: {"description": "Email verified"},
        400: {"description": "Invalid, used or expired token"},
    },
)
async def verify_email(
    verification_service: EmailVerificationDep,
    session: DBSession,
    context: RequestCtx,
    token: Annotated[str, Query(min_length=1)],
) -> MessageResponse:
    await verification_service.verify_email(token, context)
    await session.commit()
    return MessageResponse(message="Email verified")


@router.post(
    "/request-password-reset",
    summary="Request password reset",
    dependencies=[Depends(rate_limited(PASSWORD_RESET_LIMIT))],
    responses={
        200: {"description": "If the email exists, a reset link has been sent"},
    },
)
async def request_password_reset(
    request: PasswordResetRequest,
    reset_service: PasswordResetDep,
    session: DBSession,
    context: RequestCtx,
) -> MessageResponse:
    message = await reset_service.request_reset(request.email, context)
    await session.commit()
    return MessageResponse(message=message)


@router.post(
    "/reset-password",
    summary="Reset password with token",
    responses={
        200: {"description": "Password reset; all sessions revoked"},
        400: {"description": "Invalid, used or expired token, or weak password"},
    },
)
async def reset_password(
    request: ResetPasswordRequest,
    reset_service: PasswordResetDep,
    session: DBSession,
    context: RequestCtx,
) -> MessageResponse:
    await reset_service.reset_password(request.token, request.password, context)
    await session.commit()
    return MessageResponse(message="Password updated. Please log in again.")


@router.post(
    "/request-email-reminder",
    summary="Email a username's address",
    dependencies=[Depends(rate_limited(PASSWORD_RESET_LIMIT))],
)
async def request_email_reminder(
    request: EmailReminderRequest,
    reset_service: PasswordResetDep,
    session: DBSession,
    context: RequestCtx,
) -> MessageResponse:
    message = await reset_service.request_email_reminder(request.username, context)
    await session.commit()
    return MessageResponse(message=message)


@router.post(
    "/delete-request",
    summary="Delete the current account",
    responses={
        200: {"description": "Account deleted"},
        404: {"description": "User not found"},
        409: {"description": "Deletion request already pending"},
    },
)
async def request_account_deletion(  # noqa: PLR0913
    request: DeletionRequest,
    response: Response,
    user_id: CurrentUserId,
    deletion_service: AccountDeletionDep,
    session: DBSession,
    settings: SettingsDep,
    context: RequestCtx,
) -> MessageResponse:
    await deletion_service.request_deletion(user_id, request.reason, context)
    await session.commit()

    _clear_refresh_token_cookie(response, settings)
    logger.info("Account %s deleted on request", user_id)
    return MessageResponse(message="Account deletion request submitted successfully")


@router.post(
    "/send-login-verification",
    summary="Email a one-time login code",
    dependencies=[Depends(rate_limited(LOGIN_LIMIT))],
)
async def send_login_verification(
    request: SendLoginVerificationRequest,
    auth_service: AuthService,
    session: DBSession,
    context: RequestCtx,
) -> MessageResponse:
    await auth_service.send_login_verification(request.email, context)
    await session.commit()
    return MessageResponse(message="Verification code sent")


@router.post(
    "/verify-login-code",
    summary="Sign in with a one-time code",
    dependencies=[Depends(rate_limited(LOGIN_LIMIT))],
    responses={
        200: {"description": "Login successful"},
        400: {"description": "Invalid or expired code"},
    },
)
async def verify_login_code(
    request: VerifyLoginCodeRequest,
    response: Response,
    auth_service: AuthService,
    session: DBSession,
    settings: SettingsDep,
    context: RequestCtx,
) -> AccessTokenResponse:
    try:
        result = await auth_service.verify_login_code(
            request.email,
            request.code,
            context,
        )
    except InvalidOrExpiredCodeError:
        # Persist the miss the code store counted before reporting it
        await session.commit()
        raise
    await session.commit()

    _set_refresh_token_cookie(response, result.refresh_token, settings)
    return AccessTokenResponse(access_token=result.access_token)
