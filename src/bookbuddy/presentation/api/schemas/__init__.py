"""Pydantic schemas for API request/response models."""

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

__all__ = [
    "AccessTokenResponse",
    "DeletionRequest",
    "EmailReminderRequest",
    "LoginRequest",
    "MeResponse",
    "MessageResponse",
    "PasswordResetRequest",
    "RegisterRequest",
    "ResetPasswordRequest",
    "SendLoginVerificationRequest",
    "UserResponse",
    "VerifyLoginCodeRequest",
]
