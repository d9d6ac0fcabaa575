"""Authentication schemas for request/response models.

Field names are camelCase on the wire (``emailOrUsername``, ``accessToken``)
to match the web client; Python code uses the snake_case attribute names.
"""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, EmailStr, Field
from pydantic.alias_generators import to_camel

from bookbuddy_identity import User


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class RegisterRequest(CamelModel):
    """Request schema for user registration.

    Username format and password strength are checked by the service so that
    they produce the domain error codes rather than a generic 422.
    """

    username: str = Field(..., max_length=64)
    email: EmailStr = Field(..., description="User's email address")
    password: str = Field(..., max_length=256)

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "username": "reader_42",
                "email": "reader@example.com",
                "password": "securepassword123",
            },
        },
    )


class LoginRequest(CamelModel):
    """Request schema for password login."""

    email_or_username: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "emailOrUsername": "reader@example.com",
                "password": "securepassword123",
            },
        },
    )


class PasswordResetRequest(CamelModel):
    """Request schema for requesting a password reset email."""

    email: EmailStr


class ResetPasswordRequest(CamelModel):
    """Request schema for resetting a password with a token."""

    token: str = Field(..., min_length=1)
    password: str = Field(..., max_length=256)


class EmailReminderRequest(CamelModel):
    username: str = Field(..., min_length=1)


class DeletionRequest(CamelModel):
    reason: str = Field(..., min_length=1)


class SendLoginVerificationRequest(CamelModel):
    """Request schema for emailing a one-time login code.

    ``email`` accepts either an email address or a username.
    """

    email: str = Field(..., min_length=1)


class VerifyLoginCodeRequest(CamelModel):
    email: str = Field(..., min_length=1)
    code: str = Field(..., min_length=6, max_length=6)


class AccessTokenResponse(CamelModel):
    """Response schema for token-issuing calls.

    The refresh token is never in the body; it travels in an HttpOnly cookie.
    """

    access_token: str

    model_config = ConfigDict(
        json_schema_extra={
            "example": {"accessToken": "eyJhbGciOiJIUzI1NiIsInR5cCI6IkpXVCJ9..."},
        },
    )


class MessageResponse(BaseModel):
    message: str


class UserResponse(CamelModel):
    """Response schema for user data."""

    id: UUID
    username: str
    email: str
    is_email_verified: bool
    created_at: datetime

    @classmethod
    def from_user(cls, user: User) -> "UserResponse":
        return cls(
            id=user.id,
            username=user.username,
            email=user.email,
            is_email_verified=user.is_email_verified,
            created_at=user.created_at,
        )


class MeResponse(BaseModel):
    user: UserResponse
