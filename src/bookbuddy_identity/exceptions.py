"""Identity and authentication exceptions.

These exceptions are raised by the bookbuddy_identity application services
and are mapped to HTTP responses by the presentation layer. Token and
one-time-secret failures come from bookbuddy_auth and are re-exported here.
"""

from bookbuddy.domain.shared.exceptions import ErrorCode
from bookbuddy_auth.exceptions import (
    AuthError,
    ExpiredTokenError,
    InvalidOrExpiredCodeError,
    InvalidOrUsedTokenError,
    InvalidTokenError,
    TokenGenerationError,
    WeakPasswordError,
)


class InvalidCredentialsError(AuthError):
    """Raised when the identifier or password is incorrect during login.

    The message is identical for both cases so that responses do not reveal
    whether an account exists.
    """

    code = ErrorCode.INVALID_CREDENTIALS

    def __init__(self, message: str = "Invalid credentials"):
        super().__init__(message)


class UnauthorizedError(AuthError):
    """Raised when a request lacks a usable access or refresh token."""

    def __init__(self, message: str = "Not authenticated"):
        super().__init__(message)


__all__ = [
    "AuthError",
    "ExpiredTokenError",
    "InvalidCredentialsError",
    "InvalidOrExpiredCodeError",
    "InvalidOrUsedTokenError",
    "InvalidTokenError",
    "TokenGenerationError",
    "UnauthorizedError",
    "WeakPasswordError",
]
