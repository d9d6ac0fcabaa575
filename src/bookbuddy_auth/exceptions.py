"""Authentication exceptions.

These exceptions are raised by the bookbuddy_auth package and should be
caught and handled by the application layer (the identity services) or
mapped to HTTP responses by the presentation layer.
"""

from bookbuddy.domain.shared.exceptions import ErrorCode


class AuthError(Exception):
    """Base exception for all authentication errors."""

    code: ErrorCode = ErrorCode.UNAUTHORIZED

    def __init__(self, message: str = "Authentication error"):
        self.message = message
        super().__init__(self.message)


class InvalidTokenError(AuthError):
    """Raised when a JWT is malformed, tampered with or issued elsewhere."""

    def __init__(self, message: str = "Invalid token"):
        super().__init__(message)


class ExpiredTokenError(AuthError):
    """Raised when a JWT or a single-use token is past its expiry."""

    code = ErrorCode.TOKEN_EXPIRED

    def __init__(self, message: str = "Token expired"):
        super().__init__(message)


class WeakPasswordError(AuthError):
    """Raised when a password doesn't meet strength requirements."""

    code = ErrorCode.WEAK_PASSWORD

    def __init__(self, message: str = "Password does not meet requirements"):
        super().__init__(message)


class InvalidOrUsedTokenError(AuthError):
    """Raised when a single-use token is unknown or already consumed."""

    code = ErrorCode.INVALID_OR_USED_TOKEN

    def __init__(self, message: str = "Invalid or used token"):
        super().__init__(message)


class InvalidOrExpiredCodeError(AuthError):
    """Raised when a one-time code is wrong, used or past its expiry."""

    code = ErrorCode.INVALID_OR_EXPIRED_CODE

    def __init__(self, message: str = "Invalid or expired code"):
        super().__init__(message)


class TokenGenerationError(AuthError):
    """Raised when no unique single-use token could be generated."""

    code = ErrorCode.INTERNAL_ERROR

    def __init__(self, message: str = "Could not generate a unique token"):
        super().__init__(message)
