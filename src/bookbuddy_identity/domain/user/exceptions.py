"""User domain exceptions.

Custom exceptions for the user domain, used for validation
and business rule violations.
"""

from bookbuddy.domain.shared.exceptions import (
    ConflictError,
    EntityNotFoundError,
    ErrorCode,
    ValidationError,
)


class InvalidEmailError(ValidationError):
    """Raised when email format is invalid."""

    def __init__(self, message: str) -> None:
        super().__init__(message)


class InvalidUsernameError(ValidationError):
    """Raised when a username is too short, too long or has bad characters."""

    def __init__(self, message: str) -> None:
        super().__init__(message)


class EmailAlreadyExistsError(ConflictError):
    """Email already registered."""

    def __init__(self, email: str) -> None:
        self.email = email
        super().__init__(
            "Email already registered",
            code=ErrorCode.EMAIL_ALREADY_REGISTERED,
            details={"email": email},
        )


class UsernameAlreadyExistsError(ConflictError):
    """Username already taken."""

    def __init__(self, username: str) -> None:
        self.username = username
        super().__init__(
            "Username already taken",
            code=ErrorCode.USERNAME_ALREADY_TAKEN,
            details={"username": username},
        )


class UserNotFoundError(EntityNotFoundError):
    """User not found."""

    def __init__(self, user_id: str) -> None:
        self.user_id = user_id
        super().__init__(
            "User not found",
            code=ErrorCode.USER_NOT_FOUND,
            details={"user_id": user_id},
        )


class DeletionRequestPendingError(ConflictError):
    """An account deletion request for this user is already pending."""

    def __init__(self, user_id: str) -> None:
        self.user_id = user_id
        super().__init__(
            "Deletion request already pending",
            code=ErrorCode.DELETION_ALREADY_PENDING,
            details={"user_id": user_id},
        )
