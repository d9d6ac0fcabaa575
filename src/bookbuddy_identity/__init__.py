"""BookBuddy Identity - Users, sign-in flows and account lifecycle.

This module handles all identity-related concerns:
- User management (username, email, verification state)
- Authentication flows (registration, password login, login codes,
  refresh rotation, logout)
- Email verification, password reset and email reminders
- Account deletion with cascade over everything a user owns
- Authentication history and audit events

Token, hashing and one-time-secret primitives come from bookbuddy_auth.
"""

from bookbuddy_identity.application.context import RequestContext
from bookbuddy_identity.application.services import (
    AccountDeletionService,
    AuthenticationService,
    AuthResult,
    EmailVerificationService,
    PasswordResetService,
)
from bookbuddy_identity.domain.user import (
    DeletionRequestPendingError,
    Email,
    EmailAlreadyExistsError,
    InvalidEmailError,
    InvalidUsernameError,
    User,
    Username,
    UsernameAlreadyExistsError,
    UserNotFoundError,
    UserRepository,
)
from bookbuddy_identity.exceptions import (
    InvalidCredentialsError,
    UnauthorizedError,
)
from bookbuddy_identity.repositories import (
    AccountDeletionRequestRepository,
    AuthEventAction,
    AuthEventRepository,
    DeletionRequestStatus,
)

__all__ = [
    # Domain - User
    "DeletionRequestPendingError",
    "Email",
    "EmailAlreadyExistsError",
    "InvalidEmailError",
    "InvalidUsernameError",
    "User",
    "UserNotFoundError",
    "UserRepository",
    "Username",
    "UsernameAlreadyExistsError",
    # Exceptions
    "InvalidCredentialsError",
    "UnauthorizedError",
    # Repositories
    "AccountDeletionRequestRepository",
    "AuthEventAction",
    "AuthEventRepository",
    "DeletionRequestStatus",
    # Application Context
    "RequestContext",
    # Application Services
    "AccountDeletionService",
    "AuthResult",
    "AuthenticationService",
    "EmailVerificationService",
    "PasswordResetService",
]
