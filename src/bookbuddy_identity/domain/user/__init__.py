"""User domain manages user identity only.

This domain handles:
- User aggregate (identity: id, username, email, verification state)
- Username and email normalization and validation
- Uniqueness violations and lookups by identifier
"""

from bookbuddy_identity.domain.user.aggregates import User
from bookbuddy_identity.domain.user.exceptions import (
    DeletionRequestPendingError,
    EmailAlreadyExistsError,
    InvalidEmailError,
    InvalidUsernameError,
    UsernameAlreadyExistsError,
    UserNotFoundError,
)
from bookbuddy_identity.domain.user.repositories import UserRepository
from bookbuddy_identity.domain.user.value_objects import Email, Username

__all__ = [
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
]
