"""SQLAlchemy persistence layer for bookbuddy_identity.

Provides:
- IdentityBase: Declarative base for identity models
- Models: UserModel, AuthEventModel, AccountDeletionRequestModel
- Repository implementations for each of them
"""

from bookbuddy_identity.infrastructure.persistence.sqlalchemy.base import IdentityBase
from bookbuddy_identity.infrastructure.persistence.sqlalchemy.models import (
    AccountDeletionRequestModel,
    AuthEventModel,
    UserModel,
)
from bookbuddy_identity.infrastructure.persistence.sqlalchemy.repositories import (
    AccountDeletionRequestRepositorySQLAlchemy,
    AuthEventRepositorySQLAlchemy,
    UserRepositorySQLAlchemy,
)

__all__ = [
    "AccountDeletionRequestModel",
    "AccountDeletionRequestRepositorySQLAlchemy",
    "AuthEventModel",
    "AuthEventRepositorySQLAlchemy",
    "IdentityBase",
    "UserModel",
    "UserRepositorySQLAlchemy",
]
