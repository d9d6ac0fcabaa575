"""SQLAlchemy repository implementations for identity persistence."""

from bookbuddy_identity.infrastructure.persistence.sqlalchemy.repositories.account_deletion_request_repository import (  # noqa: E501
    AccountDeletionRequestRepositorySQLAlchemy,
)
from bookbuddy_identity.infrastructure.persistence.sqlalchemy.repositories.auth_event_repository import (  # noqa: E501
    AuthEventRepositorySQLAlchemy,
)
from bookbuddy_identity.infrastructure.persistence.sqlalchemy.repositories.user_repository import (  # noqa: E501
    UserRepositorySQLAlchemy,
)

__all__ = [
    "AccountDeletionRequestRepositorySQLAlchemy",
    "AuthEventRepositorySQLAlchemy",
    "UserRepositorySQLAlchemy",
]
