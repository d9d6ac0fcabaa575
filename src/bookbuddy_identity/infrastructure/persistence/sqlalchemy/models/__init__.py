"""SQLAlchemy models for identity persistence."""

from bookbuddy_identity.infrastructure.persistence.sqlalchemy.models.account_deletion_request_model import (  # noqa: E501
    AccountDeletionRequestModel,
)
from bookbuddy_identity.infrastructure.persistence.sqlalchemy.models.auth_event_model import (  # noqa: E501
    AuthEventModel,
)
from bookbuddy_identity.infrastructure.persistence.sqlalchemy.models.user_model import (
    UserModel,
)

__all__ = [
    "AccountDeletionRequestModel",
    "AuthEventModel",
    "UserModel",
]
