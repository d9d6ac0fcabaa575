"""Repository interfaces owned by the identity package."""

from bookbuddy_identity.repositories.account_deletion_request_repository import (
    AccountDeletionRequestData,
    AccountDeletionRequestRepository,
    DeletionRequestStatus,
)
from bookbuddy_identity.repositories.auth_event_repository import (
    AuthEventAction,
    AuthEventData,
    AuthEventRepository,
)

__all__ = [
    "AccountDeletionRequestData",
    "AccountDeletionRequestRepository",
    "AuthEventAction",
    "AuthEventData",
    "AuthEventRepository",
    "DeletionRequestStatus",
]
