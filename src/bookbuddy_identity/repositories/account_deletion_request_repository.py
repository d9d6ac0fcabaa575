"""Repository interface for account deletion requests.

A request record intentionally outlives the user it refers to, so it keeps
the user id and email by value rather than through a foreign key.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from uuid import UUID


class DeletionRequestStatus(str, Enum):
    PENDING = "pending"
    PROCESSED = "processed"
    CANCELLED = "cancelled"


@dataclass(frozen=True)
class AccountDeletionRequestData:
    id: UUID
    user_id: UUID
    email: str
    reason: str
    status: DeletionRequestStatus
    requested_at: datetime
    processed_at: datetime | None

    def is_pending(self) -> bool:
        return self.status == DeletionRequestStatus.PENDING


class AccountDeletionRequestRepository(ABC):
    @abstractmethod
    async def create(
        self,
        user_id: UUID,
        email: str,
        reason: str,
    ) -> AccountDeletionRequestData:
        pass

    @abstractmethod
    async def find_pending_for_user(
        self,
        user_id: UUID,
    ) -> AccountDeletionRequestData | None:
        pass

    @abstractmethod
    async def mark_processed(self, request_id: UUID) -> bool:
        """Move a pending request to processed. Returns False if not pending."""

    @abstractmethod
    async def list_for_user(self, user_id: UUID) -> list[AccountDeletionRequestData]:
        pass
