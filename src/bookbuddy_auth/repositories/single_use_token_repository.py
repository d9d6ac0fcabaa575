from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from uuid import UUID


class TokenPurpose(str, Enum):
    """What a single-use token may be redeemed for."""

    EMAIL_VERIFICATION = "email_verification"
    PASSWORD_RESET = "password_reset"


@dataclass(frozen=True)
class SingleUseTokenData:
    id: UUID
    purpose: TokenPurpose
    user_id: UUID
    token_hash: str
    expires_at: datetime
    used_at: datetime | None
    created_at: datetime

    def is_expired(self, now: datetime) -> bool:
        return now >= self.expires_at

    def is_used(self) -> bool:
        return self.used_at is not None


class SingleUseTokenRepository(ABC):
    @abstractmethod
    async def create(
        self,
        purpose: TokenPurpose,
        user_id: UUID,
        token_hash: str,
        expires_at: datetime,
    ) -> UUID:
        pass

    @abstractmethod
    async def find_by_hash(
        self,
        purpose: TokenPurpose,
        token_hash: str,
    ) -> SingleUseTokenData | None:
        """Find a token by hash regardless of its used/expired state."""

    @abstractmethod
    async def exists_hash(self, token_hash: str) -> bool:
        pass

    @abstractmethod
    async def mark_used(self, token_id: UUID) -> bool:
        """Mark a token used if it is still unused.

        Returns
        -------
        True if this call consumed the token, False if it was already used.
        """

    @abstractmethod
    async def delete_unused_for_user(self, purpose: TokenPurpose, user_id: UUID) -> int:
        pass

    @abstractmethod
    async def purge_expired(self) -> int:
        pass

    @abstractmethod
    async def delete_all_for_user(self, user_id: UUID) -> int:
        pass
