"""Abstract repository interface for refresh-token sessions.

Each refresh token is tied to exactly one server-side session record via
its ``jti`` claim. A session is active until it is revoked or expires.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime, timedelta
from uuid import UUID


@dataclass(frozen=True)
class RefreshSessionData:
    id: UUID
    user_id: UUID
    jti: str
    expires_at: datetime
    revoked_at: datetime | None
    created_at: datetime

    def is_expired(self, now: datetime) -> bool:
        return now >= self.expires_at

    def is_revoked(self) -> bool:
        return self.revoked_at is not None

    def is_active(self, now: datetime) -> bool:
        return not self.is_revoked() and not self.is_expired(now)


class RefreshSessionRepository(ABC):
    """Session ledger for refresh tokens.

    State transitions are performed with conditional updates so that two
    concurrent requests presenting the same ``jti`` can never both win.
    """

    @abstractmethod
    async def create_session(self, user_id: UUID, ttl: timedelta) -> RefreshSessionData:
        """Create a new active session with a freshly generated ``jti``."""

    @abstractmethod
    async def find_active(self, jti: str) -> RefreshSessionData | None:
        """Return the session if it exists, is not revoked and not expired."""

    @abstractmethod
    async def revoke(self, jti: str) -> bool:
        """Revoke a session.

        Returns
        -------
        True only if this call moved the session from active to revoked.
        False if it was unknown or already revoked.
        """

    @abstractmethod
    async def revoke_all(self, user_id: UUID) -> int:
        """Revoke every non-revoked session of a user. Returns the count."""

    @abstractmethod
    async def purge_expired(self) -> int:
        """Delete sessions whose expiry has passed. Returns the count."""

    @abstractmethod
    async def delete_all_for_user(self, user_id: UUID) -> int:
        pass
