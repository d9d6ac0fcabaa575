"""Repository interface for the persisted authentication history."""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any
from uuid import UUID


class AuthEventAction(str, Enum):
    REGISTER = "register"
    LOGIN = "login"
    LOGOUT = "logout"
    PASSWORD_RESET = "password_reset"
    EMAIL_VERIFIED = "email_verified"
    REFRESH_TOKEN = "refresh_token"


@dataclass(frozen=True)
class AuthEventData:
    id: UUID
    user_id: UUID
    action: AuthEventAction
    created_at: datetime
    metadata: dict[str, Any] = field(default_factory=dict)


class AuthEventRepository(ABC):
    @abstractmethod
    async def record(
        self,
        user_id: UUID,
        action: AuthEventAction,
        metadata: dict[str, Any] | None = None,
    ) -> AuthEventData:
        pass

    @abstractmethod
    async def list_for_user(self, user_id: UUID, limit: int = 50) -> list[AuthEventData]:
        """Most recent events first."""

    @abstractmethod
    async def delete_all_for_user(self, user_id: UUID) -> int:
        pass
