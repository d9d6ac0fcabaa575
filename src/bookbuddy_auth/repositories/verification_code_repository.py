from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from uuid import UUID


class CodePurpose(str, Enum):
    LOGIN = "login"


@dataclass(frozen=True)
class VerificationCodeData:
    id: UUID
    email: str
    purpose: CodePurpose
    code_hash: str
    expires_at: datetime
    used: bool
    created_at: datetime
    failed_attempts: int = 0


class VerificationCodeRepository(ABC):
    """Storage for short-lived numeric codes delivered by email."""

    @abstractmethod
    async def create(
        self,
        email: str,
        purpose: CodePurpose,
        code_hash: str,
        expires_at: datetime,
    ) -> VerificationCodeData:
        pass

    @abstractmethod
    async def delete_for(self, email: str, purpose: CodePurpose) -> int:
        """Delete every code for (email, purpose), used or not."""

    @abstractmethod
    async def consume(
        self,
        email: str,
        purpose: CodePurpose,
        code_hash: str,
        now: datetime,
    ) -> bool:
        """Mark a matching unused, unexpired code as used.

        Returns
        -------
        True if exactly this call consumed a code.
        """

    @abstractmethod
    async def record_failed_attempt(
        self,
        email: str,
        purpose: CodePurpose,
        now: datetime,
        max_attempts: int,
    ) -> bool:
        """Count a wrong guess against the live code for (email, purpose).

        The code is marked used once it reaches ``max_attempts`` misses.

        Returns
        -------
        True if this miss burned the code.
        """

    @abstractmethod
    async def record_failed_attempt(
        self,
        email: str,
        purpose: CodePurpose,
        now: datetime,
        max_attempts: int,
    ) -> bool:
        """Count a wrong guess against the live code for (email, purpose).

        The code is marked used once it reaches ``max_attempts`` misses.

        Returns
        -------
        True if this miss burned the code.
        """

    @abstractmethod
    async def purge_expired(self) -> int:
        pass

    @abstractmethod
    async def delete_all_for_email(self, email: str) -> int:
        pass
