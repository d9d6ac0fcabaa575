"""User repository interface."""

from abc import ABC, abstractmethod
from typing import Optional, Union
from uuid import UUID

from bookbuddy_identity.domain.user.aggregates.user import User
from bookbuddy_identity.domain.user.value_objects import Email, Username


class UserRepository(ABC):
    """Repository interface for User aggregates.

    Lookups normalize their input (trim and lower-case) so that callers
    can pass raw user input.
    """

    @abstractmethod
    async def find_by_id(self, user_id: UUID) -> Optional[User]:
        """Find a user by their ID."""

    @abstractmethod
    async def find_by_email(self, email: Union[str, Email]) -> Optional[User]:
        """Find a user by their email address."""

    @abstractmethod
    async def find_by_username(self, username: Union[str, Username]) -> Optional[User]:
        """Find a user by their username."""

    async def find_by_identifier(self, email_or_username: str) -> Optional[User]:
        """Find a user by email if the identifier contains ``@``, else by username."""
        if "@" in (email_or_username or ""):
            return await self.find_by_email(email_or_username)
        return await self.find_by_username(email_or_username)

    @abstractmethod
    async def save(self, user: User) -> None:
        """Save or update a user.

        Raises
        ------
        EmailAlreadyExistsError
            If another user already holds the email
        UsernameAlreadyExistsError
            If another user already holds the username
        """

    @abstractmethod
    async def delete(self, user_id: UUID) -> bool:
        """Delete a user by ID. Returns False if there was nothing to delete."""
