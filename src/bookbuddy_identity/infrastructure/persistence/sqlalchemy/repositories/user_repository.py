"""SQLAlchemy implementation of UserRepository."""

import logging
from typing import Union
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from bookbuddy.domain.shared.time import ensure_tz_aware
from bookbuddy_identity.domain.user import (
    Email,
    EmailAlreadyExistsError,
    User,
    Username,
    UsernameAlreadyExistsError,
    UserRepository,
)
from bookbuddy_identity.infrastructure.persistence.sqlalchemy.models import UserModel

logger = logging.getLogger(__name__)


class UserRepositorySQLAlchemy(UserRepository):
    """SQLAlchemy implementation of the UserRepository interface."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def find_by_id(self, user_id: UUID) -> User | None:
        model = await self._find_model_by_id(user_id)
        if model is None:
            return None
        return self._map_to_domain(model)

    async def find_by_email(self, email: Union[str, Email]) -> User | None:
        email_value = email.value if isinstance(email, Email) else Email.normalize(email)

        stmt = select(UserModel).where(UserModel.email == email_value)
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()

        if model is None:
            return None

        return self._map_to_domain(model)

    async def find_by_username(self, username: Union[str, Username]) -> User | None:
        username_value = (
            username.value
            if isinstance(username, Username)
            else Username.normalize(username)
        )

        stmt = select(UserModel).where(UserModel.username == username_value)
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()

        if model is None:
            return None

        return self._map_to_domain(model)

    async def save(self, user: User) -> None:
        existing = await self._find_model_by_id(user.id)

        try:
            if existing:
                self._update_model(existing, user)
                logger.debug("Updated user: %s", user.id)
            else:
                model = self._map_to_model(user)
                self._session.add(model)
                logger.info("Created user: %s (username: %s)", user.id, user.username)

            await self._session.flush()
        except IntegrityError as e:
            # A concurrent registration won the unique index race
            message = str(e.orig).lower()
            if "email" in message:
                raise EmailAlreadyExistsError(user.email) from e
            if "username" in message:
                raise UsernameAlreadyExistsError(user.username) from e
            raise

    async def delete(self, user_id: UUID) -> bool:
        model = await self._find_model_by_id(user_id)

        if model is None:
            return False

        await self._session.delete(model)
        await self._session.flush()
        logger.info("Deleted user: %s", user_id)
        return True

    async def _find_model_by_id(self, user_id: UUID) -> UserModel | None:
        stmt = select(UserModel).where(UserModel.id == user_id)
        result = await self._session.execute(stmt)
        return result.scalar_one_or_none()

    def _map_to_domain(self, model: UserModel) -> User:
        return User.reconstitute(
            id=model.id,
            username=model.username,
            email=model.email,
            is_email_verified=model.is_email_verified,
            created_at=ensure_tz_aware(model.created_at),
            updated_at=ensure_tz_aware(model.updated_at),
        )

    def _map_to_model(self, user: User) -> UserModel:
        return UserModel(
            id=user.id,
            username=user.username,
            email=user.email,
            is_email_verified=user.is_email_verified,
            created_at=user.created_at,
            updated_at=user.updated_at,
        )

    def _update_model(self, model: UserModel, user: User) -> None:
        model.username = user.username
        model.email = user.email
        model.is_email_verified = user.is_email_verified
        model.updated_at = user.updated_at
