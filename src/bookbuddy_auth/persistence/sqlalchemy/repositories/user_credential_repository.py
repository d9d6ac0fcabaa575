"""SQLAlchemy implementation of UserCredentialRepository."""

import logging
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from bookbuddy.domain.shared.time import ensure_tz_aware, utc_now
from bookbuddy_auth.persistence.sqlalchemy.models import UserCredentialModel
from bookbuddy_auth.repositories import UserCredentialData, UserCredentialRepository

logger = logging.getLogger(__name__)


class UserCredentialRepositorySQLAlchemy(UserCredentialRepository):
    def __init__(self, session: AsyncSession):
        """Initialize repository with database session.

        Parameters
        ----------
        session
            SQLAlchemy async session
        """
        self._session = session

    def _to_data(self, model: UserCredentialModel) -> UserCredentialData:
        return UserCredentialData(
            user_id=UUID(model.user_id),
            password_hash=model.password_hash,
            last_login_at=(
                ensure_tz_aware(model.last_login_at) if model.last_login_at else None
            ),
        )

    async def _find_model_by_user_id(self, user_id: UUID) -> UserCredentialModel | None:
        stmt = select(UserCredentialModel).where(
            UserCredentialModel.user_id == str(user_id),
        )
        result = await self._session.execute(stmt)
        return result.scalar_one_or_none()

    async def save(
        self,
        user_id: UUID,
        password_hash: str,
    ) -> UserCredentialData:
        existing = await self._find_model_by_user_id(user_id)

        if existing:
            existing.password_hash = password_hash
            existing.updated_at = utc_now()
            await self._session.flush()
            logger.debug("Updated credentials for user: %s", user_id)
            return self._to_data(existing)

        model = UserCredentialModel(
            user_id=str(user_id),
            password_hash=password_hash,
        )
        self._session.add(model)
        await self._session.flush()
        logger.info("Created credentials for user: %s", user_id)
        return self._to_data(model)

    async def find_by_user_id(self, user_id: UUID) -> UserCredentialData | None:
        model = await self._find_model_by_user_id(user_id)
        return self._to_data(model) if model else None

    async def update_last_login(self, user_id: UUID) -> None:
        credential = await self._find_model_by_user_id(user_id)
        if credential:
            now = utc_now()
            credential.last_login_at = now
            credential.updated_at = now
            await self._session.flush()

    async def delete(self, user_id: UUID) -> bool:
        credential = await self._find_model_by_user_id(user_id)
        if credential:
            await self._session.delete(credential)
            await self._session.flush()
            logger.info("Deleted credentials for user: %s", user_id)
            return True
        return False
