"""SQLAlchemy implementation of RefreshSessionRepository."""

import logging
import secrets
from datetime import timedelta
from uuid import UUID, uuid4

from sqlalchemy import delete, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from bookbuddy.domain.shared.time import ensure_tz_aware, utc_now
from bookbuddy_auth.persistence.sqlalchemy.models import RefreshSessionModel
from bookbuddy_auth.repositories import RefreshSessionData, RefreshSessionRepository

logger = logging.getLogger(__name__)


class RefreshSessionRepositorySQLAlchemy(RefreshSessionRepository):
    JTI_BYTES = 32

    def __init__(self, session: AsyncSession):
        self._session = session

    async def create_session(self, user_id: UUID, ttl: timedelta) -> RefreshSessionData:
        now = utc_now()
        model = RefreshSessionModel(
            id=str(uuid4()),
            user_id=str(user_id),
            jti=secrets.token_urlsafe(self.JTI_BYTES),
            expires_at=now + ttl,
            created_at=now,
        )
        self._session.add(model)
        await self._session.flush()
        return self._to_data(model)

    async def find_active(self, jti: str) -> RefreshSessionData | None:
        stmt = select(RefreshSessionModel).where(
            RefreshSessionModel.jti == jti,
            RefreshSessionModel.revoked_at.is_(None),
            RefreshSessionModel.expires_at > utc_now(),
        ).execution_options(populate_existing=True)
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()
        return self._to_data(model) if model else None

    async def revoke(self, jti: str) -> bool:
        # Single conditional UPDATE: of two concurrent callers only one
        # sees rowcount == 1
        stmt = (
            update(RefreshSessionModel)
            .where(
                RefreshSessionModel.jti == jti,
                RefreshSessionModel.revoked_at.is_(None),
            )
            .values(revoked_at=utc_now())
            .execution_options(synchronize_session=False)
        )
        result = await self._session.execute(stmt)
        await self._session.flush()
        return result.rowcount == 1  # type: ignore[attr-defined]

    async def revoke_all(self, user_id: UUID) -> int:
        stmt = (
            update(RefreshSessionModel)
            .where(
                RefreshSessionModel.user_id == str(user_id),
                RefreshSessionModel.revoked_at.is_(None),
            )
            .values(revoked_at=utc_now())
            .execution_options(synchronize_session=False)
        )
        result = await self._session.execute(stmt)
        await self._session.flush()
        count = result.rowcount  # type: ignore[attr-defined]
        if count:
            logger.debug("Revoked %d sessions for user %s", count, user_id)
        return count

    async def purge_expired(self) -> int:
        stmt = delete(RefreshSessionModel).where(
            RefreshSessionModel.expires_at <= utc_now(),
        )
        result = await self._session.execute(stmt)
        await self._session.flush()
        return result.rowcount  # type: ignore[attr-defined]

    async def delete_all_for_user(self, user_id: UUID) -> int:
        stmt = delete(RefreshSessionModel).where(
            RefreshSessionModel.user_id == str(user_id),
        )
        result = await self._session.execute(stmt)
        await self._session.flush()
        return result.rowcount  # type: ignore[attr-defined]

    def _to_data(self, model: RefreshSessionModel) -> RefreshSessionData:
        return RefreshSessionData(
            id=UUID(model.id),
            user_id=UUID(model.user_id),
            jti=model.jti,
            expires_at=ensure_tz_aware(model.expires_at),
            revoked_at=(
                ensure_tz_aware(model.revoked_at) if model.revoked_at else None
            ),
            created_at=ensure_tz_aware(model.created_at),
        )
