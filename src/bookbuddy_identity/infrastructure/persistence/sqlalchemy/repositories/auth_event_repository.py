"""SQLAlchemy implementation of AuthEventRepository."""

from typing import Any
from uuid import UUID, uuid4

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from bookbuddy.domain.shared.time import ensure_tz_aware, utc_now
from bookbuddy_identity.infrastructure.persistence.sqlalchemy.models import (
    AuthEventModel,
)
from bookbuddy_identity.repositories import (
    AuthEventAction,
    AuthEventData,
    AuthEventRepository,
)


class AuthEventRepositorySQLAlchemy(AuthEventRepository):
    def __init__(self, session: AsyncSession):
        self._session = session

    async def record(
        self,
        user_id: UUID,
        action: AuthEventAction,
        metadata: dict[str, Any] | None = None,
    ) -> AuthEventData:
        model = AuthEventModel(
            id=uuid4(),
            user_id=user_id,
            action=action.value,
            event_metadata=dict(metadata or {}),
            created_at=utc_now(),
        )
        self._session.add(model)
        await self._session.flush()
        return self._to_data(model)

    async def list_for_user(self, user_id: UUID, limit: int = 50) -> list[AuthEventData]:
        stmt = (
            select(AuthEventModel)
            .where(AuthEventModel.user_id == user_id)
            .order_by(AuthEventModel.created_at.desc())
            .limit(limit)
        )
        result = await self._session.execute(stmt)
        return [self._to_data(model) for model in result.scalars().all()]

    async def delete_all_for_user(self, user_id: UUID) -> int:
        stmt = delete(AuthEventModel).where(AuthEventModel.user_id == user_id)
        result = await self._session.execute(stmt)
        await self._session.flush()
        return result.rowcount  # type: ignore[attr-defined]

    def _to_data(self, model: AuthEventModel) -> AuthEventData:
        return AuthEventData(
            id=model.id,
            user_id=model.user_id,
            action=AuthEventAction(model.action),
            created_at=ensure_tz_aware(model.created_at),
            metadata=dict(model.event_metadata or {}),
        )
