"""SQLAlchemy implementation of SingleUseTokenRepository."""

from datetime import datetime
from uuid import UUID, uuid4

from sqlalchemy import delete, exists, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from bookbuddy.domain.shared.time import ensure_tz_aware, utc_now
from bookbuddy_auth.persistence.sqlalchemy.models import SingleUseTokenModel
from bookbuddy_auth.repositories import (
    SingleUseTokenData,
    SingleUseTokenRepository,
    TokenPurpose,
)


class SingleUseTokenRepositorySQLAlchemy(SingleUseTokenRepository):
    def __init__(self, session: AsyncSession):
        self._session = session

    async def create(
        self,
        purpose: TokenPurpose,
        user_id: UUID,
        token_hash: str,
        expires_at: datetime,
    ) -> UUID:
        token_id = uuid4()
        model = SingleUseTokenModel(
            id=str(token_id),
            purpose=purpose.value,
            user_id=str(user_id),
            token_hash=token_hash,
            expires_at=expires_at,
        )
        self._session.add(model)
        await self._session.flush()
        return token_id

    async def find_by_hash(
        self,
        purpose: TokenPurpose,
        token_hash: str,
    ) -> SingleUseTokenData | None:
        # Bulk UPDATEs bypass the identity map; reload the row from the database
        stmt = select(SingleUseTokenModel).where(
            SingleUseTokenModel.token_hash == token_hash,
            SingleUseTokenModel.purpose == purpose.value,
        ).execution_options(populate_existing=True)
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()

        if model is None:
            return None

        return SingleUseTokenData(
            id=UUID(model.id),
            purpose=TokenPurpose(model.purpose),
            user_id=UUID(model.user_id),
            token_hash=model.token_hash,
            expires_at=ensure_tz_aware(model.expires_at),
            used_at=ensure_tz_aware(model.used_at) if model.used_at else None,
            created_at=ensure_tz_aware(model.created_at),
        )

    async def exists_hash(self, token_hash: str) -> bool:
        stmt = select(exists().where(SingleUseTokenModel.token_hash == token_hash))
        result = await self._session.execute(stmt)
        return bool(result.scalar())

    async def mark_used(self, token_id: UUID) -> bool:
        stmt = (
            update(SingleUseTokenModel)
            .where(
                SingleUseTokenModel.id == str(token_id),
                SingleUseTokenModel.used_at.is_(None),
            )
            .values(used_at=utc_now())
            .execution_options(synchronize_session=False)
        )
        result = await self._session.execute(stmt)
        await self._session.flush()
        return result.rowcount == 1  # type: ignore[attr-defined]

    async def delete_unused_for_user(self, purpose: TokenPurpose, user_id: UUID) -> int:
        stmt = delete(SingleUseTokenModel).where(
            SingleUseTokenModel.purpose == purpose.value,
            SingleUseTokenModel.user_id == str(user_id),
            SingleUseTokenModel.used_at.is_(None),
        )
        result = await self._session.execute(stmt)
        await self._session.flush()
        return result.rowcount  # type: ignore[attr-defined]

    async def purge_expired(self) -> int:
        stmt = delete(SingleUseTokenModel).where(
            SingleUseTokenModel.expires_at <= utc_now(),
        )
        result = await self._session.execute(stmt)
        await self._session.flush()
        return result.rowcount  # type: ignore[attr-defined]

    async def delete_all_for_user(self, user_id: UUID) -> int:
        stmt = delete(SingleUseTokenModel).where(
            SingleUseTokenModel.user_id == str(user_id),
        )
        result = await self._session.execute(stmt)
        await self._session.flush()
        return result.rowcount  # type: ignore[attr-defined]
