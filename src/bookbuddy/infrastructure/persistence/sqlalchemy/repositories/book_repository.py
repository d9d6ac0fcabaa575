"""SQLAlchemy implementation of BookRepository."""

import logging
from uuid import UUID

from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from bookbuddy.domain.books import BookRepository
from bookbuddy.infrastructure.persistence.sqlalchemy.models.book_model import BookModel

logger = logging.getLogger(__name__)


class BookRepositorySQLAlchemy(BookRepository):
    def __init__(self, session: AsyncSession):
        self._session = session

    async def count_for_user(self, user_id: UUID) -> int:
        stmt = (
            select(func.count())
            .select_from(BookModel)
            .where(BookModel.user_id == user_id)
        )
        result = await self._session.execute(stmt)
        return result.scalar_one()

    async def delete_all_for_user(self, user_id: UUID) -> int:
        stmt = delete(BookModel).where(BookModel.user_id == user_id)
        result = await self._session.execute(stmt)
        await self._session.flush()
        count = result.rowcount  # type: ignore[attr-defined]
        logger.debug("Deleted %d books for user %s", count, user_id)
        return count
