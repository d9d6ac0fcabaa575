"""SQLAlchemy implementation of AccountDeletionRequestRepository."""

from uuid import UUID, uuid4

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from bookbuddy.domain.shared.time import ensure_tz_aware, utc_now
from bookbuddy_identity.infrastructure.persistence.sqlalchemy.models import (
    AccountDeletionRequestModel,
)
from bookbuddy_identity.repositories import (
    AccountDeletionRequestData,
    AccountDeletionRequestRepository,
    DeletionRequestStatus,
)


class AccountDeletionRequestRepositorySQLAlchemy(AccountDeletionRequestRepository):
    def __init__(self, session: AsyncSession):
        self._session = session

    async def create(
        self,
        user_id: UUID,
        email: str,
        reason: str,
    ) -> AccountDeletionRequestData:
        model = AccountDeletionRequestModel(
            id=uuid4(),
            user_id=user_id,
            email=email,
            reason=reason,
            status=DeletionRequestStatus.PENDING.value,
            requested_at=utc_now(),
        )
        self._session.add(model)
        await self._session.flush()
        return self._to_data(model)

    async def find_pending_for_user(
        self,
        user_id: UUID,
    ) -> AccountDeletionRequestData | None:
        stmt = select(AccountDeletionRequestModel).where(
            AccountDeletionRequestModel.user_id == user_id,
            AccountDeletionRequestModel.status == DeletionRequestStatus.PENDING.value,
        ).execution_options(populate_existing=True)
        result = await self._session.execute(stmt)
        model = result.scalars().first()
        return self._to_data(model) if model else None

    async def mark_processed(self, request_id: UUID) -> bool:
        stmt = (
            update(AccountDeletionRequestModel)
            .where(
                AccountDeletionRequestModel.id == request_id,
                AccountDeletionRequestModel.status
                == DeletionRequestStatus.PENDING.value,
            )
            .values(
                status=DeletionRequestStatus.PROCESSED.value,
                processed_at=utc_now(),
            )
            .execution_options(synchronize_session=False)
        )
        result = await self._session.execute(stmt)
        await self._session.flush()
        return result.rowcount == 1  # type: ignore[attr-defined]

    async def list_for_user(self, user_id: UUID) -> list[AccountDeletionRequestData]:
        stmt = (
            select(AccountDeletionRequestModel)
            .where(AccountDeletionRequestModel.user_id == user_id)
            .order_by(AccountDeletionRequestModel.requested_at)
            .execution_options(populate_existing=True)
        )
        result = await self._session.execute(stmt)
        return [self._to_data(model) for model in result.scalars().all()]

    def _to_data(self, model: AccountDeletionRequestModel) -> AccountDeletionRequestData:
        return AccountDeletionRequestData(
            id=model.id,
            user_id=model.user_id,
            email=model.email,
            reason=model.reason,
            status=DeletionRequestStatus(model.status),
            requested_at=ensure_tz_aware(model.requested_at),
            processed_at=(
                ensure_tz_aware(model.processed_at) if model.processed_at else None
            ),
        )
