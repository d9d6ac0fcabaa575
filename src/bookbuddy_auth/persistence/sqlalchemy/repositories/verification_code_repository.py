"""SQLAlchemy implementation of VerificationCodeRepository."""

from datetime import datetime
from uuid import UUID, uuid4

from sqlalchemy import case, delete, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from bookbuddy.domain.shared.time import utc_now
from bookbuddy_auth.persistence.sqlalchemy.models import VerificationCodeModel
from bookbuddy_auth.repositories import (
    CodePurpose,
    VerificationCodeData,
    VerificationCodeRepository,
)


class VerificationCodeRepositorySQLAlchemy(VerificationCodeRepository):
    def __init__(self, session: AsyncSession):
        self._session = session

    async def create(
        self,
        email: str,
        purpose: CodePurpose,
        code_hash: str,
        expires_at: datetime,
    ) -> VerificationCodeData:
        code_id = uuid4()
        created_at = utc_now()
        model = VerificationCodeModel(
            id=str(code_id),
            email=email,
            purpose=purpose.value,
            code_hash=code_hash,
            expires_at=expires_at,
            used=False,
            failed_attempts=0,
            created_at=created_at,
        )
        self._session.add(model)
        await self._session.flush()
        return VerificationCodeData(
            id=code_id,
            email=email,
            purpose=purpose,
            code_hash=code_hash,
            expires_at=expires_at,
            used=False,
            created_at=created_at,
        )

    async def delete_for(self, email: str, purpose: CodePurpose) -> int:
        stmt = delete(VerificationCodeModel).where(
            VerificationCodeModel.email == email,
            VerificationCodeModel.purpose == purpose.value,
        )
        result = await self._session.execute(stmt)
        await self._session.flush()
        return result.rowcount  # type: ignore[attr-defined]

    async def consume(
        self,
        email: str,
        purpose: CodePurpose,
        code_hash: str,
        now: datetime,
    ) -> bool:
        stmt = (
            update(VerificationCodeModel)
            .where(
                VerificationCodeModel.email == email,
                VerificationCodeModel.purpose == purpose.value,
                VerificationCodeModel.code_hash == code_hash,
                VerificationCodeModel.used.is_(False),
                VerificationCodeModel.expires_at > now,
            )
            .values(used=True)
            .execution_options(synchronize_session=False)
        )
        result = await self._session.execute(stmt)
        await self._session.flush()
        return result.rowcount > 0  # type: ignore[attr-defined]

    async def record_failed_attempt(
        self,
        email: str,
        purpose: CodePurpose,
        now: datetime,
        max_attempts: int,
    ) -> bool:
        live = (
            VerificationCodeModel.email == email,
            VerificationCodeModel.purpose == purpose.value,
            VerificationCodeModel.used.is_(False),
            VerificationCodeModel.expires_at > now,
        )
        # SET expressions see the pre-update row, so both columns use the old count
        stmt = (
            update(VerificationCodeModel)
            .where(*live)
            .values(
                failed_attempts=VerificationCodeModel.failed_attempts + 1,
                used=case(
                    (VerificationCodeModel.failed_attempts + 1 >= max_attempts, True),
                    else_=False,
                ),
            )
            .execution_options(synchronize_session=False)
        )
        result = await self._session.execute(stmt)
        await self._session.flush()
        if not result.rowcount:  # type: ignore[attr-defined]
            return False

        burned = await self._session.execute(
            select(VerificationCodeModel.id).where(
                VerificationCodeModel.email == email,
                VerificationCodeModel.purpose == purpose.value,
                VerificationCodeModel.used.is_(True),
                VerificationCodeModel.failed_attempts >= max_attempts,
            ).limit(1)
        )
        return burned.first() is not None

    async def purge_expired(self) -> int:
        stmt = delete(VerificationCodeModel).where(
            VerificationCodeModel.expires_at <= utc_now(),
        )
        result = await self._session.execute(stmt)
        await self._session.flush()
        return result.rowcount  # type: ignore[attr-defined]

    async def delete_all_for_email(self, email: str) -> int:
        stmt = delete(VerificationCodeModel).where(
            VerificationCodeModel.email == email,
        )
        result = await self._session.execute(stmt)
        await self._session.flush()
        return result.rowcount  # type: ignore[attr-defined]
