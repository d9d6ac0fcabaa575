from datetime import datetime
from uuid import UUID, uuid4

from sqlalchemy import DateTime, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from bookbuddy.domain.shared.time import utc_now
from bookbuddy_identity.infrastructure.persistence.sqlalchemy.base import IdentityBase


class AccountDeletionRequestModel(IdentityBase):
    """Record of a deletion request.

    ``user_id`` has no foreign key: the record is kept after the user row
    has been deleted.
    """

    __tablename__ = "account_deletion_requests"

    id: Mapped[UUID] = mapped_column(Uuid, primary_key=True, default=uuid4)
    user_id: Mapped[UUID] = mapped_column(Uuid, nullable=False, index=True)
    email: Mapped[str] = mapped_column(String(255), nullable=False)
    reason: Mapped[str] = mapped_column(Text, nullable=False)
    status: Mapped[str] = mapped_column(String(20), default="pending", nullable=False)
    requested_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utc_now,
        nullable=False,
    )
    processed_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
    )

    def __repr__(self) -> str:
        return (
            f"<AccountDeletionRequestModel(user_id={self.user_id}, "
            f"status={self.status})>"
        )
