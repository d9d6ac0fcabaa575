from datetime import datetime
from uuid import uuid4

from sqlalchemy import DateTime, Index, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from bookbuddy.domain.shared.time import utc_now
from bookbuddy_auth.persistence.sqlalchemy.base import AuthBase


class SingleUseTokenModel(AuthBase):
    __tablename__ = "single_use_tokens"
    __table_args__ = (
        Index("ix_single_use_tokens_purpose_user", "purpose", "user_id"),
    )

    id: Mapped[str] = mapped_column(
        Uuid(as_uuid=False),
        primary_key=True,
        default=lambda: str(uuid4()),
    )
    purpose: Mapped[str] = mapped_column(
        String(32),
        nullable=False,
    )
    user_id: Mapped[str] = mapped_column(
        String(36),
        nullable=False,
        index=True,
    )
    # SHA-256 hex digest; the plaintext is never stored
    token_hash: Mapped[str] = mapped_column(
        String(64),
        unique=True,
        nullable=False,
        index=True,
    )
    expires_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        index=True,
    )
    used_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utc_now,
    )

    def __repr__(self) -> str:
        return (
            f"<SingleUseTokenModel(id={self.id}, purpose={self.purpose}, "
            f"user_id={self.user_id})>"
        )
