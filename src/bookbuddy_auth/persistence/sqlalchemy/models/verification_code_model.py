from datetime import datetime
from uuid import uuid4

from sqlalchemy import Boolean, DateTime, Index, Integer, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from bookbuddy.domain.shared.time import utc_now
from bookbuddy_auth.persistence.sqlalchemy.base import AuthBase


class VerificationCodeModel(AuthBase):
    __tablename__ = "verification_codes"
    __table_args__ = (
        Index("ix_verification_codes_lookup", "email", "purpose", "code_hash"),
    )

    id: Mapped[str] = mapped_column(
        Uuid(as_uuid=False),
        primary_key=True,
        default=lambda: str(uuid4()),
    )
    email: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        index=True,
    )
    purpose: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
    )
    # HMAC-SHA256 hex digest of the code
    code_hash: Mapped[str] = mapped_column(
        String(64),
        nullable=False,
    )
    expires_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        index=True,
    )
    used: Mapped[bool] = mapped_column(
        Boolean,
        default=False,
        nullable=False,
    )
    failed_attempts: Mapped[int] = mapped_column(
        Integer,
        default=0,
        nullable=False,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utc_now,
    )

    def __repr__(self) -> str:
        return f"<VerificationCodeModel(id={self.id}, email={self.email})>"
