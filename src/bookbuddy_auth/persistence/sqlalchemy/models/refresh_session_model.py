from datetime import datetime
from uuid import uuid4

from sqlalchemy import DateTime, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from bookbuddy.domain.shared.time import utc_now
from bookbuddy_auth.persistence.sqlalchemy.base import AuthBase


class RefreshSessionModel(AuthBase):
    """One row per issued refresh token, looked up by ``jti``.

    ``revoked_at`` is NULL while the session is active.
    """

    __tablename__ = "refresh_sessions"

    id: Mapped[str] = mapped_column(
        Uuid(as_uuid=False),
        primary_key=True,
        default=lambda: str(uuid4()),
    )
    user_id: Mapped[str] = mapped_column(
        String(36),
        nullable=False,
        index=True,
    )
    jti: Mapped[str] = mapped_column(
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
    revoked_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utc_now,
    )

    def __repr__(self) -> str:
        return f"<RefreshSessionModel(jti={self.jti}, user_id={self.user_id})>"
