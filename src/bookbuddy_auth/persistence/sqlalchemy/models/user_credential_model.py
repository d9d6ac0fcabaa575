"""SQLAlchemy model for user authentication credentials.

This model stores password hashes and authentication metadata.
"""

from datetime import datetime
from uuid import uuid4

from sqlalchemy import DateTime, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from bookbuddy.domain.shared.time import utc_now
from bookbuddy_auth.persistence.sqlalchemy.base import AuthBase


class UserCredentialModel(AuthBase):
    """
    SQLAlchemy model for user authentication credentials.

    Password hashes live apart from the user record so that no query for
    a user ever loads the hash by accident. Each user has at most one row.

    Table: user_credentials
    """

    __tablename__ = "user_credentials"

    id: Mapped[str] = mapped_column(
        Uuid(as_uuid=False),
        primary_key=True,
        default=lambda: str(uuid4()),
    )

    # No FK to stay decoupled from the users table
    user_id: Mapped[str] = mapped_column(
        String(36),
        unique=True,
        nullable=False,
        index=True,
    )

    # bcrypt format, ~60 chars
    password_hash: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utc_now,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utc_now,
        onupdate=utc_now,
    )
    last_login_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
    )

    def __repr__(self) -> str:
        return f"<UserCredentialModel(id={self.id}, user_id={self.user_id})>"
