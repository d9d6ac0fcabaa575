"""SQLAlchemy model for User aggregate."""

from uuid import UUID

from sqlalchemy import Boolean, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from bookbuddy.infrastructure.persistence.sqlalchemy.models.base import TimestampMixin
from bookbuddy_identity.infrastructure.persistence.sqlalchemy.base import IdentityBase


class UserModel(IdentityBase, TimestampMixin):
    """SQLAlchemy model for persisting User aggregates.

    Contains only identity data. The password hash is stored in the
    user_credentials table owned by bookbuddy_auth.
    """

    __tablename__ = "users"

    id: Mapped[UUID] = mapped_column(Uuid, primary_key=True)
    username: Mapped[str] = mapped_column(
        String(20),
        unique=True,
        nullable=False,
        index=True,
    )
    email: Mapped[str] = mapped_column(
        String(255),
        unique=True,
        nullable=False,
        index=True,
    )
    is_email_verified: Mapped[bool] = mapped_column(
        Boolean,
        default=False,
        nullable=False,
    )

    def __repr__(self) -> str:
        return f"<UserModel(id={self.id}, username={self.username})>"
