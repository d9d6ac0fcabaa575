"""SQLAlchemy model for a saved book."""

from uuid import UUID, uuid4

from sqlalchemy import Boolean, ForeignKey, String, UniqueConstraint, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from bookbuddy.infrastructure.persistence.sqlalchemy.models.base import (
    Base,
    TimestampMixin,
)


class BookModel(Base, TimestampMixin):
    """A book in a user's library, identified by its Open Library work key."""

    __tablename__ = "books"
    __table_args__ = (UniqueConstraint("key", "user_id", name="uq_books_key_user"),)

    id: Mapped[UUID] = mapped_column(Uuid, primary_key=True, default=uuid4)
    user_id: Mapped[UUID] = mapped_column(
        Uuid,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    key: Mapped[str] = mapped_column(String(100), nullable=False)
    title: Mapped[str] = mapped_column(String(500), nullable=False)
    author: Mapped[str | None] = mapped_column(String(500), nullable=True)
    cover_id: Mapped[str | None] = mapped_column(String(50), nullable=True)
    olid: Mapped[str | None] = mapped_column(String(50), nullable=True)
    is_favorite: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)

    def __repr__(self) -> str:
        return f"<BookModel(key={self.key}, user_id={self.user_id})>"
