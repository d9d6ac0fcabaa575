"""SQLAlchemy models for the bookbuddy application."""

from bookbuddy.infrastructure.persistence.sqlalchemy.models.base import (
    Base,
    TimestampMixin,
)
from bookbuddy.infrastructure.persistence.sqlalchemy.models.book_model import BookModel

__all__ = [
    "Base",
    "BookModel",
    "TimestampMixin",
]
