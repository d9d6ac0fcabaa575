from bookbuddy.infrastructure.persistence.sqlalchemy.repositories.book_repository import (  # noqa: E501
    BookRepositorySQLAlchemy,
)

__all__ = ["BookRepositorySQLAlchemy"]
