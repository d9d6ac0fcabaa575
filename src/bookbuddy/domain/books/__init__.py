"""Books owned by a user.

Only the operations account deletion needs are modelled here; managing
the library itself is handled elsewhere.
"""

from bookbuddy.domain.books.book_repository import BookRepository

__all__ = ["BookRepository"]
