from abc import ABC, abstractmethod
from uuid import UUID


class BookRepository(ABC):
    @abstractmethod
    async def count_for_user(self, user_id: UUID) -> int:
        pass

    @abstractmethod
    async def delete_all_for_user(self, user_id: UUID) -> int:
        """Delete every book saved by the user. Returns the count."""
