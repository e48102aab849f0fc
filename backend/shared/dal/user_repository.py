"""Abstract interface for user persistence."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from shared.dal.models import PageList, User


class UserRepository(ABC):
    """Abstract interface for user persistence.

    Implementations return copies: mutating a returned user has no effect
    until it is passed back to ``update``.
    """

    @abstractmethod
    async def insert(self, user: User) -> User: ...

    @abstractmethod
    async def find_by_id(self, user_id: str) -> User | None: ...

    @abstractmethod
    async def get_or_create_by_login(self, login: str) -> User: ...

    @abstractmethod
    async def update(self, user: User) -> None: ...

    @abstractmethod
    async def update_or_insert(self, user: User) -> bool:
        """Store the user, returning True when it did not exist before."""

    @abstractmethod
    async def delete(self, user_id: str) -> None: ...

    @abstractmethod
    async def get_page(self, page_number: int, page_size: int) -> PageList[User]: ...
