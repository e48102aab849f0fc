"""Abstract interface for game persistence."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from shared.dal.models import Game


class GameRepository(ABC):
    """Abstract interface for game persistence."""

    @abstractmethod
    async def insert(self, game: Game) -> Game: ...

    @abstractmethod
    async def find_by_id(self, game_id: str) -> Game | None: ...

    @abstractmethod
    async def update(self, game: Game) -> None: ...

    @abstractmethod
    async def delete(self, game_id: str) -> None: ...
