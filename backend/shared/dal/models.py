"""Persistence models for the data access layer."""

from __future__ import annotations

import math
from enum import StrEnum
from typing import Generic, TypeVar

from pydantic import BaseModel, ConfigDict, Field, computed_field


T = TypeVar("T")


class GameStatus(StrEnum):
    NOT_STARTED = "not_started"
    PLAYING = "playing"
    FINISHED = "finished"


class PlayerDecision(StrEnum):
    NONE = "none"
    ROCK = "rock"
    PAPER = "paper"
    SCISSORS = "scissors"


class User(BaseModel):
    """Registered user. Mutated in place by the API layer; ``id`` never changes."""

    model_config = ConfigDict(validate_assignment=True)

    id: str = Field(frozen=True)
    login: str
    first_name: str = ""
    last_name: str = ""
    games_played: int = Field(default=0, ge=0)
    current_game_id: str | None = None  # non-owning reference to Game.id


class Player(BaseModel):
    """Seat in a game: a snapshot of the user plus the per-game state."""

    model_config = ConfigDict(validate_assignment=True)

    user_id: str  # non-owning reference to User.id
    name: str
    decision: PlayerDecision = PlayerDecision.NONE
    score: int = Field(default=0, ge=0)


class Game(BaseModel):
    """Game record. Player order is the turn rotation order."""

    model_config = ConfigDict(validate_assignment=True)

    id: str = Field(frozen=True)
    status: GameStatus = GameStatus.NOT_STARTED
    current_turn_index: int = Field(default=0, ge=0)
    players: list[Player] = Field(default_factory=list)


class PageList(BaseModel, Generic[T], frozen=True):
    """One 1-indexed page of a collection plus the metadata needed to navigate it."""

    items: list[T]
    current_page: int = Field(ge=1)
    page_size: int = Field(ge=1)
    total_count: int = Field(ge=0)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def total_pages(self) -> int:
        return math.ceil(self.total_count / self.page_size)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def has_previous(self) -> bool:
        return self.current_page > 1

    @computed_field  # type: ignore[prop-decorator]
    @property
    def has_next(self) -> bool:
        return self.current_page < self.total_pages
