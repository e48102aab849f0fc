"""Data access layer: repository interfaces and shared persistence models."""

from shared.dal.game_repository import GameRepository
from shared.dal.models import Game, GameStatus, PageList, Player, PlayerDecision, User
from shared.dal.user_repository import UserRepository

__all__ = [
    "Game",
    "GameRepository",
    "GameStatus",
    "PageList",
    "Player",
    "PlayerDecision",
    "User",
    "UserRepository",
]
