"""SQLite database layer: connection management and repository implementations."""

from shared.db.connection import Database
from shared.db.game_repository import SqliteGameRepository
from shared.db.user_repository import SqliteUserRepository

__all__ = [
    "Database",
    "SqliteGameRepository",
    "SqliteUserRepository",
]
