"""SQLite-backed game repository."""

from __future__ import annotations

import asyncio
import sqlite3
from typing import TYPE_CHECKING

import structlog

from shared.dal.game_repository import GameRepository
from shared.dal.models import Game
from shared.documents import decode, encode

if TYPE_CHECKING:
    from shared.db.connection import Database

logger = structlog.get_logger()


class SqliteGameRepository(GameRepository):
    """SQLite implementation of GameRepository.

    Stores the full game document (players included) in one row, with the
    status copied into its own column.
    """

    def __init__(self, db: Database) -> None:
        self._db = db
        self._lock = asyncio.Lock()

    async def insert(self, game: Game) -> Game:
        """Insert a game. Raises ValueError on duplicate id."""
        async with self._lock:
            try:
                self._db.connection.execute(
                    "INSERT INTO games (id, status, data) VALUES (?, ?, ?)",
                    (game.id, game.status.value, encode(game)),
                )
                self._db.connection.commit()
            except sqlite3.IntegrityError as exc:
                self._db.connection.rollback()
                raise ValueError(f"Game with id '{game.id}' already exists") from exc
        logger.info("game created", game_id=game.id, num_players=len(game.players))
        return game.model_copy(deep=True)

    async def find_by_id(self, game_id: str) -> Game | None:
        row = self._db.connection.execute(
            "SELECT data FROM games WHERE id = ?",
            (game_id,),
        ).fetchone()
        if row is None:
            return None
        return decode(row[0], Game)

    async def update(self, game: Game) -> None:
        """Replace a stored game. Raises ValueError when the game does not exist."""
        async with self._lock:
            cursor = self._db.connection.execute(
                "UPDATE games SET status = ?, data = ? WHERE id = ?",
                (game.status.value, encode(game), game.id),
            )
            self._db.connection.commit()
        if cursor.rowcount == 0:
            raise ValueError(f"Game with id '{game.id}' does not exist")

    async def delete(self, game_id: str) -> None:
        async with self._lock:
            cursor = self._db.connection.execute("DELETE FROM games WHERE id = ?", (game_id,))
            self._db.connection.commit()
        if cursor.rowcount == 0:
            logger.warning("delete had no effect (game not found)", game_id=game_id)
