"""SQLite-backed user repository."""

from __future__ import annotations

import asyncio
import sqlite3
from typing import TYPE_CHECKING
from uuid import uuid4

import structlog

from shared.dal.models import PageList, User
from shared.dal.user_repository import UserRepository
from shared.documents import decode, encode

if TYPE_CHECKING:
    from shared.db.connection import Database

logger = structlog.get_logger()


class SqliteUserRepository(UserRepository):
    """SQLite implementation of UserRepository.

    Each row stores the encoded user document alongside an indexed login
    column. Writes are serialized with an asyncio lock so that existence
    checks and the following write cannot interleave.
    """

    def __init__(self, db: Database) -> None:
        self._db = db
        self._lock = asyncio.Lock()

    async def insert(self, user: User) -> User:
        """Insert a user. Raises ValueError on duplicate id."""
        async with self._lock:
            try:
                self._db.connection.execute(
                    "INSERT INTO users (id, login, data) VALUES (?, ?, ?)",
                    (user.id, user.login, encode(user)),
                )
                self._db.connection.commit()
            except sqlite3.IntegrityError as exc:
                self._db.connection.rollback()
                raise ValueError(f"User with id '{user.id}' already exists") from exc
        return user.model_copy(deep=True)

    async def find_by_id(self, user_id: str) -> User | None:
        row = self._db.connection.execute(
            "SELECT data FROM users WHERE id = ?",
            (user_id,),
        ).fetchone()
        if row is None:
            return None
        return decode(row[0], User)

    async def get_or_create_by_login(self, login: str) -> User:
        """Return the oldest-id user with this exact login, creating one if none exists."""
        async with self._lock:
            row = self._db.connection.execute(
                "SELECT data FROM users WHERE login = ? ORDER BY id LIMIT 1",
                (login,),
            ).fetchone()
            if row is not None:
                return decode(row[0], User)

            user = User(id=str(uuid4()), login=login)
            self._db.connection.execute(
                "INSERT INTO users (id, login, data) VALUES (?, ?, ?)",
                (user.id, user.login, encode(user)),
            )
            self._db.connection.commit()
        logger.info("created user for login", user_id=user.id, login=login)
        return user

    async def update(self, user: User) -> None:
        """Replace a stored user. Raises ValueError when the user does not exist."""
        async with self._lock:
            cursor = self._db.connection.execute(
                "UPDATE users SET login = ?, data = ? WHERE id = ?",
                (user.login, encode(user), user.id),
            )
            self._db.connection.commit()
        if cursor.rowcount == 0:
            raise ValueError(f"User with id '{user.id}' does not exist")

    async def update_or_insert(self, user: User) -> bool:
        async with self._lock:
            existing = self._db.connection.execute(
                "SELECT 1 FROM users WHERE id = ?",
                (user.id,),
            ).fetchone()
            self._db.connection.execute(
                "INSERT INTO users (id, login, data) VALUES (?, ?, ?) "
                "ON CONFLICT (id) DO UPDATE SET login = excluded.login, data = excluded.data",
                (user.id, user.login, encode(user)),
            )
            self._db.connection.commit()
        return existing is None

    async def delete(self, user_id: str) -> None:
        """Delete a user by id. Logs a warning when nothing was deleted."""
        async with self._lock:
            cursor = self._db.connection.execute("DELETE FROM users WHERE id = ?", (user_id,))
            self._db.connection.commit()
        if cursor.rowcount == 0:
            logger.warning("delete had no effect (user not found)", user_id=user_id)

    async def get_page(self, page_number: int, page_size: int) -> PageList[User]:
        """Return one page of users ordered by login, then id."""
        if page_number < 1:
            raise ValueError(f"page_number must be >= 1, got {page_number}")
        if page_size < 1:
            raise ValueError(f"page_size must be >= 1, got {page_size}")

        total_count = self._db.connection.execute("SELECT COUNT(*) FROM users").fetchone()[0]
        offset = (page_number - 1) * page_size
        # Pages past the end are empty; the offset may not fit in an SQLite INTEGER
        rows: list[tuple[bytes]] = []
        if offset < total_count:
            rows = self._db.connection.execute(
                "SELECT data FROM users ORDER BY login, id LIMIT ? OFFSET ?",
                (page_size, offset),
            ).fetchall()
        return PageList[User](
            items=[decode(row[0], User) for row in rows],
            current_page=page_number,
            page_size=page_size,
            total_count=total_count,
        )
