"""Document schemas for the persisted entities.

Enums are written by symbolic name. The symbol tables are the stored format:
renaming a member in Python is fine, renaming a symbol here breaks existing
documents.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from shared.dal.models import Game, GameStatus, Player, PlayerDecision, User
from shared.documents.schema import DocumentField, DocumentSchema, FieldKind

if TYPE_CHECKING:
    from pydantic import BaseModel

GAME_STATUS_SYMBOLS = {
    "NotStarted": GameStatus.NOT_STARTED,
    "Playing": GameStatus.PLAYING,
    "Finished": GameStatus.FINISHED,
}

PLAYER_DECISION_SYMBOLS = {
    "None": PlayerDecision.NONE,
    "Rock": PlayerDecision.ROCK,
    "Paper": PlayerDecision.PAPER,
    "Scissors": PlayerDecision.SCISSORS,
}

USER_SCHEMA = DocumentSchema(
    name="User",
    model=User,
    fields=(
        DocumentField("id", "_id", FieldKind.STRING),
        DocumentField("login", "login", FieldKind.STRING),
        DocumentField("first_name", "firstName", FieldKind.STRING, required=False),
        DocumentField("last_name", "lastName", FieldKind.STRING, required=False),
        DocumentField("games_played", "gamesPlayed", FieldKind.INTEGER, required=False, minimum=0),
        DocumentField("current_game_id", "currentGameId", FieldKind.STRING, required=False, optional=True),
    ),
)

PLAYER_SCHEMA = DocumentSchema(
    name="Player",
    model=Player,
    fields=(
        DocumentField("user_id", "userId", FieldKind.STRING),
        DocumentField("name", "name", FieldKind.STRING),
        DocumentField("decision", "decision", FieldKind.ENUM, required=False, symbols=PLAYER_DECISION_SYMBOLS),
        DocumentField("score", "score", FieldKind.INTEGER, required=False, minimum=0),
    ),
)

GAME_SCHEMA = DocumentSchema(
    name="Game",
    model=Game,
    fields=(
        DocumentField("id", "_id", FieldKind.STRING),
        DocumentField("status", "status", FieldKind.ENUM, required=False, symbols=GAME_STATUS_SYMBOLS),
        DocumentField("current_turn_index", "currentTurnIndex", FieldKind.INTEGER, required=False, minimum=0),
        DocumentField("players", "players", FieldKind.DOCUMENT_LIST, required=False, item_schema=PLAYER_SCHEMA),
    ),
)

_SCHEMAS: dict[type[BaseModel], DocumentSchema] = {
    User: USER_SCHEMA,
    Game: GAME_SCHEMA,
}


def schema_for(shape: type[BaseModel]) -> DocumentSchema:
    """Return the registered top-level schema for an entity type."""
    try:
        return _SCHEMAS[shape]
    except KeyError:
        raise LookupError(f"no document schema registered for {shape.__name__}") from None
