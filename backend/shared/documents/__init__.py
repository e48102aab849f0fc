"""Binary document codec for persisted entities."""

from shared.documents.codec import EncodeError, decode, encode
from shared.documents.entities import GAME_SCHEMA, PLAYER_SCHEMA, USER_SCHEMA, schema_for
from shared.documents.schema import DecodeError, DocumentField, DocumentSchema, FieldKind

__all__ = [
    "GAME_SCHEMA",
    "PLAYER_SCHEMA",
    "USER_SCHEMA",
    "DecodeError",
    "DocumentField",
    "DocumentSchema",
    "EncodeError",
    "FieldKind",
    "decode",
    "encode",
    "schema_for",
]
