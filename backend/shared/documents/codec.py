"""
MessagePack document codec for persisted entities.

Turns a registered entity into a self-describing binary document and back.
The top-level map carries a ``_type`` discriminator next to the schema keys,
so a User document can never be read back as a Game.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, TypeVar

import msgpack

from shared.documents.entities import schema_for
from shared.documents.schema import DecodeError

if TYPE_CHECKING:
    from pydantic import BaseModel

EntityT = TypeVar("EntityT", bound="BaseModel")

TYPE_KEY = "_type"

# Size limits to keep a corrupt row from exhausting memory.
MAX_DOCUMENT_LEN = 1024 * 1024  # 1MB total document
MAX_STR_LEN = 64 * 1024  # 64KB per string
MAX_BIN_LEN = 1024  # documents carry no binary fields
MAX_ARRAY_LEN = 1024  # max players in a game
MAX_MAP_LEN = 64  # max keys in one map
MAX_EXT_LEN = 1024  # documents carry no extension types


class EncodeError(ValueError):
    """Raised when an entity would produce a document the decoder refuses."""


def _check_limits(obj: object, path: str) -> None:
    """Recursively apply the decoder size limits to a document about to be packed."""
    if isinstance(obj, str):
        size = len(obj.encode("utf-8"))
        if size > MAX_STR_LEN:
            raise EncodeError(f"{path}: string of {size} bytes exceeds {MAX_STR_LEN}")
    elif isinstance(obj, list):
        if len(obj) > MAX_ARRAY_LEN:
            raise EncodeError(f"{path}: {len(obj)} items exceeds {MAX_ARRAY_LEN}")
        for i, item in enumerate(obj):
            _check_limits(item, f"{path}[{i}]")
    elif isinstance(obj, dict):
        if len(obj) > MAX_MAP_LEN:
            raise EncodeError(f"{path}: {len(obj)} keys exceeds {MAX_MAP_LEN}")
        for key, value in obj.items():
            _check_limits(key, path)
            _check_limits(value, f"{path}.{key}")


def encode(entity: BaseModel) -> bytes:
    """
    Encode an entity to MessagePack bytes using its registered schema.

    Raises LookupError for entity types without a schema and EncodeError when
    the document would exceed a size limit enforced by decode.
    """
    schema = schema_for(type(entity))
    document = {TYPE_KEY: schema.name, **schema.to_document(entity)}
    _check_limits(document, schema.name)
    data = msgpack.packb(document)
    if len(data) > MAX_DOCUMENT_LEN:
        raise EncodeError(f"document too large: {len(data)} bytes (max {MAX_DOCUMENT_LEN})")
    return data


def decode(data: bytes, shape: type[EntityT]) -> EntityT:
    """
    Decode MessagePack bytes into an entity of the given type.

    Raises DecodeError if data is invalid, exceeds size limits, or does not
    match the schema of ``shape``. Nothing is returned on partial success.
    """
    schema = schema_for(shape)
    if len(data) > MAX_DOCUMENT_LEN:
        raise DecodeError(f"document too large: {len(data)} bytes (max {MAX_DOCUMENT_LEN})")
    try:
        document = msgpack.unpackb(
            data,
            raw=False,
            max_str_len=MAX_STR_LEN,
            max_bin_len=MAX_BIN_LEN,
            max_array_len=MAX_ARRAY_LEN,
            max_map_len=MAX_MAP_LEN,
            max_ext_len=MAX_EXT_LEN,
        )
    except (msgpack.UnpackException, ValueError) as e:
        raise DecodeError(f"failed to decode MessagePack data: {e}") from e

    if not isinstance(document, dict):
        raise DecodeError(f"expected map, got {type(document).__name__}")

    doc_type = document.get(TYPE_KEY)
    if doc_type != schema.name:
        raise DecodeError(f"expected {schema.name} document, got {doc_type!r}")

    return schema.from_document(document, ignore=frozenset({TYPE_KEY}))
