"""Explicit document schemas.

A schema lists every persisted field of an entity: the attribute name, the
key used in the document, how the value is represented and whether it may be
absent. Both directions of the codec are driven by the same schema, so what
gets written is exactly what the decoder accepts.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, StrEnum
from typing import TYPE_CHECKING, Any

from pydantic import BaseModel, ValidationError

if TYPE_CHECKING:
    from collections.abc import Mapping


class DecodeError(Exception):
    """Raised when bytes or a raw document cannot be turned into an entity."""


class FieldKind(StrEnum):
    STRING = "string"
    INTEGER = "integer"
    ENUM = "enum"
    DOCUMENT_LIST = "document_list"


@dataclass(frozen=True)
class DocumentField:
    """One entity attribute and its document representation.

    ``optional`` fields hold ``None`` when unset and are left out of the
    document entirely. Fields that are not ``required`` fall back to the
    model default when their key is missing.
    """

    name: str
    key: str
    kind: FieldKind
    required: bool = True
    optional: bool = False
    minimum: int | None = None
    symbols: Mapping[str, Enum] | None = None
    item_schema: DocumentSchema | None = None

    def __post_init__(self) -> None:
        if self.optional and self.required:
            raise ValueError(f"field {self.name!r} cannot be both optional and required")
        if self.kind == FieldKind.ENUM and not self.symbols:
            raise ValueError(f"enum field {self.name!r} needs a symbol table")
        if self.kind == FieldKind.DOCUMENT_LIST and self.item_schema is None:
            raise ValueError(f"document list field {self.name!r} needs an item schema")

    def symbol_for(self, member: Enum) -> str:
        assert self.symbols is not None
        for symbol, candidate in self.symbols.items():
            if candidate is member:
                return symbol
        raise ValueError(f"{member!r} has no symbol in field {self.name!r}")

    def encode_value(self, value: Any) -> Any:  # noqa: ANN401
        if self.kind == FieldKind.ENUM:
            return self.symbol_for(value)
        if self.kind == FieldKind.DOCUMENT_LIST:
            assert self.item_schema is not None
            return [self.item_schema.to_document(item) for item in value]
        return value

    def decode_value(self, raw: Any) -> Any:  # noqa: ANN401
        if self.kind == FieldKind.STRING:
            if not isinstance(raw, str):
                raise DecodeError(f"{self.key}: expected string, got {type(raw).__name__}")
            return raw
        if self.kind == FieldKind.INTEGER:
            # bool is an int subclass but never a valid counter
            if isinstance(raw, bool) or not isinstance(raw, int):
                raise DecodeError(f"{self.key}: expected integer, got {type(raw).__name__}")
            if self.minimum is not None and raw < self.minimum:
                raise DecodeError(f"{self.key}: {raw} is below the minimum of {self.minimum}")
            return raw
        if self.kind == FieldKind.ENUM:
            assert self.symbols is not None
            if not isinstance(raw, str) or raw not in self.symbols:
                raise DecodeError(f"{self.key}: unknown symbol {raw!r}")
            return self.symbols[raw]
        assert self.item_schema is not None
        if not isinstance(raw, list):
            raise DecodeError(f"{self.key}: expected array, got {type(raw).__name__}")
        return [self.item_schema.from_document(item) for item in raw]


@dataclass(frozen=True)
class DocumentSchema:
    """Field list for one entity type. ``name`` is written as the type discriminator."""

    name: str
    model: type[BaseModel]
    fields: tuple[DocumentField, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        keys = [f.key for f in self.fields]
        if len(set(keys)) != len(keys):
            raise ValueError(f"schema {self.name!r} has duplicate document keys")

    def to_document(self, entity: BaseModel) -> dict[str, Any]:
        if not isinstance(entity, self.model):
            raise TypeError(f"schema {self.name!r} cannot encode {type(entity).__name__}")
        document: dict[str, Any] = {}
        for f in self.fields:
            value = getattr(entity, f.name)
            if value is None:
                if not f.optional:
                    raise ValueError(f"{self.name}.{f.name} is None but not optional")
                continue
            document[f.key] = f.encode_value(value)
        return document

    def from_document(self, document: Any, *, ignore: frozenset[str] = frozenset()) -> Any:  # noqa: ANN401
        if not isinstance(document, dict):
            raise DecodeError(f"{self.name}: expected map, got {type(document).__name__}")

        known = {f.key for f in self.fields} | ignore
        unknown = sorted(str(k) for k in document if k not in known)
        if unknown:
            raise DecodeError(f"{self.name}: unknown keys {', '.join(unknown)}")

        values: dict[str, Any] = {}
        for f in self.fields:
            if f.key not in document:
                if f.required:
                    raise DecodeError(f"{self.name}: missing required key {f.key!r}")
                continue
            raw = document[f.key]
            if raw is None:
                if not f.optional:
                    raise DecodeError(f"{self.name}: {f.key!r} must not be null")
                continue
            values[f.name] = f.decode_value(raw)

        try:
            return self.model(**values)
        except ValidationError as e:
            raise DecodeError(f"{self.name}: {e}") from e
