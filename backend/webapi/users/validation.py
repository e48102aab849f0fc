"""Request body validation for the users API.

Each function returns a ValidationResult carrying either the parsed DTO or
the field-level errors, never both.
"""

from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Generic, TypeVar

from pydantic import BaseModel, ValidationError

from webapi.users.types import UserToCreateDto, UserToUpdateDto

if TYPE_CHECKING:
    from collections.abc import Iterable

DtoT = TypeVar("DtoT", bound=BaseModel)

LOGIN_FIELD = "login"
INVALID_LOGIN_MESSAGE = "Login must contain only letters or digits"
EMPTY_LOGIN_MESSAGE = "Login must not be empty"


@dataclass(frozen=True)
class FieldError:
    field: str
    message: str


@dataclass(frozen=True)
class ValidationResult(Generic[DtoT]):
    value: DtoT | None = None
    errors: list[FieldError] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.errors


def is_valid_login(login: str) -> bool:
    return login != "" and all(ch.isalpha() or ch.isdecimal() for ch in login)


def errors_to_json(errors: Iterable[FieldError]) -> dict[str, dict[str, list[str]]]:
    """Group error messages by field: ``{"errors": {"login": ["..."]}}``."""
    grouped: defaultdict[str, list[str]] = defaultdict(list)
    for error in errors:
        grouped[error.field].append(error.message)
    return {"errors": dict(grouped)}


def _from_pydantic(exc: ValidationError) -> list[FieldError]:
    errors = []
    for err in exc.errors():
        loc = err.get("loc") or ()
        errors.append(FieldError(".".join(str(part) for part in loc), err["msg"]))
    return errors


def _login_errors(login: str) -> list[FieldError]:
    if login == "":
        return [FieldError(LOGIN_FIELD, EMPTY_LOGIN_MESSAGE)]
    if not is_valid_login(login):
        return [FieldError(LOGIN_FIELD, INVALID_LOGIN_MESSAGE)]
    return []


def _validate(dto_type: type[DtoT], body: dict[str, Any]) -> ValidationResult[DtoT]:
    try:
        dto = dto_type.model_validate(body)
    except ValidationError as e:
        return ValidationResult(errors=_from_pydantic(e))
    errors = _login_errors(dto.login)  # type: ignore[attr-defined]
    if errors:
        return ValidationResult(errors=errors)
    return ValidationResult(value=dto)


def validate_user_to_create(body: dict[str, Any]) -> ValidationResult[UserToCreateDto]:
    return _validate(UserToCreateDto, body)


def validate_user_to_update(body: dict[str, Any]) -> ValidationResult[UserToUpdateDto]:
    return _validate(UserToUpdateDto, body)
