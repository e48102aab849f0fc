"""JSON shapes exchanged by the users API.

All DTOs use camelCase keys on the wire and snake_case attributes in Python.
"""

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

DEFAULT_FIRST_NAME = "John"
DEFAULT_LAST_NAME = "Doe"
MAX_NAME_LENGTH = 256


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class UserDto(_CamelModel):
    id: str
    login: str
    full_name: str
    games_played: int
    current_game_id: str | None = None


class UserToCreateDto(_CamelModel):
    login: str = Field(max_length=MAX_NAME_LENGTH)
    first_name: str = Field(default=DEFAULT_FIRST_NAME, max_length=MAX_NAME_LENGTH)
    last_name: str = Field(default=DEFAULT_LAST_NAME, max_length=MAX_NAME_LENGTH)


class UserToUpdateDto(_CamelModel):
    """Editable projection of a user, used by PUT and as the JSON-Patch target."""

    login: str = Field(max_length=MAX_NAME_LENGTH)
    first_name: str = Field(max_length=MAX_NAME_LENGTH)
    last_name: str = Field(max_length=MAX_NAME_LENGTH)
