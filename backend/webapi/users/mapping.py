"""Conversions between stored users and API DTOs."""

from __future__ import annotations

from uuid import uuid4

from shared.dal.models import User
from webapi.users.types import UserDto, UserToCreateDto, UserToUpdateDto


def to_user_dto(user: User) -> UserDto:
    return UserDto(
        id=user.id,
        login=user.login,
        full_name=f"{user.last_name} {user.first_name}",
        games_played=user.games_played,
        current_game_id=user.current_game_id,
    )


def user_from_create_dto(dto: UserToCreateDto) -> User:
    return User(id=str(uuid4()), login=dto.login, first_name=dto.first_name, last_name=dto.last_name)


def user_from_update_dto(dto: UserToUpdateDto, user_id: str) -> User:
    """Build a fresh user for PUT; fields outside the DTO take their defaults."""
    return User(id=user_id, login=dto.login, first_name=dto.first_name, last_name=dto.last_name)


def to_update_dto(user: User) -> UserToUpdateDto:
    """Project stored fields without validation; the patched result is validated instead."""
    return UserToUpdateDto.model_construct(login=user.login, first_name=user.first_name, last_name=user.last_name)


def apply_update_dto(dto: UserToUpdateDto, user: User) -> User:
    """Copy the editable fields onto an existing user in place."""
    user.login = dto.login
    user.first_name = dto.first_name
    user.last_name = dto.last_name
    return user
