"""Handlers for the /api/users resource."""

from __future__ import annotations

import json
from http import HTTPStatus
from typing import TYPE_CHECKING, Any

import structlog
from starlette.responses import JSONResponse, Response

from webapi.users.mapping import (
    apply_update_dto,
    to_update_dto,
    to_user_dto,
    user_from_create_dto,
    user_from_update_dto,
)
from webapi.users.patch import MalformedPatchError, apply_patch, parse_patch
from webapi.users.validation import errors_to_json, validate_user_to_create, validate_user_to_update
from webapi.views.pagination import (
    PAGINATION_HEADER,
    InvalidPageParameterError,
    build_pagination_header,
    clamp_page_number,
    clamp_page_size,
    read_int_param,
)

if TYPE_CHECKING:
    from uuid import UUID

    from starlette.requests import Request

    from shared.dal.user_repository import UserRepository
    from webapi.server.settings import ApiServerSettings

logger = structlog.get_logger()

ALLOWED_COLLECTION_METHODS = "GET, POST, OPTIONS"

_MISSING = object()


async def _read_json_body(request: Request) -> Any:  # noqa: ANN401
    """Return the decoded JSON body, or _MISSING when it is empty or not JSON."""
    raw_body = await request.body()
    if not raw_body.strip():
        return _MISSING
    try:
        return json.loads(raw_body)
    except ValueError:
        return _MISSING


def _bad_request(message: str) -> JSONResponse:
    return JSONResponse({"error": message}, status_code=HTTPStatus.BAD_REQUEST)


def _user_location(request: Request, user_id: str) -> str:
    return str(request.url_for("get_user_by_id", user_id=user_id))


def _is_nil(user_id: UUID) -> bool:
    return user_id.int == 0


async def options_for_users(_request: Request) -> Response:
    return Response(status_code=HTTPStatus.OK, headers={"Allow": ALLOWED_COLLECTION_METHODS})


async def get_users(request: Request) -> Response:
    """GET /api/users?pageNumber=&pageSize= - one page of users plus X-Pagination."""
    settings: ApiServerSettings = request.app.state.settings
    user_repo: UserRepository = request.app.state.user_repo

    try:
        page_number = read_int_param(request, "pageNumber", 1)
        page_size = read_int_param(request, "pageSize", settings.default_page_size)
    except InvalidPageParameterError as e:
        return _bad_request(str(e))

    page = await user_repo.get_page(clamp_page_number(page_number), clamp_page_size(page_size, settings.max_page_size))
    users = [to_user_dto(user).model_dump(by_alias=True) for user in page.items]
    return JSONResponse(users, headers={PAGINATION_HEADER: build_pagination_header(request, "get_users", page)})


async def get_user_by_id(request: Request) -> Response:
    """GET|HEAD /api/users/{user_id}."""
    user_repo: UserRepository = request.app.state.user_repo
    user_id: UUID = request.path_params["user_id"]

    if _is_nil(user_id):
        return Response(status_code=HTTPStatus.NOT_FOUND)
    user = await user_repo.find_by_id(str(user_id))
    if user is None:
        return Response(status_code=HTTPStatus.NOT_FOUND)
    return JSONResponse(to_user_dto(user).model_dump(by_alias=True))


async def create_user(request: Request) -> Response:
    """POST /api/users - 201 with the new id and a Location header."""
    user_repo: UserRepository = request.app.state.user_repo

    body = await _read_json_body(request)
    if body is _MISSING or not isinstance(body, dict):
        return _bad_request("Request body must be a JSON object")

    result = validate_user_to_create(body)
    if not result.ok:
        return JSONResponse(errors_to_json(result.errors), status_code=HTTPStatus.UNPROCESSABLE_ENTITY)
    assert result.value is not None

    created = await user_repo.insert(user_from_create_dto(result.value))
    logger.info("user created", user_id=created.id, login=created.login)
    return JSONResponse(
        created.id,
        status_code=HTTPStatus.CREATED,
        headers={"Location": _user_location(request, created.id)},
    )


async def update_user(request: Request) -> Response:
    """PUT /api/users/{user_id} - replace the user, creating it when missing."""
    user_repo: UserRepository = request.app.state.user_repo
    user_id: UUID = request.path_params["user_id"]

    body = await _read_json_body(request)
    if _is_nil(user_id) or body is _MISSING or not isinstance(body, dict):
        return _bad_request("A non-empty user id and a JSON object body are required")

    result = validate_user_to_update(body)
    if not result.ok:
        return JSONResponse(errors_to_json(result.errors), status_code=HTTPStatus.UNPROCESSABLE_ENTITY)
    assert result.value is not None

    user = user_from_update_dto(result.value, str(user_id))
    inserted = await user_repo.update_or_insert(user)
    if inserted:
        logger.info("user created by upsert", user_id=user.id)
        return JSONResponse(
            user.id,
            status_code=HTTPStatus.CREATED,
            headers={"Location": _user_location(request, user.id)},
        )
    logger.info("user replaced", user_id=user.id)
    return Response(status_code=HTTPStatus.NO_CONTENT)


async def partially_update_user(request: Request) -> Response:
    """PATCH /api/users/{user_id} - apply a JSON-Patch to the editable fields."""
    user_repo: UserRepository = request.app.state.user_repo
    user_id: UUID = request.path_params["user_id"]

    body = await _read_json_body(request)
    if body is _MISSING:
        return _bad_request("Request body must be a JSON-Patch document")
    try:
        operations = parse_patch(body)
    except MalformedPatchError as e:
        return _bad_request(str(e))

    user = await user_repo.find_by_id(str(user_id))
    if user is None:
        return Response(status_code=HTTPStatus.NOT_FOUND)

    result = apply_patch(operations, to_update_dto(user))
    if not result.ok:
        return JSONResponse(errors_to_json(result.errors), status_code=HTTPStatus.UNPROCESSABLE_ENTITY)
    assert result.value is not None

    await user_repo.update(apply_update_dto(result.value, user))
    logger.info("user patched", user_id=user.id, num_operations=len(operations))
    return Response(status_code=HTTPStatus.NO_CONTENT)


async def delete_user(request: Request) -> Response:
    """DELETE /api/users/{user_id}."""
    user_repo: UserRepository = request.app.state.user_repo
    user_id = str(request.path_params["user_id"])

    if await user_repo.find_by_id(user_id) is None:
        return Response(status_code=HTTPStatus.NOT_FOUND)
    await user_repo.delete(user_id)
    logger.info("user deleted", user_id=user_id)
    return Response(status_code=HTTPStatus.NO_CONTENT)
