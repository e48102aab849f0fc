from __future__ import annotations

import contextlib
from http import HTTPStatus
from importlib.metadata import PackageNotFoundError, version
from typing import TYPE_CHECKING

import structlog
from starlette.applications import Starlette
from starlette.middleware.cors import CORSMiddleware
from starlette.responses import JSONResponse
from starlette.routing import Route

from shared.db import Database, SqliteGameRepository, SqliteUserRepository
from shared.documents import DecodeError
from shared.logging import setup_logging
from webapi.server.middleware import RequestContextMiddleware
from webapi.server.settings import ApiServerSettings
from webapi.views import (
    create_user,
    delete_user,
    get_user_by_id,
    get_users,
    options_for_users,
    partially_update_user,
    update_user,
)

logger = structlog.get_logger()

if TYPE_CHECKING:
    from collections.abc import AsyncGenerator

    from starlette.requests import Request


def _app_version() -> str:
    try:
        return version("webgame")
    except PackageNotFoundError:
        return "dev"


async def _decode_error_handler(request: Request, exc: Exception) -> JSONResponse:
    """A stored document could not be decoded: a server fault, never partial data."""
    logger.error("stored document is corrupt", path=request.url.path, error=str(exc))
    return JSONResponse({"error": "Stored data could not be read"}, status_code=HTTPStatus.INTERNAL_SERVER_ERROR)


async def health(_request: Request) -> JSONResponse:
    return JSONResponse({"status": "ok", "version": _app_version()})


def create_app(settings: ApiServerSettings | None = None) -> Starlette:
    if settings is None:  # pragma: no cover
        settings = ApiServerSettings()

    routes = [
        Route("/health", health, methods=["GET"], name="health"),
        Route("/api/users", options_for_users, methods=["OPTIONS"], name="options_for_users"),
        Route("/api/users", get_users, methods=["GET"], name="get_users"),
        Route("/api/users", create_user, methods=["POST"], name="create_user"),
        # GET routes also answer HEAD
        Route("/api/users/{user_id:uuid}", get_user_by_id, methods=["GET"], name="get_user_by_id"),
        Route("/api/users/{user_id:uuid}", update_user, methods=["PUT"], name="update_user"),
        Route("/api/users/{user_id:uuid}", partially_update_user, methods=["PATCH"], name="partially_update_user"),
        Route("/api/users/{user_id:uuid}", delete_user, methods=["DELETE"], name="delete_user"),
    ]

    db = Database(settings.database_path)
    db.connect()

    @contextlib.asynccontextmanager
    async def lifespan(_app: Starlette) -> AsyncGenerator[None]:  # pragma: no cover
        yield
        db.close()

    app = Starlette(
        routes=routes,
        lifespan=lifespan,
        exception_handlers={DecodeError: _decode_error_handler},
    )
    app.add_middleware(
        CORSMiddleware,  # type: ignore[arg-type]
        allow_origins=settings.cors_origins,
        allow_methods=["GET", "HEAD", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
        allow_headers=["Content-Type"],
        expose_headers=["Location", "X-Pagination"],
    )
    app.add_middleware(RequestContextMiddleware)  # type: ignore[arg-type]

    app.state.settings = settings
    app.state.db = db
    app.state.user_repo = SqliteUserRepository(db)
    app.state.game_repo = SqliteGameRepository(db)

    logger.info("api server ready", database_path=settings.database_path)
    return app


def get_app() -> Starlette:  # pragma: no cover
    """Factory function for uvicorn --factory webapi.server.app:get_app."""
    settings = ApiServerSettings()
    setup_logging(log_dir=settings.log_dir, level=settings.log_level, log_format=settings.log_format)
    return create_app(settings=settings)
