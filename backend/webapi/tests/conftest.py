"""Shared fixtures for API tests."""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest
from starlette.testclient import TestClient

from webapi.server.app import create_app
from webapi.server.settings import ApiServerSettings

if TYPE_CHECKING:
    from collections.abc import Iterator
    from pathlib import Path


@pytest.fixture
def settings(tmp_path: Path) -> ApiServerSettings:
    return ApiServerSettings(database_path=str(tmp_path / "test.db"), log_dir=str(tmp_path / "logs"))


@pytest.fixture
def client(settings: ApiServerSettings) -> Iterator[TestClient]:
    with TestClient(create_app(settings=settings)) as c:
        yield c
