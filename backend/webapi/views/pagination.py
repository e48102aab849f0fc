"""Page parameter parsing and the X-Pagination response header."""

from __future__ import annotations

import json
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from starlette.requests import Request

    from shared.dal.models import PageList

PAGINATION_HEADER = "X-Pagination"


class InvalidPageParameterError(ValueError):
    """A page query parameter is present but not an integer."""


def read_int_param(request: Request, name: str, default: int) -> int:
    raw = request.query_params.get(name)
    if raw is None or raw == "":
        return default
    try:
        return int(raw)
    except ValueError:
        raise InvalidPageParameterError(f"{name} must be an integer, got {raw!r}") from None


def clamp_page_number(page_number: int) -> int:
    return max(page_number, 1)


def clamp_page_size(page_size: int, max_page_size: int) -> int:
    return min(max(page_size, 1), max_page_size)


def _page_link(request: Request, route_name: str, page_number: int, page_size: int) -> str:
    return str(request.url_for(route_name).include_query_params(pageNumber=page_number, pageSize=page_size))


def build_pagination_header(request: Request, route_name: str, page: PageList) -> str:
    """Serialize page metadata with absolute links to the neighbouring pages (or null)."""
    previous_link = (
        _page_link(request, route_name, page.current_page - 1, page.page_size) if page.has_previous else None
    )
    next_link = _page_link(request, route_name, page.current_page + 1, page.page_size) if page.has_next else None
    return json.dumps(
        {
            "previousPageLink": previous_link,
            "nextPageLink": next_link,
            "totalCount": page.total_count,
            "pageSize": page.page_size,
            "currentPage": page.current_page,
            "totalPages": page.total_pages,
        },
    )
