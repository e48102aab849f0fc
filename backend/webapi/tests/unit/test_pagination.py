import json

import pytest
from starlette.requests import Request

from shared.dal.models import PageList
from webapi.views.pagination import (
    InvalidPageParameterError,
    build_pagination_header,
    clamp_page_number,
    clamp_page_size,
    read_int_param,
)


def _request(query: str = "") -> Request:
    return Request(
        {
            "type": "http",
            "method": "GET",
            "path": "/api/users",
            "query_string": query.encode(),
            "headers": [],
        },
    )


class TestClamping:
    @pytest.mark.parametrize(("requested", "expected"), [(-3, 1), (0, 1), (1, 1), (7, 7)])
    def test_page_number(self, requested, expected):
        assert clamp_page_number(requested) == expected

    @pytest.mark.parametrize(("requested", "expected"), [(-1, 1), (0, 1), (10, 10), (20, 20), (21, 20)])
    def test_page_size(self, requested, expected):
        assert clamp_page_size(requested, 20) == expected


class TestReadIntParam:
    def test_default_when_absent(self):
        assert read_int_param(_request(), "pageSize", 10) == 10

    def test_default_when_blank(self):
        assert read_int_param(_request("pageSize="), "pageSize", 10) == 10

    def test_parses_negative_numbers(self):
        assert read_int_param(_request("pageNumber=-4"), "pageNumber", 1) == -4

    def test_rejects_garbage(self):
        with pytest.raises(InvalidPageParameterError, match="pageNumber must be an integer"):
            read_int_param(_request("pageNumber=abc"), "pageNumber", 1)


class TestBuildPaginationHeader:
    def test_single_page_has_no_links(self):
        request = _request()
        page = PageList[int](items=[1, 2], current_page=1, page_size=10, total_count=2)

        header = json.loads(build_pagination_header(request, "get_users", page))

        assert header == {
            "previousPageLink": None,
            "nextPageLink": None,
            "totalCount": 2,
            "pageSize": 10,
            "currentPage": 1,
            "totalPages": 1,
        }
