# tests/test_pagination.py
import pytest

from classroom_api.schemas.common import Pagination
from classroom_api.services.pagination import MAX_LIMIT, MAX_PAGE, PageRequest, count_rows, paginate
from classroom_api.models import User
from sqlalchemy import select


class TestPageRequest:

    def test_defaults(self):
        request = PageRequest()
        assert request.page == 1
        assert request.limit == 10
        assert request.offset == 0

    @pytest.mark.parametrize("page, limit, expected", [
        (0, 10, (1, 10)),
        (-3, 10, (1, 10)),
        (2, 0, (2, 1)),
        (2, -5, (2, 1)),
    ])
    def test_values_below_one_are_floored(self, page, limit, expected):
        request = PageRequest(page=page, limit=limit)
        assert (request.page, request.limit) == expected

    def test_offset_skips_previous_pages(self):
        assert PageRequest(page=3, limit=4).offset == 8

    def test_values_above_the_caps_are_clamped(self):
        request = PageRequest(page=10 ** 20, limit=10 ** 20)

        assert (request.page, request.limit) == (MAX_PAGE, MAX_LIMIT)
        assert request.offset < 2 ** 63


class TestPaginationEnvelope:

    @pytest.mark.parametrize("total, limit, expected_pages", [
        (0, 10, 0),
        (1, 10, 1),
        (10, 10, 1),
        (11, 10, 2),
        (25, 5, 5),
    ])
    def test_total_pages_rounds_up(self, total, limit, expected_pages):
        pagination = Pagination.build(page=1, limit=limit, total=total)
        assert pagination.total_pages == expected_pages

    def test_wire_keys_are_camel_case(self):
        payload = Pagination.build(page=2, limit=5, total=7).model_dump(by_alias=True)
        assert payload == {"page": 2, "limit": 5, "total": 7, "totalPages": 2}

    def test_empty_page_has_zero_limit(self):
        payload = Pagination.empty().model_dump(by_alias=True)
        assert payload == {"page": 1, "limit": 0, "total": 0, "totalPages": 0}


class TestPaginateQuery:

    def test_count_ignores_window(self, db_session, seed):
        for i in range(7):
            seed.user(f"user-{i}")

        page = paginate(db_session, select(User).order_by(User.created_at.desc()), PageRequest(page=2, limit=3))

        assert page.total == 7
        assert [row[0].id for row in page.items] == ["user-3", "user-2", "user-1"]

    def test_page_past_the_end_is_empty(self, db_session, seed):
        seed.user("only-one")

        page = paginate(db_session, select(User), PageRequest(page=5, limit=10))

        assert page.total == 1
        assert page.items == []

    def test_count_rows_respects_filters(self, db_session, seed):
        seed.user("t-1", role="teacher")
        seed.user("s-1", role="student")
        seed.user("s-2", role="student")

        assert count_rows(db_session, select(User).where(User.role == "student")) == 2
