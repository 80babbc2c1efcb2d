# classroom_api/api/deps/pagination.py - Page/limit query parameters
from fastapi import Query

from classroom_api.services.pagination import (
    DEFAULT_LIMIT,
    DEFAULT_PAGE,
    MAX_LIMIT,
    MAX_PAGE,
    PageRequest,
)


def get_page_request(
    page: int = Query(DEFAULT_PAGE, description=f"1-based page number; clamped to 1..{MAX_PAGE}"),
    limit: int = Query(DEFAULT_LIMIT, description=f"Page size; clamped to 1..{MAX_LIMIT}"),
) -> PageRequest:
    return PageRequest(page=page, limit=limit)
