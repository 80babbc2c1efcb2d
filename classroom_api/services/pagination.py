# classroom_api/services/pagination.py - Page windows shared by every listing
from dataclasses import dataclass, field
from typing import Any, List

from sqlalchemy import Select, func, select
from sqlalchemy.orm import Session

DEFAULT_PAGE = 1
DEFAULT_LIMIT = 10
# Upper bounds keep LIMIT and OFFSET inside a 64-bit integer
MAX_LIMIT = 1000
MAX_PAGE = 1_000_000


@dataclass(frozen=True)
class PageRequest:
    """Requested window; both numbers are floored to 1 and capped at MAX_PAGE / MAX_LIMIT"""
    page: int = DEFAULT_PAGE
    limit: int = DEFAULT_LIMIT

    def __post_init__(self):
        object.__setattr__(self, "page", min(MAX_PAGE, max(1, int(self.page))))
        object.__setattr__(self, "limit", min(MAX_LIMIT, max(1, int(self.limit))))

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit


@dataclass
class Page:
    items: List[Any] = field(default_factory=list)
    total: int = 0


def count_rows(db: Session, stmt: Select) -> int:
    """Count the rows a data query would return, joins and filters included"""
    count_query = select(func.count()).select_from(stmt.order_by(None).subquery())
    return db.execute(count_query).scalar() or 0


def paginate(db: Session, stmt: Select, page_request: PageRequest) -> Page:
    """
    Run the count query, then the windowed data query, over one statement.

    The count is derived from the data statement itself so both always see
    the same joins and predicate. The two queries are not wrapped in a
    transaction; a concurrent write may land between them.
    """
    total = count_rows(db, stmt)
    rows = db.execute(
        stmt.offset(page_request.offset).limit(page_request.limit)
    ).all()
    return Page(items=list(rows), total=total)
