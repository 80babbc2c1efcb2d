# classroom_api/services/filters.py - Predicate builders for list endpoints
from typing import List, Optional

from sqlalchemy import and_, or_
from sqlalchemy.sql.elements import ColumnElement


def contains(column, term: str) -> ColumnElement:
    """Case-insensitive substring match"""
    return column.ilike(f"%{term}%")


def search_any(term: Optional[str], *columns) -> Optional[ColumnElement]:
    """One search term matched against several columns, OR-ed together"""
    if not term:
        return None
    return or_(*(contains(column, term) for column in columns))


def combine(conditions: List[Optional[ColumnElement]]) -> Optional[ColumnElement]:
    """AND the filters that were supplied; None means match everything"""
    present = [condition for condition in conditions if condition is not None]
    if not present:
        return None
    return and_(*present)
