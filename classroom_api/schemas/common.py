# classroom_api/schemas/common.py - Shared response pieces
import math
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Snake_case attributes in Python, camelCase keys on the wire"""
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class Pagination(CamelModel):
    page: int
    limit: int
    total: int
    total_pages: int

    @classmethod
    def build(cls, page: int, limit: int, total: int) -> "Pagination":
        total_pages = math.ceil(total / limit) if limit > 0 else 0
        return cls(page=page, limit=limit, total=total, total_pages=total_pages)

    @classmethod
    def empty(cls) -> "Pagination":
        """Zero-limit page returned to users who have no relationship path"""
        return cls(page=1, limit=0, total=0, total_pages=0)


class CreatedId(BaseModel):
    id: int


class CreatedResponse(BaseModel):
    data: CreatedId


class ErrorResponse(BaseModel):
    error: str
