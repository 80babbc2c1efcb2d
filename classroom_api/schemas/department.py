# classroom_api/schemas/department.py
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel

from classroom_api.schemas.common import CamelModel, Pagination


class DepartmentOut(CamelModel):
    id: int
    code: str
    name: str
    description: Optional[str] = None
    created_at: datetime
    updated_at: datetime


class DepartmentListResponse(BaseModel):
    data: List[DepartmentOut]
    pagination: Pagination
