# classroom_api/schemas/subject.py
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel

from classroom_api.schemas.common import CamelModel, Pagination
from classroom_api.schemas.department import DepartmentOut


class SubjectCreate(CamelModel):
    department_id: int
    name: str
    code: str
    description: Optional[str] = None


class SubjectOut(CamelModel):
    id: int
    department_id: int
    code: str
    name: str
    description: Optional[str] = None
    created_at: datetime
    updated_at: datetime


class SubjectWithDepartment(SubjectOut):
    department: Optional[DepartmentOut] = None

    @classmethod
    def from_row(cls, subject, department) -> "SubjectWithDepartment":
        return cls(
            **SubjectOut.model_validate(subject).model_dump(),
            department=DepartmentOut.model_validate(department) if department is not None else None,
        )


class SubjectListResponse(BaseModel):
    data: List[SubjectWithDepartment]
    pagination: Pagination


class SubjectTotals(BaseModel):
    classes: int


class SubjectDetail(BaseModel):
    subject: SubjectWithDepartment
    totals: SubjectTotals


class SubjectDetailResponse(BaseModel):
    data: SubjectDetail
