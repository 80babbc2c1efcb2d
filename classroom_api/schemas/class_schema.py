# classroom_api/schemas/class_schema.py
from datetime import datetime
from typing import Any, List, Optional

from pydantic import BaseModel

from classroom_api.schemas.common import CamelModel, Pagination
from classroom_api.schemas.department import DepartmentOut
from classroom_api.schemas.subject import SubjectOut
from classroom_api.schemas.user import UserOut


class ClassCreate(CamelModel):
    name: str
    teacher_id: str
    subject_id: int
    capacity: int = 50
    description: Optional[str] = None
    status: str = "active"
    banner_url: Optional[str] = None
    banner_cld_pub_id: Optional[str] = None


class ClassOut(CamelModel):
    id: int
    subject_id: int
    teacher_id: str
    invite_code: str
    name: str
    description: Optional[str] = None
    banner_url: Optional[str] = None
    banner_cld_pub_id: Optional[str] = None
    capacity: int
    status: str
    schedules: List[Any]
    created_at: datetime
    updated_at: datetime


def _optional(schema, obj):
    return schema.model_validate(obj) if obj is not None else None


class ClassWithTeacher(ClassOut):
    teacher: Optional[UserOut] = None

    @classmethod
    def from_row(cls, class_obj, teacher) -> "ClassWithTeacher":
        return cls(
            **ClassOut.model_validate(class_obj).model_dump(),
            teacher=_optional(UserOut, teacher),
        )


class ClassWithSubjectAndTeacher(ClassWithTeacher):
    subject: Optional[SubjectOut] = None

    @classmethod
    def from_row(cls, class_obj, subject, teacher) -> "ClassWithSubjectAndTeacher":
        return cls(
            **ClassOut.model_validate(class_obj).model_dump(),
            subject=_optional(SubjectOut, subject),
            teacher=_optional(UserOut, teacher),
        )


class ClassDetail(ClassWithSubjectAndTeacher):
    department: Optional[DepartmentOut] = None

    @classmethod
    def from_row(cls, class_obj, subject, department, teacher) -> "ClassDetail":
        return cls(
            **ClassOut.model_validate(class_obj).model_dump(),
            subject=_optional(SubjectOut, subject),
            department=_optional(DepartmentOut, department),
            teacher=_optional(UserOut, teacher),
        )


class ClassListResponse(BaseModel):
    data: List[ClassWithSubjectAndTeacher]
    pagination: Pagination


class SubjectClassListResponse(BaseModel):
    data: List[ClassWithTeacher]
    pagination: Pagination


class ClassDetailResponse(BaseModel):
    data: ClassDetail
