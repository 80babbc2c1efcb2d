# classroom_api/api/routers/classes.py
from fastapi import APIRouter, Depends, HTTPException, status, Query
from sqlalchemy.orm import Session
from sqlalchemy.exc import SQLAlchemyError
from typing import Optional
import logging

from classroom_api.core.db import get_db
from classroom_api.core.errors import InsertFailedError
from classroom_api.api.deps.pagination import get_page_request
from classroom_api.api.deps.params import parse_int_id, parse_path_role
from classroom_api.schemas.class_schema import (
    ClassCreate,
    ClassDetail,
    ClassDetailResponse,
    ClassListResponse,
    ClassWithSubjectAndTeacher,
)
from classroom_api.schemas.common import CreatedResponse, Pagination
from classroom_api.schemas.user import UserListResponse, UserOut
from classroom_api.services.class_service import ClassService
from classroom_api.services.pagination import PageRequest

logger = logging.getLogger(__name__)
router = APIRouter()


@router.get("", response_model=ClassListResponse)
async def list_classes(
    search: Optional[str] = Query(None),
    subject: Optional[str] = Query(None),
    teacher: Optional[str] = Query(None),
    page_request: PageRequest = Depends(get_page_request),
    db: Session = Depends(get_db)
):
    """List classes with optional search, subject and teacher filters"""
    try:
        page = ClassService(db).list_classes(
            page_request, search=search, subject=subject, teacher=teacher
        )
    except SQLAlchemyError as e:
        logger.error(f"GET /classes error: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to fetch classes"
        )

    return ClassListResponse(
        data=[
            ClassWithSubjectAndTeacher.from_row(class_obj, subject_obj, teacher_obj)
            for class_obj, subject_obj, teacher_obj in page.items
        ],
        pagination=Pagination.build(page_request.page, page_request.limit, page.total)
    )


@router.post("", response_model=CreatedResponse, status_code=status.HTTP_201_CREATED)
async def create_class(
    class_data: ClassCreate,
    db: Session = Depends(get_db)
):
    """Create a new class with a generated invite code"""
    try:
        class_id = ClassService(db).create_class(class_data)
    except (SQLAlchemyError, InsertFailedError) as e:
        db.rollback()
        logger.error(f"POST /classes error: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to create class"
        )

    return {"data": {"id": class_id}}


@router.get("/{class_id}", response_model=ClassDetailResponse)
async def get_class(
    class_id: str,
    db: Session = Depends(get_db)
):
    """Get class details with subject, department and teacher"""
    class_pk = parse_int_id(class_id, "class")

    try:
        row = ClassService(db).get_class_detail(class_pk)
    except SQLAlchemyError as e:
        logger.error(f"GET /classes/{class_id} error: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to fetch class details"
        )

    if not row:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Class not found"
        )

    return ClassDetailResponse(data=ClassDetail.from_row(*row))


@router.get("/{class_id}/users", response_model=UserListResponse)
async def list_class_users(
    class_id: str,
    role: Optional[str] = Query(None),
    page_request: PageRequest = Depends(get_page_request),
    db: Session = Depends(get_db)
):
    """List the teacher or the enrolled students of a class"""
    class_pk = parse_int_id(class_id, "class")
    role = parse_path_role(role)

    try:
        service = ClassService(db)
        if not service.exists(class_pk):
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Class not found"
            )
        page = service.list_users(class_pk, role, page_request)
    except SQLAlchemyError as e:
        logger.error(f"GET /classes/{class_id}/users error: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to fetch class users"
        )

    return UserListResponse(
        data=[UserOut.model_validate(u) for u in page.items],
        pagination=Pagination.build(page_request.page, page_request.limit, page.total)
    )
