# classroom_api/api/routers/subjects.py
from fastapi import APIRouter, Depends, HTTPException, status, Query
from sqlalchemy.orm import Session
from sqlalchemy.exc import SQLAlchemyError
from typing import Optional
import logging

from classroom_api.core.db import get_db
from classroom_api.core.errors import InsertFailedError
from classroom_api.api.deps.pagination import get_page_request
from classroom_api.api.deps.params import parse_int_id, parse_path_role
from classroom_api.schemas.class_schema import ClassWithTeacher, SubjectClassListResponse
from classroom_api.schemas.common import CreatedResponse, Pagination
from classroom_api.schemas.subject import (
    SubjectCreate,
    SubjectDetailResponse,
    SubjectListResponse,
    SubjectWithDepartment,
)
from classroom_api.schemas.user import UserListResponse, UserOut
from classroom_api.services.pagination import PageRequest
from classroom_api.services.subject_service import SubjectService

logger = logging.getLogger(__name__)
router = APIRouter()


def _require_subject(service: SubjectService, subject_id: int) -> None:
    if not service.exists(subject_id):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Subject not found"
        )


@router.get("", response_model=SubjectListResponse)
async def list_subjects(
    search: Optional[str] = Query(None),
    department: Optional[str] = Query(None),
    page_request: PageRequest = Depends(get_page_request),
    db: Session = Depends(get_db)
):
    """List subjects with optional search, department filter and pagination"""
    try:
        page = SubjectService(db).list_subjects(page_request, search=search, department=department)
    except SQLAlchemyError as e:
        logger.error(f"GET /subjects error: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to fetch subjects"
        )

    return SubjectListResponse(
        data=[SubjectWithDepartment.from_row(subject, dept) for subject, dept in page.items],
        pagination=Pagination.build(page_request.page, page_request.limit, page.total)
    )


@router.post("", response_model=CreatedResponse, status_code=status.HTTP_201_CREATED)
async def create_subject(
    subject_data: SubjectCreate,
    db: Session = Depends(get_db)
):
    """Create a new subject"""
    try:
        subject_id = SubjectService(db).create_subject(subject_data)
    except (SQLAlchemyError, InsertFailedError) as e:
        db.rollback()
        logger.error(f"POST /subjects error: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to create subject"
        )

    return {"data": {"id": subject_id}}


@router.get("/{subject_id}", response_model=SubjectDetailResponse)
async def get_subject(
    subject_id: str,
    db: Session = Depends(get_db)
):
    """Get subject details with class count"""
    subject_pk = parse_int_id(subject_id, "subject")

    try:
        detail = SubjectService(db).get_subject_detail(subject_pk)
    except SQLAlchemyError as e:
        logger.error(f"GET /subjects/{subject_id} error: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to fetch subject details"
        )

    if not detail:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Subject not found"
        )

    return {
        "data": {
            "subject": SubjectWithDepartment.from_row(detail.subject, detail.department),
            "totals": {"classes": detail.class_count},
        }
    }


@router.get("/{subject_id}/classes", response_model=SubjectClassListResponse)
async def list_subject_classes(
    subject_id: str,
    page_request: PageRequest = Depends(get_page_request),
    db: Session = Depends(get_db)
):
    """List classes of a subject with their teachers"""
    subject_pk = parse_int_id(subject_id, "subject")

    try:
        service = SubjectService(db)
        _require_subject(service, subject_pk)
        page = service.list_classes(subject_pk, page_request)
    except SQLAlchemyError as e:
        logger.error(f"GET /subjects/{subject_id}/classes error: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to fetch subject classes"
        )

    return SubjectClassListResponse(
        data=[ClassWithTeacher.from_row(class_obj, teacher) for class_obj, teacher in page.items],
        pagination=Pagination.build(page_request.page, page_request.limit, page.total)
    )


@router.get("/{subject_id}/users", response_model=UserListResponse)
async def list_subject_users(
    subject_id: str,
    role: Optional[str] = Query(None),
    page_request: PageRequest = Depends(get_page_request),
    db: Session = Depends(get_db)
):
    """List teachers or students of a subject"""
    subject_pk = parse_int_id(subject_id, "subject")
    role = parse_path_role(role)

    try:
        service = SubjectService(db)
        _require_subject(service, subject_pk)
        page = service.list_users(subject_pk, role, page_request)
    except SQLAlchemyError as e:
        logger.error(f"GET /subjects/{subject_id}/users error: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to fetch subject users"
        )

    return UserListResponse(
        data=[UserOut.model_validate(u) for u in page.items],
        pagination=Pagination.build(page_request.page, page_request.limit, page.total)
    )
