# classroom_api/api/routers/users.py
from fastapi import APIRouter, Depends, HTTPException, status, Query
from sqlalchemy.orm import Session
from sqlalchemy.exc import SQLAlchemyError
from typing import Optional
import logging

from classroom_api.core.db import get_db
from classroom_api.api.deps.pagination import get_page_request
from classroom_api.models import User
from classroom_api.schemas.common import Pagination
from classroom_api.schemas.department import DepartmentListResponse, DepartmentOut
from classroom_api.schemas.subject import SubjectListResponse, SubjectWithDepartment
from classroom_api.schemas.user import UserDetailResponse, UserListResponse, UserOut
from classroom_api.services.pagination import PageRequest
from classroom_api.services.relationships import RelatedKind
from classroom_api.services.user_service import UserService

logger = logging.getLogger(__name__)
router = APIRouter()


def _load_user(service: UserService, user_id: str) -> User:
    user = service.get_user(user_id)
    if not user:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="User not found"
        )
    return user


@router.get("", response_model=UserListResponse)
async def list_users(
    search: Optional[str] = Query(None),
    role: Optional[str] = Query(None),
    page_request: PageRequest = Depends(get_page_request),
    db: Session = Depends(get_db)
):
    """List users with optional search, role filter and pagination"""
    try:
        page = UserService(db).list_users(page_request, search=search, role=role)
    except SQLAlchemyError as e:
        logger.error(f"GET /users error: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to fetch users"
        )

    return UserListResponse(
        data=[UserOut.model_validate(u) for u in page.items],
        pagination=Pagination.build(page_request.page, page_request.limit, page.total)
    )


@router.get("/{user_id}", response_model=UserDetailResponse)
async def get_user(
    user_id: str,
    db: Session = Depends(get_db)
):
    """Get user by ID"""
    try:
        user = _load_user(UserService(db), user_id)
    except SQLAlchemyError as e:
        logger.error(f"GET /users/{user_id} error: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to fetch user"
        )

    return UserDetailResponse(data=UserOut.model_validate(user))


@router.get("/{user_id}/departments", response_model=DepartmentListResponse)
async def list_user_departments(
    user_id: str,
    page_request: PageRequest = Depends(get_page_request),
    db: Session = Depends(get_db)
):
    """Departments a teacher teaches in, or a student is enrolled in"""
    try:
        service = UserService(db)
        user = _load_user(service, user_id)
        page = service.list_related(user, RelatedKind.DEPARTMENTS, page_request)
    except SQLAlchemyError as e:
        logger.error(f"GET /users/{user_id}/departments error: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to fetch user departments"
        )

    if page is None:
        return DepartmentListResponse(data=[], pagination=Pagination.empty())

    return DepartmentListResponse(
        data=[DepartmentOut.model_validate(d) for d in page.items],
        pagination=Pagination.build(page_request.page, page_request.limit, page.total)
    )


@router.get("/{user_id}/subjects", response_model=SubjectListResponse)
async def list_user_subjects(
    user_id: str,
    page_request: PageRequest = Depends(get_page_request),
    db: Session = Depends(get_db)
):
    """Subjects a teacher teaches, or a student is enrolled in"""
    try:
        service = UserService(db)
        user = _load_user(service, user_id)
        page = service.list_related(user, RelatedKind.SUBJECTS, page_request)
    except SQLAlchemyError as e:
        logger.error(f"GET /users/{user_id}/subjects error: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to fetch user subjects"
        )

    if page is None:
        return SubjectListResponse(data=[], pagination=Pagination.empty())

    return SubjectListResponse(
        data=[SubjectWithDepartment.from_row(subject, department) for subject, department in page.items],
        pagination=Pagination.build(page_request.page, page_request.limit, page.total)
    )
