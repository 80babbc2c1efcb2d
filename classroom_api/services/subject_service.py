# classroom_api/services/subject_service.py - Subject listings, details and creation
from dataclasses import dataclass
from typing import Optional
import logging

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from classroom_api.core.errors import InsertFailedError
from classroom_api.models import Class, Department, Subject, User, is_storable_id
from classroom_api.schemas.subject import SubjectCreate
from classroom_api.services.filters import combine, contains, search_any
from classroom_api.services.pagination import Page, PageRequest, paginate
from classroom_api.services.relationships import RelatedKind, RelationshipResolver, RootKind

logger = logging.getLogger(__name__)


@dataclass
class SubjectDetail:
    subject: Subject
    department: Optional[Department]
    class_count: int


class SubjectService:
    def __init__(self, db: Session):
        self.db = db

    def list_subjects(
        self,
        page_request: PageRequest,
        search: Optional[str] = None,
        department: Optional[str] = None,
    ) -> Page:
        """Subjects with their department; items are (Subject, Department) rows"""
        query = (
            select(Subject, Department)
            .outerjoin(Department, Subject.department_id == Department.id)
        )

        where_clause = combine([
            search_any(search, Subject.name, Subject.code),
            contains(Department.name, department) if department else None,
        ])
        if where_clause is not None:
            query = query.where(where_clause)

        query = query.order_by(Subject.created_at.desc(), Subject.id.asc())
        return paginate(self.db, query, page_request)

    def exists(self, subject_id: int) -> bool:
        if not is_storable_id(subject_id):
            return False
        return self.db.execute(
            select(Subject.id).where(Subject.id == subject_id)
        ).first() is not None

    def get_subject_detail(self, subject_id: int) -> Optional[SubjectDetail]:
        if not is_storable_id(subject_id):
            return None
        row = self.db.execute(
            select(Subject, Department)
            .outerjoin(Department, Subject.department_id == Department.id)
            .where(Subject.id == subject_id)
        ).first()
        if row is None:
            return None

        class_count = self.db.execute(
            select(func.count(Class.id)).where(Class.subject_id == subject_id)
        ).scalar() or 0

        subject, department = row
        return SubjectDetail(subject=subject, department=department, class_count=class_count)

    def list_classes(self, subject_id: int, page_request: PageRequest) -> Page:
        """Classes of a subject with their teacher; items are (Class, User) rows"""
        query = (
            select(Class, User)
            .outerjoin(User, Class.teacher_id == User.id)
            .where(Class.subject_id == subject_id)
            .order_by(Class.created_at.desc(), Class.id.asc())
        )
        return paginate(self.db, query, page_request)

    def list_users(self, subject_id: int, role: str, page_request: PageRequest) -> Page:
        """Teachers of, or students enrolled in, any class of the subject"""
        return RelationshipResolver(self.db).resolve(
            RootKind.SUBJECT, subject_id, RelatedKind.USERS, role, page_request
        )

    def create_subject(self, data: SubjectCreate) -> int:
        """
        Insert a subject and return its id.

        Raises:
            InsertFailedError: if the insert produced no id
            SQLAlchemyError: on constraint or storage failures
        """
        subject = Subject(
            department_id=data.department_id,
            name=data.name,
            code=data.code,
            description=data.description,
        )
        self.db.add(subject)
        self.db.flush()

        if subject.id is None:
            raise InsertFailedError("subjects")

        self.db.commit()
        logger.info(f"Subject created: {subject.code} (id={subject.id})")
        return subject.id
