# classroom_api/services/class_service.py - Class listings, details and creation
import secrets
import string
from typing import Optional, Tuple
import logging

from sqlalchemy import select
from sqlalchemy.orm import Session

from classroom_api.core.errors import InsertFailedError
from classroom_api.models import Class, Department, Subject, User, is_storable_id
from classroom_api.schemas.class_schema import ClassCreate
from classroom_api.services.filters import combine, contains, search_any
from classroom_api.services.pagination import Page, PageRequest, paginate
from classroom_api.services.relationships import RelatedKind, RelationshipResolver, RootKind

logger = logging.getLogger(__name__)

INVITE_CODE_ALPHABET = string.digits + string.ascii_lowercase
INVITE_CODE_LENGTH = 7


def generate_invite_code(length: int = INVITE_CODE_LENGTH) -> str:
    """Random base-36 token students use to join a class"""
    return "".join(secrets.choice(INVITE_CODE_ALPHABET) for _ in range(length))


class ClassService:
    def __init__(self, db: Session):
        self.db = db

    def list_classes(
        self,
        page_request: PageRequest,
        search: Optional[str] = None,
        subject: Optional[str] = None,
        teacher: Optional[str] = None,
    ) -> Page:
        """Classes with subject and teacher; items are (Class, Subject, User) rows"""
        query = (
            select(Class, Subject, User)
            .outerjoin(Subject, Class.subject_id == Subject.id)
            .outerjoin(User, Class.teacher_id == User.id)
        )

        where_clause = combine([
            search_any(search, Class.name, Class.invite_code),
            contains(Subject.name, subject) if subject else None,
            contains(User.name, teacher) if teacher else None,
        ])
        if where_clause is not None:
            query = query.where(where_clause)

        query = query.order_by(Class.created_at.desc(), Class.id.asc())
        return paginate(self.db, query, page_request)

    def exists(self, class_id: int) -> bool:
        if not is_storable_id(class_id):
            return False
        return self.db.execute(
            select(Class.id).where(Class.id == class_id)
        ).first() is not None

    def get_class_detail(
        self, class_id: int
    ) -> Optional[Tuple[Class, Optional[Subject], Optional[Department], Optional[User]]]:
        if not is_storable_id(class_id):
            return None
        row = self.db.execute(
            select(Class, Subject, Department, User)
            .outerjoin(Subject, Class.subject_id == Subject.id)
            .outerjoin(Department, Subject.department_id == Department.id)
            .outerjoin(User, Class.teacher_id == User.id)
            .where(Class.id == class_id)
        ).first()
        return tuple(row) if row is not None else None

    def list_users(self, class_id: int, role: str, page_request: PageRequest) -> Page:
        """The class teacher, or the students enrolled in the class"""
        return RelationshipResolver(self.db).resolve(
            RootKind.CLASS, class_id, RelatedKind.USERS, role, page_request
        )

    def create_class(self, data: ClassCreate) -> int:
        """
        Insert a class with a fresh invite code and no schedules.

        Raises:
            InsertFailedError: if the insert produced no id
            SQLAlchemyError: on constraint or storage failures
        """
        new_class = Class(
            subject_id=data.subject_id,
            teacher_id=data.teacher_id,
            invite_code=generate_invite_code(),
            name=data.name,
            description=data.description,
            banner_url=data.banner_url,
            banner_cld_pub_id=data.banner_cld_pub_id,
            capacity=data.capacity,
            status=data.status,
            schedules=[],
        )
        self.db.add(new_class)
        self.db.flush()

        if new_class.id is None:
            raise InsertFailedError("classes")

        self.db.commit()
        logger.info(f"Class created: {new_class.name} (id={new_class.id}, invite={new_class.invite_code})")
        return new_class.id
