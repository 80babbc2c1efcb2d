# classroom_api/services/relationships.py - Role-dependent related-entity listings
"""
Lists the entities related to a root record (a user, subject or class) where
the foreign-key path between them depends on a role.

A teacher reaches subjects and departments through the classes they teach;
a student reaches them through their enrollments. Listing the users of a
subject or class walks the same tables in the other direction. Every
supported combination is one row in ``JOIN_PATHS``; ``RelationshipResolver``
turns a row into a distinct count and a de-duplicated page.
"""
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Dict, Optional, Tuple
import logging

from sqlalchemy import Select, and_, distinct, func, select
from sqlalchemy.orm import Session
from sqlalchemy.sql.elements import ColumnElement

from classroom_api.core.errors import InvalidArgumentError
from classroom_api.models import Class, Department, Enrollment, Subject, User, UserRole
from classroom_api.services.pagination import Page, PageRequest

logger = logging.getLogger(__name__)


class RootKind(str, Enum):
    USER = "user"
    SUBJECT = "subject"
    CLASS = "class"


class RelatedKind(str, Enum):
    DEPARTMENTS = "departments"
    SUBJECTS = "subjects"
    USERS = "users"


PATH_ROLES = (UserRole.TEACHER.value, UserRole.STUDENT.value)


@dataclass(frozen=True)
class JoinPath:
    """
    One way of walking from a root record to a related entity.

    ``joins`` are inner joins applied after ``target``; ``predicate`` builds
    the filter for a given root id. ``parent`` is an optional entity loaded
    alongside each row (outer-joined on ``parent_on``) without affecting which
    rows match.
    """
    target: Any
    joins: Tuple[Tuple[Any, ColumnElement], ...]
    predicate: Callable[[Any], ColumnElement]
    parent: Optional[Any] = None
    parent_on: Optional[ColumnElement] = None


JOIN_PATHS: Dict[Tuple[RootKind, RelatedKind, str], JoinPath] = {
    (RootKind.USER, RelatedKind.DEPARTMENTS, UserRole.TEACHER.value): JoinPath(
        target=Department,
        joins=(
            (Subject, Subject.department_id == Department.id),
            (Class, Class.subject_id == Subject.id),
        ),
        predicate=lambda user_id: Class.teacher_id == user_id,
    ),
    (RootKind.USER, RelatedKind.DEPARTMENTS, UserRole.STUDENT.value): JoinPath(
        target=Department,
        joins=(
            (Subject, Subject.department_id == Department.id),
            (Class, Class.subject_id == Subject.id),
            (Enrollment, Enrollment.class_id == Class.id),
        ),
        predicate=lambda user_id: Enrollment.student_id == user_id,
    ),
    (RootKind.USER, RelatedKind.SUBJECTS, UserRole.TEACHER.value): JoinPath(
        target=Subject,
        joins=(
            (Class, Class.subject_id == Subject.id),
        ),
        predicate=lambda user_id: Class.teacher_id == user_id,
        parent=Department,
        parent_on=Subject.department_id == Department.id,
    ),
    (RootKind.USER, RelatedKind.SUBJECTS, UserRole.STUDENT.value): JoinPath(
        target=Subject,
        joins=(
            (Class, Class.subject_id == Subject.id),
            (Enrollment, Enrollment.class_id == Class.id),
        ),
        predicate=lambda user_id: Enrollment.student_id == user_id,
        parent=Department,
        parent_on=Subject.department_id == Department.id,
    ),
    (RootKind.SUBJECT, RelatedKind.USERS, UserRole.TEACHER.value): JoinPath(
        target=User,
        joins=(
            (Class, Class.teacher_id == User.id),
        ),
        predicate=lambda subject_id: and_(
            User.role == UserRole.TEACHER.value,
            Class.subject_id == subject_id,
        ),
    ),
    (RootKind.SUBJECT, RelatedKind.USERS, UserRole.STUDENT.value): JoinPath(
        target=User,
        joins=(
            (Enrollment, Enrollment.student_id == User.id),
            (Class, Enrollment.class_id == Class.id),
        ),
        predicate=lambda subject_id: and_(
            User.role == UserRole.STUDENT.value,
            Class.subject_id == subject_id,
        ),
    ),
    (RootKind.CLASS, RelatedKind.USERS, UserRole.TEACHER.value): JoinPath(
        target=User,
        joins=(
            (Class, Class.teacher_id == User.id),
        ),
        predicate=lambda class_id: and_(
            User.role == UserRole.TEACHER.value,
            Class.id == class_id,
        ),
    ),
    (RootKind.CLASS, RelatedKind.USERS, UserRole.STUDENT.value): JoinPath(
        target=User,
        joins=(
            (Enrollment, Enrollment.student_id == User.id),
        ),
        predicate=lambda class_id: and_(
            User.role == UserRole.STUDENT.value,
            Enrollment.class_id == class_id,
        ),
    ),
}


def get_join_path(root: RootKind, related: RelatedKind, role: str) -> JoinPath:
    try:
        return JOIN_PATHS[(root, related, role)]
    except KeyError:
        raise InvalidArgumentError(
            f"No {related.value} path from {root.value} for role '{role}'"
        ) from None


class RelationshipResolver:
    """Counts and pages the entities reachable from a root record"""

    def __init__(self, db: Session):
        self.db = db

    @staticmethod
    def _joined(stmt: Select, path: JoinPath, root_id: Any) -> Select:
        for model, onclause in path.joins:
            stmt = stmt.join(model, onclause)
        return stmt.where(path.predicate(root_id))

    def count_query(self, path: JoinPath, root_id: Any) -> Select:
        # DISTINCT on the target id; one-to-many joins repeat target rows
        stmt = select(func.count(distinct(path.target.id))).select_from(path.target)
        return self._joined(stmt, path, root_id)

    def data_query(self, path: JoinPath, root_id: Any, page_request: PageRequest) -> Select:
        entities = [path.target]
        group_by = list(path.target.__table__.columns)

        stmt = select(path.target)
        if path.parent is not None:
            entities.append(path.parent)
            group_by.extend(path.parent.__table__.columns)
            stmt = select(*entities).select_from(path.target)
            stmt = stmt.outerjoin(path.parent, path.parent_on)

        stmt = self._joined(stmt, path, root_id)
        return (
            stmt.group_by(*group_by)
            .order_by(path.target.created_at.desc(), path.target.id.asc())
            .offset(page_request.offset)
            .limit(page_request.limit)
        )

    def resolve(
        self,
        root: RootKind,
        root_id: Any,
        related: RelatedKind,
        role: str,
        page_request: PageRequest,
    ) -> Page:
        """
        List ``related`` entities of a root record as seen by ``role``.

        Returns a Page whose items are model instances, or
        ``(model, parent)`` tuples when the path loads a parent.

        Raises:
            InvalidArgumentError: if no join path exists for the combination
        """
        path = get_join_path(root, related, role)

        total = self.db.execute(self.count_query(path, root_id)).scalar() or 0
        result = self.db.execute(self.data_query(path, root_id, page_request))

        if path.parent is not None:
            items = [tuple(row) for row in result.all()]
        else:
            items = list(result.scalars().all())

        logger.debug(
            f"Resolved {related.value} for {root.value} {root_id} as {role}: "
            f"{len(items)} of {total}"
        )
        return Page(items=items, total=total)
