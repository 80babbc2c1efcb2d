# classroom_api/services/user_service.py - User listings and lookups
from typing import Optional
import logging

from sqlalchemy import select
from sqlalchemy.orm import Session

from classroom_api.models import User
from classroom_api.services.filters import combine, search_any
from classroom_api.services.pagination import Page, PageRequest, paginate
from classroom_api.services.relationships import (
    PATH_ROLES,
    RelatedKind,
    RelationshipResolver,
    RootKind,
)

logger = logging.getLogger(__name__)


class UserService:
    """Read access to users and the records they can see"""

    def __init__(self, db: Session):
        self.db = db

    def list_users(
        self,
        page_request: PageRequest,
        search: Optional[str] = None,
        role: Optional[str] = None,
    ) -> Page:
        """Users matching ``search`` (name or email) and ``role``, newest first"""
        query = select(User)

        where_clause = combine([
            search_any(search, User.name, User.email),
            User.role == role if role else None,
        ])
        if where_clause is not None:
            query = query.where(where_clause)

        query = query.order_by(User.created_at.desc(), User.id.asc())
        page = paginate(self.db, query, page_request)
        page.items = [row[0] for row in page.items]
        return page

    def get_user(self, user_id: str) -> Optional[User]:
        return self.db.execute(
            select(User).where(User.id == user_id)
        ).scalar_one_or_none()

    def list_related(
        self,
        user: User,
        related: RelatedKind,
        page_request: PageRequest,
    ) -> Optional[Page]:
        """
        Departments or subjects the user reaches through their role.

        Returns None when the user's role has no relationship path
        (anything other than teacher or student).
        """
        if user.role not in PATH_ROLES:
            logger.info(f"User {user.id} has role '{user.role}'; no {related.value} path")
            return None

        return RelationshipResolver(self.db).resolve(
            RootKind.USER, user.id, related, user.role, page_request
        )
